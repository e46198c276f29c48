"""Split free-form item text such as ``"nan2.375 cá trác2"`` into name/quantity pairs."""
from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import List

# A name is a lazy run of letters (any script), spaces, periods, hyphens and
# parentheses. It ends either at a quantity that is followed by whitespace and
# the next item's first letter, or at the end of the text. The lookahead keeps
# one item's quantity from leaking into the next item's name.
_ITEM_PATTERN = re.compile(
    r"((?:[^\W\d_]|[\s.\-()])+?)"
    r"(?:([0-9]+(?:\.[0-9]+)?)(?=\s+[^\W\d_]|$)|$)"
)


@dataclass(frozen=True)
class ParsedItem:
    name: str
    quantity: float = 1.0


def _parse_quantity(raw: str | None) -> float:
    if not raw:
        return 1.0
    try:
        return float(raw)
    except ValueError:
        return 1.0


def tokenize_items(raw: str | None) -> List[ParsedItem]:
    """Return the items described in ``raw`` in the order they appear.

    Items without a trailing number get quantity 1. When nothing matches but
    the text is not blank, the whole text becomes a single item.
    """

    if not raw:
        return []
    text = unicodedata.normalize("NFC", raw).strip()
    if not text:
        return []

    items: List[ParsedItem] = []
    for match in _ITEM_PATTERN.finditer(text):
        name = match.group(1).strip()
        if not name:
            continue
        items.append(ParsedItem(name=name, quantity=_parse_quantity(match.group(2))))

    if not items:
        items.append(ParsedItem(name=text, quantity=1.0))
    return items
