"""Shared normalization and identifier helpers."""
from __future__ import annotations

import hashlib
import re
import unicodedata
import uuid

_LOCALE_LETTERS = str.maketrans({"đ": "d", "Đ": "D"})


def strip_diacritics(text: str) -> str:
    """Remove combining accents and map locale-specific letters to ASCII."""

    decomposed = unicodedata.normalize("NFD", text or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.translate(_LOCALE_LETTERS)


def normalize_string(text: str) -> str:
    """Lowercase, accent-free, single-spaced form used for comparisons."""

    return " ".join(strip_diacritics(text).lower().split())


def normalize_phone(raw: str | None) -> str:
    """Keep only digits; turn an ``84`` country prefix into a leading ``0``."""

    digits = re.sub(r"\D", "", raw or "")
    if digits.startswith("84") and len(digits) == 11:
        digits = "0" + digits[2:]
    return digits


def generate_product_sku(name: str) -> str:
    """Derive a stable product identifier from a product name.

    The same name always yields the same identifier, whatever its casing,
    accents, or spacing, so repeated imports converge on one product.
    """

    slug = re.sub(r"[^a-z0-9]+", "-", normalize_string(name)).strip("-")
    if slug:
        return slug
    digest = hashlib.sha256((name or "").strip().encode("utf-8")).hexdigest()
    return f"sp-{digest[:8]}"


def generate_order_id() -> str:
    """Return a fresh 8-character uppercase alphanumeric order code."""

    return uuid.uuid4().hex[:8].upper()
