"""AI-backed structuring of pasted chat logs and PDF text into import rows."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import requests

from orderflow.core.config import Settings, load_settings
from orderflow.core.errors import ExternalServiceError
from orderflow.core.models import RawImportRow

logger = logging.getLogger(__name__)

MAX_INPUT_CHARS = 30000

SYSTEM_PROMPT = (
    "You are a data extraction assistant. The user sends raw text copied from a chat, "
    "a PDF or a spreadsheet containing a list of Vietnamese orders. Text extracted from PDFs "
    'often has broken spacing ("K h á c h") or corrupted glyphs; merge characters back into '
    "correct words. Ignore headers and footers. Respond ONLY with a JSON array where each "
    "element has 'customer_name', 'address', 'phone' (or null), 'items_raw' (the item text, "
    "keeping quantity numbers, e.g. \"gạo 2 cá 1\") and 'unit_price' (a number: \"120\" or "
    '"120.000" both mean 120; use 0 when missing).'
)


class TextStructurer:
    """Calls an OpenAI-compatible chat completions endpoint.

    Every failure raises ``ExternalServiceError``; there is no heuristic
    fallback and no retry.
    """

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None) -> None:
        self.settings = settings or load_settings()
        self.session = session or requests.Session()

    def structure(self, raw_text: str, known_products: Optional[Sequence[str]] = None) -> List[RawImportRow]:
        """Return the rows the model found in ``raw_text``."""

        if self.settings.ai_disabled:
            raise ExternalServiceError("AI structuring is disabled (AI_STRUCTURING_DISABLED=1)")
        if not self.settings.ai_api_key:
            raise ExternalServiceError("OPENAI_API_KEY is not configured")
        if not raw_text or not raw_text.strip():
            return []

        payload = {
            "model": self.settings.ai_model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": self._prompt(raw_text, known_products)},
            ],
            "temperature": 0,
        }
        logger.debug("Requesting structuring for %d characters", len(raw_text))

        try:
            response = self.session.post(
                f"{self.settings.ai_base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.settings.ai_api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
                timeout=60,
            )
            response.raise_for_status()
            content = response.json()["choices"][0]["message"]["content"]
        except (requests.RequestException, KeyError, IndexError, ValueError) as exc:
            logger.error("Structuring request failed: %s", exc)
            raise ExternalServiceError(f"Text structuring request failed: {exc}") from exc

        return self._parse_rows(content)

    def _prompt(self, raw_text: str, known_products: Optional[Sequence[str]]) -> str:
        fields: Dict[str, Any] = {"text": raw_text[:MAX_INPUT_CHARS]}
        if known_products:
            fields["known_products"] = list(known_products)[:200]
        return json.dumps(fields, ensure_ascii=False)

    def _parse_rows(self, content: str) -> List[RawImportRow]:
        text = (content or "").strip()
        if text.startswith("```"):
            text = text.strip("`")
            text = text[text.find("\n") + 1:] if "\n" in text else ""
        try:
            data = json.loads(text)
        except ValueError as exc:
            logger.error("Structuring returned invalid JSON: %.200s", content)
            raise ExternalServiceError("Text structuring returned invalid JSON") from exc

        if isinstance(data, dict):
            data = data.get("rows") or data.get("orders") or []
        if not isinstance(data, list):
            raise ExternalServiceError("Text structuring returned an unexpected shape")
        return [RawImportRow.from_dict(item) for item in data if isinstance(item, dict)]


def structure_import_text(raw_text: str, known_products: Optional[Sequence[str]] = None) -> List[RawImportRow]:
    """Structure ``raw_text`` with settings taken from the environment."""

    return TextStructurer().structure(raw_text, known_products)
