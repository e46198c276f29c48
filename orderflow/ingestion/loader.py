"""Loaders that turn order sheets and statements into rows or plain text."""
from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List

from orderflow.core.errors import SourceFormatError
from orderflow.core.models import RawImportRow

logger = logging.getLogger(__name__)

ROW_FIELDS = ["customer_name", "address", "phone", "items_raw", "unit_price"]


def read_text(path: Path) -> str:
    """Read UTF-8 text from disk."""

    return path.read_text(encoding="utf-8")


def _rows_from_dicts(raw_rows: Iterable[Dict[str, Any]]) -> List[RawImportRow]:
    rows: List[RawImportRow] = []
    for raw in raw_rows:
        if not any(value not in (None, "") for value in raw.values()):
            continue
        rows.append(RawImportRow.from_dict(raw))
    return rows


def _load_json(path: Path) -> List[RawImportRow]:
    data = json.loads(read_text(path))
    if isinstance(data, dict):
        data = data.get("rows", [])
    if not isinstance(data, list):
        raise SourceFormatError(f"{path.name} must contain a list of rows")
    return _rows_from_dicts(item for item in data if isinstance(item, dict))


def _load_csv(path: Path) -> List[RawImportRow]:
    with path.open(newline="", encoding="utf-8-sig") as handle:
        return _rows_from_dicts(csv.DictReader(handle))


def _load_xlsx(path: Path) -> List[RawImportRow]:
    from openpyxl import load_workbook

    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        sheet = workbook.worksheets[0]
        values = sheet.iter_rows(values_only=True)
        header = next(values, None)
        if not header:
            return []
        keys = [str(cell).strip() if cell is not None else "" for cell in header]
        return _rows_from_dicts(dict(zip(keys, row)) for row in values)
    finally:
        workbook.close()


_LOADERS = {
    ".json": _load_json,
    ".csv": _load_csv,
    ".xlsx": _load_xlsx,
}


def load_rows(path: Path) -> List[RawImportRow]:
    """Read raw import rows from a JSON, CSV, or Excel file."""

    loader = _LOADERS.get(path.suffix.lower())
    if loader is None:
        raise SourceFormatError(
            f"Unsupported row file {path.name}; expected one of {', '.join(sorted(_LOADERS))}"
        )
    try:
        rows = loader(path)
    except (OSError, ValueError, KeyError) as exc:
        raise SourceFormatError(f"Could not read rows from {path}: {exc}") from exc
    logger.info("Loaded %d rows from %s", len(rows), path)
    return rows


def extract_pdf_text(path: Path) -> str:
    """Extract the text of every page of a PDF, one page per line block."""

    import pdfplumber

    try:
        with pdfplumber.open(path) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as exc:
        raise SourceFormatError(f"Could not read PDF {path}: {exc}") from exc
    text = "\n".join(pages)
    logger.debug("Extracted %d characters from %s", len(text), path)
    return text


def load_text(path: Path) -> str:
    """Return the text of a statement or order dump, reading PDFs as needed."""

    if path.suffix.lower() == ".pdf":
        return extract_pdf_text(path)
    try:
        return read_text(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceFormatError(f"Could not read text from {path}: {exc}") from exc
