"""Ingestion package for tokenizing item text and loading raw rows."""
from orderflow.ingestion.loader import extract_pdf_text, load_rows, load_text
from orderflow.ingestion.quality import apply_row_checks, validate_row
from orderflow.ingestion.tokenizer import ParsedItem, tokenize_items

__all__ = [
    "ParsedItem",
    "apply_row_checks",
    "extract_pdf_text",
    "load_rows",
    "load_text",
    "tokenize_items",
    "validate_row",
]
