"""Sinks for exporting order rows to CSV, Excel, or Google Sheets."""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Dict, Iterable, List

from orderflow.reporting.templates import TEMPLATE_HEADERS


def ensure_output_dir(output_path: Path) -> None:
    """Create parent folders for sink outputs when missing."""

    output_path.parent.mkdir(parents=True, exist_ok=True)


def write_csv(rows: Iterable[Dict[str, Any]], output_path: Path) -> None:
    """Write order rows to a CSV file with consistent headers."""

    rows = list(rows)
    ensure_output_dir(output_path)

    with output_path.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=TEMPLATE_HEADERS)
        writer.writeheader()
        writer.writerows(rows)


def write_excel(rows: Iterable[Dict[str, Any]], output_path: Path) -> None:
    """Write rows to an Excel workbook using openpyxl."""

    from openpyxl import Workbook

    rows = list(rows)
    ensure_output_dir(output_path)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "orders"
    sheet.append(TEMPLATE_HEADERS)
    for row in rows:
        sheet.append([row.get(header, "") for header in TEMPLATE_HEADERS])
    workbook.save(output_path)


def push_to_google_sheets(
    rows: Iterable[Dict[str, Any]],
    spreadsheet_id: str,
    worksheet_title: str = "Sheet1",
    service_account_path: Path | None = None,
) -> None:
    """Upload rows to a Google Sheets worksheet using a service account."""

    rows = list(rows)
    if not rows:
        return

    import gspread

    client = (
        gspread.service_account(filename=str(service_account_path))
        if service_account_path
        else gspread.service_account()
    )
    worksheet = client.open_by_key(spreadsheet_id).worksheet(worksheet_title)
    worksheet.clear()
    headers: List[str] = list(TEMPLATE_HEADERS)
    worksheet.append_rows([headers] + [[row.get(h, "") for h in headers] for row in rows])
