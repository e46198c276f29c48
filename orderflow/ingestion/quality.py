"""Advisory quality checks for raw import rows."""
import logging
from typing import Iterable, List

from orderflow.core.models import RawImportRow


logger = logging.getLogger(__name__)


def validate_row(row: RawImportRow) -> List[str]:
    """Return a list of quality issues for a single row."""

    issues: List[str] = []

    if not row.customer_name:
        issues.append("missing customer name")
    if not row.items_raw.strip():
        issues.append("empty items text")
    if row.unit_price < 0:
        issues.append("negative unit price")
    # Without a phone or an address the customer can never be matched again.
    if not (row.phone or row.address):
        issues.append("contact info missing")

    return issues


def apply_row_checks(rows: Iterable[RawImportRow]) -> List[RawImportRow]:
    """Log issues for each row and return the rows unchanged."""

    checked: List[RawImportRow] = []

    for index, row in enumerate(rows, start=1):
        issues = validate_row(row)
        if issues:
            logger.warning("Quality issues for row %d (%s): %s", index, row.customer_name or "?", "; ".join(issues))
        checked.append(row)

    return checked
