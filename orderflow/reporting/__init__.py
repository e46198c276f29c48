"""Export helpers for stored orders."""
from orderflow.reporting.sinks import push_to_google_sheets, write_csv, write_excel
from orderflow.reporting.templates import TEMPLATE_HEADERS, order_to_row, orders_to_rows

__all__ = [
    "TEMPLATE_HEADERS",
    "order_to_row",
    "orders_to_rows",
    "push_to_google_sheets",
    "write_csv",
    "write_excel",
]
