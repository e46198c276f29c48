"""Mapping utilities that flatten orders into spreadsheet rows."""
from typing import Any, Dict, Iterable, List

from orderflow.core.models import Order


TEMPLATE_HEADERS = [
    "Order_ID",
    "Batch",
    "Customer",
    "Phone",
    "Address",
    "Items",
    "Total_Price",
    "Payment_Method",
    "Verified",
    "Status",
    "Created_At",
]


def _clean_text(value: str | None) -> str:
    if not value:
        return ""
    return " ".join(value.split())


def _format_quantity(value: float) -> str:
    return f"{value:g}"


def _format_items(order: Order) -> str:
    return ", ".join(f"{_clean_text(item.name)} x{_format_quantity(item.quantity)}" for item in order.items)


def order_to_row(order: Order) -> Dict[str, Any]:
    """Convert an Order into the export template dictionary."""

    return {
        "Order_ID": order.id,
        "Batch": _clean_text(order.batch_id),
        "Customer": _clean_text(order.customer_name),
        "Phone": order.customer_phone or "",
        "Address": _clean_text(order.address),
        "Items": _format_items(order),
        "Total_Price": str(order.total_price),
        "Payment_Method": order.payment_method.value,
        "Verified": "yes" if order.payment_verified else "no",
        "Status": order.status.value,
        "Created_At": order.created_at.strftime("%Y-%m-%d %H:%M"),
    }


def orders_to_rows(orders: Iterable[Order]) -> List[Dict[str, Any]]:
    """Convert orders into template-aligned rows, oldest first."""

    return [order_to_row(order) for order in sorted(orders, key=lambda o: o.order_index)]
