"""Storage port used by the importer and the payment helpers.

Implementations are keyed stores: products and orders are upserted by their
identifier (last writer wins), customers are merged on identifier.
"""
from __future__ import annotations

from typing import List, Optional, Protocol

from orderflow.core.models import Customer, Order, Product
from orderflow.core.utils import normalize_phone, normalize_string


class Storage(Protocol):
    """Operations the orderflow core needs from persistent storage."""

    def find_matching_customer(self, phone: str, address: str) -> Optional[Customer]:
        """Return a customer with the same phone, or the same address when no phone is given."""

    def upsert_customer(self, customer: Customer) -> None:
        ...

    def get_product(self, product_id: str) -> Optional[Product]:
        ...

    def save_product(self, product: Product) -> None:
        ...

    def list_products(self) -> List[Product]:
        ...

    def save_order(self, order: Order) -> None:
        ...

    def get_order(self, order_id: str) -> Optional[Order]:
        ...

    def list_orders(self) -> List[Order]:
        ...


def customer_matches(customer: Customer, phone: str, address: str) -> bool:
    """Shared matching rule: phone first, then normalized address."""

    clean_phone = normalize_phone(phone)
    if clean_phone:
        return normalize_phone(customer.phone) == clean_phone
    wanted = normalize_string(address)
    return bool(wanted) and normalize_string(customer.address) == wanted
