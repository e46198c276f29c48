"""Dictionary-backed store for tests and embedding code."""
from __future__ import annotations

import copy
from dataclasses import asdict
from typing import Dict, List, Optional

from orderflow.core.models import Customer, Order, Product
from orderflow.storage.base import customer_matches


class MemoryStore:
    """Keeps copies of every entity so callers cannot mutate stored state."""

    def __init__(self) -> None:
        self.customers: Dict[str, Customer] = {}
        self.products: Dict[str, Product] = {}
        self.orders: Dict[str, Order] = {}

    def find_matching_customer(self, phone: str, address: str) -> Optional[Customer]:
        for customer in self.customers.values():
            if customer_matches(customer, phone, address):
                return copy.deepcopy(customer)
        return None

    def upsert_customer(self, customer: Customer) -> None:
        existing = self.customers.get(customer.id)
        if existing is None:
            self.customers[customer.id] = copy.deepcopy(customer)
            return
        merged = asdict(existing)
        merged.update({key: value for key, value in asdict(customer).items() if value not in (None, "")})
        self.customers[customer.id] = Customer(**merged)

    def get_product(self, product_id: str) -> Optional[Product]:
        product = self.products.get(product_id)
        return copy.deepcopy(product) if product else None

    def save_product(self, product: Product) -> None:
        self.products[product.id] = copy.deepcopy(product)

    def list_products(self) -> List[Product]:
        return [copy.deepcopy(product) for product in self.products.values()]

    def save_order(self, order: Order) -> None:
        self.orders[order.id] = copy.deepcopy(order)

    def get_order(self, order_id: str) -> Optional[Order]:
        order = self.orders.get(order_id)
        return copy.deepcopy(order) if order else None

    def list_orders(self) -> List[Order]:
        return [copy.deepcopy(order) for order in self.orders.values()]
