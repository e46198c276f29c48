"""Single-file JSON store used by the command line."""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from orderflow.core.errors import ResolutionError
from orderflow.core.models import Customer, Order, Product
from orderflow.storage.base import customer_matches

logger = logging.getLogger(__name__)

_SECTIONS = ("customers", "products", "orders")


class JsonFileStore:
    """Whole-document store: every write rewrites the file atomically."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, Dict[str, Any]]:
        if not self.path.exists():
            return {section: {} for section in _SECTIONS}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as exc:
            raise ResolutionError(f"Could not read store {self.path}: {exc}") from exc
        for section in _SECTIONS:
            data.setdefault(section, {})
        return data

    def _write(self, data: Dict[str, Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            raise ResolutionError(f"Could not write store {self.path}: {exc}") from exc

    def _put(self, section: str, key: str, value: Dict[str, Any]) -> None:
        data = self._read()
        data[section][key] = value
        self._write(data)

    def find_matching_customer(self, phone: str, address: str) -> Optional[Customer]:
        for raw in self._read()["customers"].values():
            customer = Customer.from_dict(raw)
            if customer_matches(customer, phone, address):
                return customer
        return None

    def upsert_customer(self, customer: Customer) -> None:
        data = self._read()
        merged = data["customers"].get(customer.id, {})
        merged.update({key: value for key, value in customer.to_dict().items() if value not in (None, "")})
        data["customers"][customer.id] = merged
        self._write(data)
        logger.debug("Upserted customer %s", customer.id)

    def get_product(self, product_id: str) -> Optional[Product]:
        raw = self._read()["products"].get(product_id)
        return Product.from_dict(raw) if raw else None

    def save_product(self, product: Product) -> None:
        self._put("products", product.id, product.to_dict())

    def list_products(self) -> List[Product]:
        return [Product.from_dict(raw) for raw in self._read()["products"].values()]

    def save_order(self, order: Order) -> None:
        self._put("orders", order.id, order.to_dict())

    def get_order(self, order_id: str) -> Optional[Order]:
        raw = self._read()["orders"].get(order_id)
        return Order.from_dict(raw) if raw else None

    def list_orders(self) -> List[Order]:
        return [Order.from_dict(raw) for raw in self._read()["orders"].values()]
