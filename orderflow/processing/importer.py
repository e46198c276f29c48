"""Batch import of raw order rows into customers, products, and orders.

Customers are written as soon as they are created. Products and orders are
collected for the whole batch and only written once every row has been
processed, products first so every order item points at a stored product.
If any row fails, the batch raises ``ImportBatchError`` and none of its
products or orders are written; the batch is meant to be retried as a whole.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Set

from orderflow.core.errors import ImportBatchError
from orderflow.core.models import (
    Customer,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    Product,
    RawImportRow,
    utcnow,
)
from orderflow.core.utils import generate_order_id, generate_product_sku, normalize_phone
from orderflow.ingestion.tokenizer import tokenize_items
from orderflow.storage.base import Storage

logger = logging.getLogger(__name__)

DEFAULT_SEED_STOCK = 50
PRICE_SCALE = 1000
MIN_PHONE_ID_LENGTH = 6


@dataclass
class ImportSummary:
    batch: str
    orders: int
    products: int
    customers_created: int

    @property
    def message(self) -> str:
        return (
            f'Imported {self.orders} orders into batch "{self.batch}". '
            f"Created/updated {self.products} products."
        )

    def __str__(self) -> str:
        return self.message


class BatchImporter:
    """Runs import batches; each call to ``run`` starts from an empty session."""

    def __init__(self, storage: Storage, batch_name: str, seed_stock: float = DEFAULT_SEED_STOCK) -> None:
        self.storage = storage
        self.batch_name = batch_name
        self.seed_stock = seed_stock
        self._reset()

    def _reset(self) -> None:
        self._session_products: Dict[str, Product] = {}
        self._known_products: Dict[str, Product] = {}
        self._pending_orders: List[Order] = []
        self._used_order_ids: Set[str] = set()
        self._customers_created = 0

    def run(self, rows: Iterable[RawImportRow]) -> ImportSummary:
        rows = list(rows)
        self._reset()
        logger.info("Importing %d rows into batch %r", len(rows), self.batch_name)
        self._known_products = {product.id: product for product in self.storage.list_products()}

        for index, row in enumerate(rows, start=1):
            try:
                self._pending_orders.append(self._process_row(row, index))
            except Exception as exc:
                logger.exception("Row %d of batch %r failed; nothing was saved", index, self.batch_name)
                raise ImportBatchError(self.batch_name, index, exc) from exc

        for product in self._session_products.values():
            self.storage.save_product(product)
        for order in self._pending_orders:
            self.storage.save_order(order)

        summary = ImportSummary(
            batch=self.batch_name,
            orders=len(self._pending_orders),
            products=len(self._session_products),
            customers_created=self._customers_created,
        )
        logger.info(summary.message)
        return summary

    def _process_row(self, row: RawImportRow, index: int) -> Order:
        clean_phone = normalize_phone(row.phone)
        customer_id = self._resolve_customer(row, clean_phone)

        items: List[OrderItem] = []
        calculated_total = 0.0
        for parsed in tokenize_items(row.items_raw):
            product = self._get_or_init_product(parsed.name)
            calculated_total += product.default_price * parsed.quantity
            items.append(
                OrderItem(
                    id=str(uuid.uuid4()),
                    product_id=product.id,
                    name=product.name,
                    quantity=parsed.quantity,
                    price=product.default_price,
                    import_price=product.import_price,
                )
            )

        # An explicit sheet price wins over the catalogue price.
        total_price = int(round((row.unit_price or 0) * PRICE_SCALE))
        if total_price <= 0:
            total_price = max(int(round(calculated_total)), 0)

        now = utcnow()
        return Order(
            id=self._new_order_id(),
            customer_id=customer_id,
            batch_id=self.batch_name,
            customer_name=row.customer_name,
            customer_phone=clean_phone,
            address=row.address,
            items=items,
            total_price=total_price,
            payment_method=PaymentMethod.TRANSFER,
            payment_verified=False,
            status=OrderStatus.PENDING,
            created_at=now,
            updated_at=now,
            order_index=int(now.timestamp() * 1000) + index,
        )

    def _resolve_customer(self, row: RawImportRow, clean_phone: str) -> str:
        existing = self.storage.find_matching_customer(clean_phone, row.address)
        if existing:
            return existing.id

        customer_id = clean_phone if len(clean_phone) >= MIN_PHONE_ID_LENGTH else str(uuid.uuid4())
        customer = Customer(
            id=customer_id,
            name=row.customer_name,
            phone=clean_phone,
            address=row.address,
            total_orders=1,
            last_order_date=utcnow(),
            priority_score=999,
        )
        self.storage.upsert_customer(customer)
        self._customers_created += 1
        logger.debug("Created customer %s (%s)", customer_id, row.customer_name)
        return customer_id

    def _get_or_init_product(self, name: str) -> Product:
        sku = generate_product_sku(name)
        product = self._session_products.get(sku)
        if product is not None:
            return product

        existing = self._known_products.get(sku) or self.storage.get_product(sku)
        if existing is not None:
            product = replace(existing)
        else:
            product = Product(id=sku, name=name, last_import_date=utcnow())
            logger.debug("Discovered new product %s from %r", sku, name)

        # Items first seen through an import start with saleable stock.
        if product.total_imported == 0:
            product.stock_quantity = self.seed_stock
            product.total_imported = self.seed_stock
            product.updated_at = utcnow()
            logger.debug("Seeded stock for %s with %s units", sku, self.seed_stock)

        self._session_products[sku] = product
        return product

    def _new_order_id(self) -> str:
        while True:
            order_id = generate_order_id()
            if order_id in self._used_order_ids:
                continue
            if self.storage.get_order(order_id) is not None:
                continue
            self._used_order_ids.add(order_id)
            return order_id


def process_import(
    storage: Storage,
    rows: Iterable[RawImportRow],
    batch_name: str,
    seed_stock: Optional[float] = None,
) -> ImportSummary:
    """Import ``rows`` as one all-or-nothing batch labelled ``batch_name``."""

    importer = BatchImporter(
        storage, batch_name, seed_stock=DEFAULT_SEED_STOCK if seed_stock is None else seed_stock
    )
    return importer.run(rows)
