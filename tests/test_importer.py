"""Tests for the all-or-nothing batch importer."""
import logging
import re

import pytest

from orderflow.core.errors import ImportBatchError, ResolutionError
from orderflow.core.models import Customer, Order, OrderStatus, PaymentMethod, Product, RawImportRow
from orderflow.processing.importer import BatchImporter, process_import
from orderflow.storage.memory import MemoryStore


class FailingProductStore(MemoryStore):
    """Raises when a specific product is looked up."""

    def __init__(self, failing_sku: str) -> None:
        super().__init__()
        self.failing_sku = failing_sku

    def get_product(self, product_id):
        if product_id == self.failing_sku:
            raise ResolutionError(f"lookup failed for {product_id}")
        return super().get_product(product_id)


def _row(items: str, name: str = "Khách", phone: str | None = None, address: str = "", price: float = 0) -> RawImportRow:
    return RawImportRow(customer_name=name, address=address, items_raw=items, phone=phone, unit_price=price)


def test_import_creates_customers_products_and_orders(memory_store, sample_rows):
    summary = process_import(memory_store, sample_rows, "Lô 01")

    assert summary.orders == 2
    assert summary.products == 3
    assert summary.customers_created == 2
    assert summary.message == 'Imported 2 orders into batch "Lô 01". Created/updated 3 products.'
    assert set(memory_store.products) == {"nan", "ca-trac", "gao"}
    assert len(memory_store.orders) == 2

    for order in memory_store.orders.values():
        assert re.fullmatch(r"[A-Z0-9]{8}", order.id)
        assert order.batch_id == "Lô 01"
        assert order.status == OrderStatus.PENDING
        assert order.payment_method == PaymentMethod.TRANSFER
        assert order.payment_verified is False


def test_customer_id_is_phone_or_surrogate(memory_store, sample_rows):
    process_import(memory_store, sample_rows, "batch")

    assert "0912345678" in memory_store.customers
    surrogate = next(c for c in memory_store.customers.values() if c.name == "Trần Thị Bình")
    assert surrogate.id != ""
    assert surrogate.phone == ""
    assert surrogate.total_orders == 1


def test_existing_customer_is_reused_by_phone(memory_store):
    memory_store.upsert_customer(Customer(id="0912345678", name="An", phone="0912345678", address="HN"))

    summary = process_import(memory_store, [_row("gạo2", phone="+84 912 345 678")], "batch")

    assert summary.customers_created == 0
    assert len(memory_store.customers) == 1
    order = next(iter(memory_store.orders.values()))
    assert order.customer_id == "0912345678"
    assert order.customer_phone == "0912345678"


def test_existing_customer_is_reused_by_address(memory_store):
    memory_store.upsert_customer(Customer(id="c-1", name="An", phone="", address="12 Lê Lợi"))

    process_import(memory_store, [_row("gạo", address="12  le loi")], "batch")

    assert next(iter(memory_store.orders.values())).customer_id == "c-1"


def test_same_product_in_one_batch_is_created_once_and_seeded_once(memory_store):
    rows = [_row("Gạo thơm2", phone="0900000001"), _row("gạo  thơm 1.5", phone="0900000002")]

    summary = process_import(memory_store, rows, "batch")

    assert summary.products == 1
    assert list(memory_store.products) == ["gao-thom"]
    product = memory_store.products["gao-thom"]
    assert product.stock_quantity == 50
    assert product.total_imported == 50
    assert product.name == "Gạo thơm"


def test_existing_stocked_product_is_not_reseeded(memory_store):
    memory_store.save_product(Product(id="gao", name="Gạo", default_price=30000, import_price=20000, stock_quantity=7, total_imported=100))

    process_import(memory_store, [_row("gạo2")], "batch")

    product = memory_store.products["gao"]
    assert product.stock_quantity == 7
    assert product.total_imported == 100


def test_total_uses_sheet_price_scaled_to_currency_unit(memory_store):
    process_import(memory_store, [_row("gạo2", price=120)], "batch")

    assert next(iter(memory_store.orders.values())).total_price == 120000


def test_total_falls_back_to_catalogue_prices(memory_store):
    memory_store.save_product(Product(id="gao", name="Gạo", default_price=30000, import_price=20000, total_imported=10))
    memory_store.save_product(Product(id="ca", name="Cá", default_price=15000, import_price=9000, total_imported=10))

    process_import(memory_store, [_row("gạo2 cá0.5")], "batch")

    order = next(iter(memory_store.orders.values()))
    assert order.total_price == 67500
    assert [(item.name, item.price, item.import_price) for item in order.items] == [
        ("Gạo", 30000, 20000),
        ("Cá", 15000, 9000),
    ]
    assert all(item.product_id for item in order.items)


def test_total_is_zero_without_any_price(memory_store):
    process_import(memory_store, [_row("rau muống")], "batch")

    assert next(iter(memory_store.orders.values())).total_price == 0


def test_item_snapshots_survive_later_price_changes(memory_store):
    memory_store.save_product(Product(id="gao", name="Gạo", default_price=30000, total_imported=10))
    process_import(memory_store, [_row("gạo1")], "batch")

    memory_store.save_product(Product(id="gao", name="Gạo", default_price=99000, total_imported=10))

    order = next(iter(memory_store.orders.values()))
    assert order.items[0].price == 30000


def test_failed_row_discards_whole_batch():
    store = FailingProductStore(failing_sku="ca-hong")
    rows = [
        _row("gạo1", phone="0900000001"),
        _row("nan2", phone="0900000002"),
        _row("cá hồng1", phone="0900000003"),
        _row("thịt1", phone="0900000004"),
        _row("trứng1", phone="0900000005"),
    ]

    with pytest.raises(ImportBatchError) as excinfo:
        process_import(store, rows, "Lô lỗi")

    assert excinfo.value.row_index == 3
    assert excinfo.value.batch == "Lô lỗi"
    assert isinstance(excinfo.value.__cause__, ResolutionError)
    assert "lookup failed for ca-hong" in str(excinfo.value)
    assert store.products == {}
    assert store.orders == {}
    # Customers are written as they are met, before the failing product lookup.
    assert set(store.customers) == {"0900000001", "0900000002", "0900000003"}


def test_failed_row_is_logged(caplog):
    store = FailingProductStore(failing_sku="gao")
    caplog.set_level(logging.ERROR)

    with pytest.raises(ImportBatchError):
        process_import(store, [_row("gạo1")], "batch")

    assert "Row 1 of batch 'batch' failed" in caplog.text


def test_retry_on_same_importer_saves_only_the_retried_rows():
    store = FailingProductStore(failing_sku="ca")
    importer = BatchImporter(store, "Lô 02")
    rows = [_row("gạo1", phone="0900000001"), _row("cá1", phone="0900000002")]

    with pytest.raises(ImportBatchError):
        importer.run(rows)
    store.failing_sku = None

    summary = importer.run(rows)

    assert summary.orders == 2
    assert summary.products == 2
    assert summary.customers_created == 0
    assert len(store.orders) == 2
    assert set(store.products) == {"gao", "ca"}
    assert store.products["gao"].stock_quantity == 50


def test_products_are_saved_before_orders(sample_rows):
    calls = []

    class RecordingStore(MemoryStore):
        def save_product(self, product):
            calls.append("product")
            super().save_product(product)

        def save_order(self, order):
            calls.append("order")
            super().save_order(order)

    process_import(RecordingStore(), sample_rows, "batch")

    assert calls == ["product"] * 3 + ["order"] * 2


def test_order_ids_are_unique_even_on_collision(memory_store, monkeypatch):
    import orderflow.processing.importer as importer

    ids = iter(["DUPL0001", "DUPL0001", "TAKEN001", "FRESH002"])
    monkeypatch.setattr(importer, "generate_order_id", lambda: next(ids))
    memory_store.save_order(
        Order(id="TAKEN001", customer_id=None, batch_id="old", customer_name="", customer_phone="", address="")
    )

    importer_run = BatchImporter(memory_store, "batch")
    importer_run.run([_row("gạo"), _row("cá")])

    assert set(memory_store.orders) == {"TAKEN001", "DUPL0001", "FRESH002"}


def test_custom_seed_stock(memory_store):
    process_import(memory_store, [_row("gạo")], "batch", seed_stock=10)

    assert memory_store.products["gao"].stock_quantity == 10
