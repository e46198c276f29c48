"""Turn free-form order text into records, bill them, and reconcile payments."""
from orderflow.core import (
    BankPaymentConfig,
    Customer,
    ImportBatchError,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    Product,
    RawImportRow,
    configure_logging,
)
from orderflow.ingestion import load_rows, tokenize_items
from orderflow.payments import (
    BankDirectory,
    PaymentPayloadEncoder,
    ReconciliationPolicy,
    build_payment_payload,
    confirm_payments,
    reconcile_from_text,
    reconcile_orders,
)
from orderflow.processing import ImportSummary, process_import
from orderflow.storage import JsonFileStore, MemoryStore

__all__ = [
    "BankDirectory",
    "BankPaymentConfig",
    "Customer",
    "ImportBatchError",
    "ImportSummary",
    "JsonFileStore",
    "MemoryStore",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentMethod",
    "PaymentPayloadEncoder",
    "Product",
    "RawImportRow",
    "ReconciliationPolicy",
    "build_payment_payload",
    "configure_logging",
    "confirm_payments",
    "load_rows",
    "process_import",
    "reconcile_from_text",
    "reconcile_orders",
    "tokenize_items",
]
