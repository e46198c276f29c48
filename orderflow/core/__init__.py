"""Core building blocks for the orderflow package."""
from orderflow.core.config import Settings, load_settings
from orderflow.core.errors import (
    ExternalServiceError,
    ImportBatchError,
    OrderflowError,
    ResolutionError,
    SourceFormatError,
)
from orderflow.core.logging import configure_logging
from orderflow.core.models import (
    BankPaymentConfig,
    Customer,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    Product,
    RawImportRow,
)

__all__ = [
    "BankPaymentConfig",
    "Customer",
    "ExternalServiceError",
    "ImportBatchError",
    "Order",
    "OrderItem",
    "OrderStatus",
    "OrderflowError",
    "PaymentMethod",
    "Product",
    "RawImportRow",
    "ResolutionError",
    "Settings",
    "SourceFormatError",
    "configure_logging",
    "load_settings",
]
