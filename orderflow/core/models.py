"""Data models for orders, products, customers, and raw import rows."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _serialize(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [_serialize(item) for item in value]
    if isinstance(value, dict):
        return {key: _serialize(item) for key, item in value.items()}
    return value


class OrderStatus(str, Enum):
    """Lifecycle of an order from creation to delivery."""

    PENDING = "PENDING"
    PICKED_UP = "PICKED_UP"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentMethod(str, Enum):
    """How the customer settles the order."""

    CASH = "CASH"
    TRANSFER = "TRANSFER"
    PAID = "PAID"


@dataclass
class OrderItem:
    """A line item with name and price snapshots taken when the order was built.

    Snapshots are never refreshed from the product afterwards, so historical
    profit stays accurate when the product price changes later.
    """

    id: str
    product_id: Optional[str]
    name: str
    quantity: float
    price: int
    import_price: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderItem":
        return cls(
            id=data["id"],
            product_id=data.get("product_id"),
            name=data.get("name", ""),
            quantity=float(data.get("quantity", 0)),
            price=int(data.get("price", 0)),
            import_price=int(data.get("import_price", 0) or 0),
        )


@dataclass
class Order:
    """A customer order; ``total_price`` is in the smallest currency unit."""

    id: str
    customer_id: Optional[str]
    batch_id: str
    customer_name: str
    customer_phone: str
    address: str
    items: List[OrderItem] = field(default_factory=list)
    notes: str = ""
    total_price: int = 0
    payment_method: PaymentMethod = PaymentMethod.TRANSFER
    payment_verified: bool = False
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    order_index: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly dictionary representation."""

        return _serialize(asdict(self))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        return cls(
            id=data["id"],
            customer_id=data.get("customer_id"),
            batch_id=data.get("batch_id", ""),
            customer_name=data.get("customer_name", ""),
            customer_phone=data.get("customer_phone", ""),
            address=data.get("address", ""),
            items=[OrderItem.from_dict(item) for item in data.get("items", [])],
            notes=data.get("notes", ""),
            total_price=int(data.get("total_price", 0)),
            payment_method=PaymentMethod(data.get("payment_method", PaymentMethod.TRANSFER.value)),
            payment_verified=bool(data.get("payment_verified", False)),
            status=OrderStatus(data.get("status", OrderStatus.PENDING.value)),
            created_at=_parse_timestamp(data.get("created_at")) or utcnow(),
            updated_at=_parse_timestamp(data.get("updated_at")) or utcnow(),
            order_index=int(data.get("order_index", 0)),
        )


@dataclass
class Product:
    """An inventory item keyed by a slug derived from its normalized name."""

    id: str
    name: str
    default_price: int = 0
    import_price: int = 0
    stock_quantity: float = 0
    total_imported: float = 0
    default_weight: float = 1
    last_import_date: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return _serialize(asdict(self))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        stock = float(data.get("stock_quantity", 0) or 0)
        total_imported = data.get("total_imported")
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            default_price=int(data.get("default_price", 0) or 0),
            import_price=int(data.get("import_price", 0) or 0),
            stock_quantity=stock,
            # Older records only tracked current stock.
            total_imported=float(total_imported) if total_imported is not None else stock,
            default_weight=float(data.get("default_weight", 1) or 1),
            last_import_date=_parse_timestamp(data.get("last_import_date")),
            updated_at=_parse_timestamp(data.get("updated_at")),
        )


@dataclass
class Customer:
    id: str
    name: str
    phone: str
    address: str
    total_orders: int = 0
    last_order_date: Optional[datetime] = None
    priority_score: int = 999
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return _serialize(asdict(self))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Customer":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            phone=data.get("phone", ""),
            address=data.get("address", ""),
            total_orders=int(data.get("total_orders", 0) or 0),
            last_order_date=_parse_timestamp(data.get("last_order_date")),
            priority_score=int(data.get("priority_score", 999)),
            updated_at=_parse_timestamp(data.get("updated_at")),
        )


@dataclass
class RawImportRow:
    """One unstructured order line as it arrives from a file or the AI service.

    ``unit_price`` is expressed in thousands of the currency unit, the way
    order sheets are usually written ("120" meaning 120,000).
    """

    customer_name: str
    address: str
    items_raw: str
    phone: Optional[str] = None
    unit_price: float = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawImportRow":
        raw_price = data.get("unit_price")
        try:
            unit_price = float(raw_price) if raw_price not in (None, "") else 0.0
        except (TypeError, ValueError):
            unit_price = 0.0
        phone = data.get("phone")
        return cls(
            customer_name=str(data.get("customer_name") or "").strip(),
            address=str(data.get("address") or "").strip(),
            items_raw=str(data.get("items_raw") or ""),
            phone=str(phone).strip() if phone not in (None, "") else None,
            unit_price=unit_price,
        )


@dataclass(frozen=True)
class BankPaymentConfig:
    bank_id: str
    account_no: str
    account_name: str = ""
