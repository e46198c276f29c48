"""Match bank statement text against pending orders by their 8-character codes."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, List, Sequence

from orderflow.core.models import Order, OrderStatus, PaymentMethod, utcnow
from orderflow.core.utils import strip_diacritics
from orderflow.storage.base import Storage

logger = logging.getLogger(__name__)

# Exactly eight uppercase letters or digits, not part of a longer run.
_ORDER_CODE = re.compile(r"(?<![A-Z0-9])[A-Z0-9]{8}(?![A-Z0-9])")


@dataclass(frozen=True)
class ReconciliationPolicy:
    """Which payment methods count as awaiting a bank transfer."""

    eligible_methods: FrozenSet[PaymentMethod] = frozenset({PaymentMethod.TRANSFER})

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "ReconciliationPolicy":
        return cls(frozenset(PaymentMethod(name.strip().upper()) for name in names))

    def is_eligible(self, order: Order) -> bool:
        return (
            not order.payment_verified
            and order.status != OrderStatus.CANCELLED
            and order.payment_method in self.eligible_methods
        )


@dataclass
class ReconciliationResult:
    matched_orders: List[Order] = field(default_factory=list)
    total_matched_amount: int = 0
    raw_text_preview: str = ""


def select_pending(orders: Iterable[Order], policy: ReconciliationPolicy | None = None) -> List[Order]:
    """Keep unverified, non-cancelled orders whose payment method is eligible."""

    policy = policy or ReconciliationPolicy()
    return [order for order in orders if policy.is_eligible(order)]


def extract_order_codes(text: str) -> set[str]:
    """Return every standalone 8-character code in accent-free, uppercased text."""

    normalized = strip_diacritics(text or "").upper()
    return set(_ORDER_CODE.findall(normalized))


def reconcile_from_text(text: str, pending_orders: Sequence[Order]) -> ReconciliationResult:
    """Return the pending orders whose identifier appears in ``text``."""

    if not text:
        return ReconciliationResult()

    found = extract_order_codes(text)
    matched = [order for order in pending_orders if order.id.upper() in found]
    total = sum(order.total_price for order in matched)

    logger.info(
        "Reconciled %d of %d candidate orders (%d codes found in text)",
        len(matched),
        len(pending_orders),
        len(found),
    )
    return ReconciliationResult(
        matched_orders=matched,
        total_matched_amount=total,
        raw_text_preview=text[:100] + "...",
    )


def reconcile_orders(
    text: str, all_orders: Iterable[Order], policy: ReconciliationPolicy | None = None
) -> ReconciliationResult:
    """Filter ``all_orders`` by ``policy`` and match the remainder against ``text``."""

    return reconcile_from_text(text, select_pending(all_orders, policy))


def confirm_payments(storage: Storage, orders: Iterable[Order]) -> int:
    """Mark matched orders as paid and persist them; returns how many were saved."""

    confirmed = 0
    for order in orders:
        if order.payment_verified:
            continue
        storage.save_order(replace(order, payment_verified=True, updated_at=utcnow()))
        confirmed += 1
    logger.info("Confirmed payment for %d orders", confirmed)
    return confirmed
