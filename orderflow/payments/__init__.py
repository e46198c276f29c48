"""Payment payload encoding and statement reconciliation."""
from orderflow.payments.reconciliation import (
    ReconciliationPolicy,
    ReconciliationResult,
    confirm_payments,
    extract_order_codes,
    reconcile_from_text,
    reconcile_orders,
    select_pending,
)
from orderflow.payments.vietqr import (
    BankDirectory,
    PaymentPayloadEncoder,
    build_payment_payload,
    crc16_ccitt,
    format_field,
    normalize_reference,
    payload_for_order,
    verify_payload,
)

__all__ = [
    "BankDirectory",
    "PaymentPayloadEncoder",
    "ReconciliationPolicy",
    "ReconciliationResult",
    "build_payment_payload",
    "confirm_payments",
    "crc16_ccitt",
    "extract_order_codes",
    "format_field",
    "normalize_reference",
    "payload_for_order",
    "reconcile_from_text",
    "reconcile_orders",
    "select_pending",
    "verify_payload",
]
