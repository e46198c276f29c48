"""Tests for matching statement text against pending orders."""
from orderflow.core.models import Order, OrderStatus, PaymentMethod
from orderflow.payments.reconciliation import (
    ReconciliationPolicy,
    confirm_payments,
    extract_order_codes,
    reconcile_from_text,
    reconcile_orders,
    select_pending,
)


def _order(order_id: str, total: int = 100000, **overrides) -> Order:
    return Order(
        id=order_id,
        customer_id="c1",
        batch_id="batch-1",
        customer_name="Khách",
        customer_phone="0912345678",
        address="Hà Nội",
        total_price=total,
        **overrides,
    )


def test_matches_order_code_in_statement_text():
    order = _order("ABC12345", total=250000)

    result = reconcile_from_text("... DH ABC12345 chuyen tien ...", [order])

    assert result.matched_orders == [order]
    assert result.total_matched_amount == 250000
    assert result.raw_text_preview.endswith("...")


def test_seven_character_identifier_never_matches():
    result = reconcile_from_text("... DH ABC12345 chuyen tien ...", [_order("ABC1234")])

    assert result.matched_orders == []
    assert result.total_matched_amount == 0


def test_code_inside_longer_run_does_not_match():
    result = reconcile_from_text("REF ABC123456 chuyen tien", [_order("ABC12345"), _order("BC123456")])

    assert result.matched_orders == []


def test_matching_is_case_and_accent_insensitive():
    order = _order("DEF67890", total=50000)
    other = _order("ZZZ00000", total=70000)

    result = reconcile_from_text("Thanh toán đơn def67890 - cảm ơn", [order, other])

    assert result.matched_orders == [order]
    assert result.total_matched_amount == 50000


def test_multiple_matches_sum_totals():
    orders = [_order("AAAA1111", 10000), _order("BBBB2222", 20000), _order("CCCC3333", 40000)]

    result = reconcile_from_text("AAAA1111;BBBB2222 paid", orders)

    assert [order.id for order in result.matched_orders] == ["AAAA1111", "BBBB2222"]
    assert result.total_matched_amount == 30000


def test_empty_text_returns_empty_result():
    result = reconcile_from_text("", [_order("ABC12345")])

    assert result.matched_orders == []
    assert result.raw_text_preview == ""


def test_extract_order_codes_uses_standalone_runs_only():
    assert extract_order_codes("x ab12cd34 y 123456789 ĐĐĐĐ1234") == {"AB12CD34", "DDDD1234"}


def test_select_pending_defaults_to_transfer_only():
    transfer = _order("TRAN0001")
    cash = _order("CASH0001", payment_method=PaymentMethod.CASH)
    verified = _order("VERI0001", payment_verified=True)
    cancelled = _order("CANC0001", status=OrderStatus.CANCELLED)

    assert select_pending([transfer, cash, verified, cancelled]) == [transfer]


def test_policy_can_include_cash():
    transfer = _order("TRAN0001")
    cash = _order("CASH0001", payment_method=PaymentMethod.CASH)
    paid = _order("PAID0001", payment_method=PaymentMethod.PAID)
    policy = ReconciliationPolicy.from_names(["transfer", "CASH"])

    assert select_pending([transfer, cash, paid], policy) == [transfer, cash]


def test_reconcile_orders_skips_ineligible_candidates():
    cash = _order("CASH0001", payment_method=PaymentMethod.CASH)
    transfer = _order("TRAN0001", total=1)

    result = reconcile_orders("CASH0001 TRAN0001", [cash, transfer])

    assert result.matched_orders == [transfer]


def test_confirm_payments_marks_orders_verified(memory_store):
    order = _order("ABC12345")
    memory_store.save_order(order)

    confirmed = confirm_payments(memory_store, [order])

    assert confirmed == 1
    assert memory_store.get_order("ABC12345").payment_verified is True
    assert order.payment_verified is False
