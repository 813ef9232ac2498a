"""Unit tests for the order lifecycle guardrails."""

import pytest

from paylive.integrations.contracts.payments import (
    InvalidTransitionError,
    OrderStage,
    PaymentCallback,
    is_terminal_stage,
    validate_transition,
)


def test_valid_transitions():
    validate_transition(OrderStage.CREATED, OrderStage.TOKEN_ISSUED)
    validate_transition(OrderStage.TOKEN_ISSUED, OrderStage.CONFIRMED)
    validate_transition(OrderStage.CODE_ISSUED, OrderStage.PAID)


@pytest.mark.parametrize(
    "current,new",
    [
        (OrderStage.CREATED, OrderStage.CONFIRMED),
        (OrderStage.CODE_ISSUED, OrderStage.CONFIRMED),
        (OrderStage.TOKEN_ISSUED, OrderStage.PAID),
        (OrderStage.CONFIRMED, OrderStage.CANCELLED),
    ],
)
def test_invalid_transitions(current, new):
    with pytest.raises(InvalidTransitionError) as exc_info:
        validate_transition(current, new)
    assert exc_info.value.current is current


def test_terminal_stages():
    assert is_terminal_stage(OrderStage.CONFIRMED)
    assert is_terminal_stage(OrderStage.CANCELLED)
    assert is_terminal_stage(OrderStage.PAID)
    assert not is_terminal_stage(OrderStage.TOKEN_ISSUED)


def test_simulated_payment_twice_is_rejected(gateway, ord1):
    first = gateway.simulate_payment("ORD-1", transaction_id="TX-1")
    with pytest.raises(ValueError, match="already COMPLETED"):
        gateway.simulate_payment("ORD-1", transaction_id="TX-2")
    assert first.transaction_id == "TX-1"
    assert gateway.verify_mobile_payment(_first_header(gateway), "ORD-1").transaction_id == "TX-1"


def test_simulated_payment_for_unknown_order(gateway):
    with pytest.raises(ValueError, match="not found"):
        gateway.simulate_payment("NOPE")


def _first_header(gateway):
    return gateway.received_headers[0]


def test_callback_can_confirm():
    assert PaymentCallback(status="COMPLETED", order_id="o", token="t", transaction_id="x").can_confirm
    assert not PaymentCallback(status="COMPLETED", order_id="o", token="t").can_confirm
