import pytest

from paylive.integrations.contracts.interfaces import ProviderType
from paylive.integrations.contracts.payments import OrderStage, is_success_code
from paylive.integrations.policy.response_wrappers import GatewayFault

MOBILE_MONEY = ProviderType.MOBILE_MONEY.value


def _code(connector, order_id, items, mobile="0244000000", provider="MTN", provider_type=MOBILE_MONEY):
    return connector.issue_payment_code(
        order_id, "100.00", "10.00", "5.00", "115.00", "c1", "c2", items,
        payer="Ama Mensah", mobile=mobile, provider=provider, provider_type=provider_type,
    )


def test_payment_code_carries_payer_and_provider(connector, gateway, items):
    code = _code(connector, "ORD-C1", items)
    assert code.code
    assert code.order_id == "ORD-C1"
    assert (code.payer, code.mobile, code.provider, code.provider_type) == (
        "Ama Mensah", "0244000000", "MTN", "MOBILE_MONEY",
    )
    assert gateway.order_stage("ORD-C1") is OrderStage.CODE_ISSUED


def test_provider_type_enum_is_sent_as_its_value(connector, gateway, items):
    code = _code(connector, "ORD-C2", items, provider="ECOBANK", provider_type=ProviderType.BANK)
    assert code.provider_type == "BANK"
    assert gateway.code_requests[-1]["provider_type"] == "BANK"


def test_empty_mobile_is_forwarded_unvalidated(connector, gateway, items):
    # the connector does not check mobile; the gateway rejects it
    with pytest.raises(GatewayFault, match="Mobile number is required"):
        _code(connector, "ORD-C3", items, mobile="")

    assert gateway.code_requests[-1]["mobile"] == ""
    assert [op for op, _ in gateway.calls] == ["generatePaymentCode"]


def test_empty_mobile_allowed_for_non_mobile_money_provider(connector, items):
    code = _code(connector, "ORD-C4", items, mobile="", provider="VISA", provider_type="CARD")
    assert code.mobile == ""


def test_status_pending_then_paid_and_idempotent(connector, gateway, items):
    _code(connector, "ORD-C5", items)
    assert connector.check_payment_status("ORD-C5", "MTN", MOBILE_MONEY) == "PENDING"
    assert connector.check_payment_status("ORD-C5", "MTN", MOBILE_MONEY) == "PENDING"

    gateway.simulate_payment("ORD-C5")
    first = connector.check_payment_status("ORD-C5", "MTN", MOBILE_MONEY)
    second = connector.check_payment_status("ORD-C5", "MTN", MOBILE_MONEY)
    assert first == second == "PAID"
    assert gateway.order_stage("ORD-C5") is OrderStage.PAID


def test_status_for_wrong_provider(connector, items):
    _code(connector, "ORD-C6", items)
    with pytest.raises(GatewayFault):
        connector.check_payment_status("ORD-C6", "AIRTELTIGO", MOBILE_MONEY)


def test_paths_do_not_cross(connector, gateway, items, ord1):
    code = _code(connector, "ORD-C7", items)
    callback = gateway.simulate_payment("ORD-C7")

    # a payment code is not a token
    assert not is_success_code(connector.confirm_transaction(code.code, callback.transaction_id))
    with pytest.raises(GatewayFault, match="verifyMobilePayment"):
        connector.check_payment_status("ORD-1", "MTN", MOBILE_MONEY)
    with pytest.raises(GatewayFault, match="checkPaymentStatus"):
        connector.verify_mobile_payment_status("ORD-C7")


def test_code_cannot_reuse_token_order_id(connector, ord1, items):
    with pytest.raises(GatewayFault, match="already been used"):
        _code(connector, "ORD-1", items)


def test_unknown_order_status(connector):
    assert connector.check_payment_status("NOPE", "MTN", MOBILE_MONEY) == "NOT_FOUND"
    assert connector.verify_mobile_payment_status("NOPE").status == "NOT_FOUND"
