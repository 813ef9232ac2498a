from decimal import Decimal

import pytest

from paylive.integrations.contracts.interfaces import OrderItem, PaymentHeader
from paylive.integrations.policy.amounts import AmountError, normalize_amounts, to_decimal
from paylive.integrations.policy.header_builder import build_payment_header, header_factory_for
from paylive.utils.config_loader import ConfigurationError, PayliveSettings


def test_header_mirrors_settings(settings):
    header = build_payment_header(settings)
    assert header == PaymentHeader(
        api_version="1.4",
        merchant_email="merchant@example.com",
        merchant_key="key-123",
        service_type="C2B",
        integration_mode=True,
    )
    assert "key-123" not in repr(header)


def test_header_factory_builds_a_new_instance_per_call(settings):
    factory = header_factory_for(settings)
    first, second = factory(), factory()
    assert first == second
    assert first is not second


def test_incomplete_settings_rejected():
    settings = PayliveSettings.model_construct(
        api_version="1.4", merchant_email="", merchant_key="k", service_type="C2B", integration_mode=False
    )
    with pytest.raises(ConfigurationError, match="merchant_email"):
        build_payment_header(settings)


def test_all_presence_flags_true_including_zero():
    amounts = normalize_amounts(0, "0.00", Decimal("0"), 0.0)
    for _, money in amounts.as_pairs():
        assert money.present is True
        assert money.amount == Decimal("0")


def test_amounts_are_independent():
    # no sum check: 1 + 2 + 3 != 100 is forwarded as is
    amounts = normalize_amounts("1", "2", "3", "100")
    assert amounts.total.amount == Decimal("100")
    assert [name for name, _ in amounts.as_pairs()] == ["subTotal", "deliveryCost", "taxAmount", "total"]


def test_float_amounts_use_short_repr():
    assert to_decimal(10.1, "total") == Decimal("10.1")


@pytest.mark.parametrize("value", ["abc", None, True, "NaN", Decimal("Infinity")])
def test_invalid_amounts(value):
    with pytest.raises(AmountError):
        to_decimal(value, "total")


def test_item_prices_are_normalized_like_amounts():
    item = OrderItem("A", "a", "2.50", 2)
    assert item.unit_price == Decimal("2.50")
    assert item.sub_total == Decimal("5.00")

    explicit = OrderItem("B", "b", 1.1, 3, sub_total="3.30")
    assert explicit.unit_price == Decimal("1.1")
    assert explicit.sub_total == Decimal("3.30")


@pytest.mark.parametrize("quantity", ["2", 2.0, True, None])
def test_item_quantity_must_be_an_integer(quantity):
    with pytest.raises(AmountError):
        OrderItem("A", "a", "2.50", quantity)


def test_item_with_invalid_price():
    with pytest.raises(AmountError, match="unit_price"):
        OrderItem("A", "a", "two", 1)


def test_connector_headers_come_from_its_factory(connector, gateway, ord1):
    connector.verify_mobile_payment_status("ORD-1")
    assert gateway.received_headers[-1] == header_factory_for(connector.settings)()
