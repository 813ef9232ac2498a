"""Pytest fixtures for PayLIVE connector tests."""

from decimal import Decimal

import pytest

from paylive.connector import PayliveConnector
from paylive.integrations.clients.mocks.paylive import PayliveMockGateway
from paylive.integrations.contracts.interfaces import OrderItem
from paylive.utils.config_loader import PayliveSettings


@pytest.fixture
def settings():
    return PayliveSettings(
        api_version="1.4",
        merchant_email="merchant@example.com",
        merchant_key="key-123",
        service_type="C2B",
        integration_mode=True,
    )


@pytest.fixture
def gateway():
    """In-memory PayLIVE gateway."""
    return PayliveMockGateway()


@pytest.fixture
def connector(settings, gateway):
    return PayliveConnector(settings=settings, gateway=gateway)


@pytest.fixture
def items():
    return [OrderItem("SKU-1", "Widget", Decimal("100.00"), 1)]


@pytest.fixture
def ord1(connector, items):
    """Scenario order ORD-1 issued on the token path."""
    return connector.issue_mobile_payment(
        "ORD-1", Decimal("100.00"), Decimal("10.00"), Decimal("5.00"), Decimal("115.00"),
        "Order ORD-1", "", items,
    )
