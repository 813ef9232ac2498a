"""
PayLIVE connector.

Single entry point for the iWallet PayLIVE payment service. It originates
payment orders, checks their status and confirms or cancels transactions.

Example usage:
    ```python
    from decimal import Decimal
    from paylive import OrderItem, PayliveConnector

    connector = PayliveConnector()  # PAYLIVE_* settings from env / .env

    order = connector.issue_mobile_payment(
        "ORD-1", Decimal("100.00"), Decimal("10.00"), Decimal("5.00"), Decimal("115.00"),
        "Order ORD-1", "", [OrderItem("SKU-1", "Widget", Decimal("100.00"), 1)],
    )
    status = connector.verify_mobile_payment_status("ORD-1")
    # later, with the transaction id from the callback:
    connector.confirm_transaction(order.token, transaction_id)
    ```

The connector holds immutable settings and no order state. Every operation
builds a fresh PaymentHeader and makes exactly one gateway call, so one
instance can be shared across threads.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Sequence

from paylive.integrations.clients.real_http.paylive import SoapPayliveGateway
from paylive.integrations.contracts.interfaces import (
    DEFAULT_SERVICE_TYPE,
    CancellationResult,
    MobilePaymentOrderResponse,
    OrderItem,
    PaymentCode,
    PaymentGateway,
    PaymentHeader,
    TokenIssuance,
    VerifyMobilePaymentResponse,
)
from paylive.integrations.policy.amounts import AmountInput
from paylive.integrations.policy.header_builder import build_payment_header, header_factory_for
from paylive.integrations.policy.order_service import OrderService
from paylive.integrations.policy.status_service import StatusService
from paylive.utils.config_loader import PayliveSettings, build_settings, load_paylive_settings

logger = logging.getLogger(__name__)


class PayliveConnector:
    """
    PayLIVE client facade.

    Args:
        settings: Merchant settings. Loaded from the environment when omitted.
        gateway: Gateway implementation. A SOAP gateway built from the
            settings is used when omitted.
        config_path: Optional YAML file to load settings from instead of the
            environment. Ignored when settings are given.

    Raises:
        ConfigurationError: If the merchant configuration is missing or malformed
    """

    def __init__(
        self,
        settings: Optional[PayliveSettings] = None,
        gateway: Optional[PaymentGateway] = None,
        config_path: Optional[Path] = None,
    ) -> None:
        if settings is None:
            settings = load_paylive_settings(config_path)
        # fail at construction, not on the first call
        build_payment_header(settings)

        self._settings = settings
        self._gateway = gateway if gateway is not None else SoapPayliveGateway(settings)
        self._header_factory = header_factory_for(settings)
        self._orders = OrderService(self._gateway, self._header_factory)
        self._status = StatusService(self._gateway, self._header_factory)

        logger.info(
            "PayLIVE connector ready merchant=%s service_type=%s integration_mode=%s gateway=%s",
            settings.merchant_email,
            settings.service_type,
            settings.integration_mode,
            type(self._gateway).__name__,
        )

    @classmethod
    def from_credentials(
        cls,
        api_version: str,
        merchant_email: str,
        merchant_key: str,
        service_type: str = DEFAULT_SERVICE_TYPE,
        integration_mode: bool = False,
        gateway: Optional[PaymentGateway] = None,
        **transport: Any,
    ) -> "PayliveConnector":
        """Create a connector from explicit credentials instead of configuration."""
        settings = build_settings({
            "api_version": api_version,
            "merchant_email": merchant_email,
            "merchant_key": merchant_key,
            "service_type": service_type,
            "integration_mode": integration_mode,
            **transport,
        })
        return cls(settings=settings, gateway=gateway)

    @property
    def settings(self) -> PayliveSettings:
        return self._settings

    @property
    def gateway(self) -> PaymentGateway:
        return self._gateway

    def with_credentials(self, **changes: Any) -> "PayliveConnector":
        """
        Return a new connector with some settings replaced.

        The current connector is left untouched and the gateway is shared.
        Accepts field names or their camelCase aliases.
        """
        fields = PayliveSettings.model_fields
        aliases = {info.alias: name for name, info in fields.items() if info.alias}
        data = self._settings.model_dump()
        for key, value in changes.items():
            name = aliases.get(key, key)
            if name not in fields:
                raise TypeError(f"Unknown PayLIVE setting: {key}")
            data[name] = value
        return PayliveConnector(settings=build_settings(data), gateway=self._gateway)

    def build_header(self) -> PaymentHeader:
        return self._header_factory()

    # ==================== Token path ====================

    def issue_mobile_payment(
        self,
        order_id: str,
        sub_total: AmountInput,
        delivery_cost: AmountInput,
        tax_amount: AmountInput,
        total: AmountInput,
        comment1: str,
        comment2: str,
        items: Optional[Sequence[OrderItem]],
    ) -> MobilePaymentOrderResponse:
        """
        Generate a payment order for iWallet mobile payment.

        Args:
            order_id: Merchant's order id, unique on the merchant's system
            sub_total: Total cost of items
            delivery_cost: Cost of delivery
            tax_amount: Amount going to tax
            total: Total amount payable by customer
            comment1: A short description of the order
            comment2: Any extra information about the order
            items: Items being purchased, forwarded in the given order

        Returns:
            Payment token, QR code URL and payment order code
        """
        return self._orders.issue_mobile_payment(
            order_id, sub_total, delivery_cost, tax_amount, total, comment1, comment2, items
        )

    def issue_payment_token(
        self,
        order_id: str,
        sub_total: AmountInput,
        delivery_cost: AmountInput,
        tax_amount: AmountInput,
        total: AmountInput,
        comment1: str,
        comment2: str,
        items: Optional[Sequence[OrderItem]],
    ) -> TokenIssuance:
        """
        Send order information to PayLIVE and receive a token identifying the order.

        Returns:
            TokenIssuance: ``succeeded`` with ``token``, or the gateway's ``error``
        """
        return self._orders.issue_payment_token(
            order_id, sub_total, delivery_cost, tax_amount, total, comment1, comment2, items
        )

    def verify_mobile_payment_status(self, order_id: str) -> VerifyMobilePaymentResponse:
        """Check the status of a mobile payment. Safe to call repeatedly."""
        return self._status.verify_mobile_payment_status(order_id)

    def confirm_transaction(self, token: str, transaction_id: str) -> int:
        """
        Confirm receipt of the transaction id sent to the callback URL.

        ``token`` must be one returned by issue_mobile_payment or
        issue_payment_token. Passing a payment code, or any other value, is a
        precondition violation; the gateway answers with a non-success code.

        Returns:
            The gateway result code, unchanged
        """
        return self._status.confirm_transaction(token, transaction_id)

    def cancel_transaction(self, token: str, transaction_id: str) -> CancellationResult:
        """
        Cancel a transaction processed on PayLIVE.

        PayLIVE does not implement cancellation at present, in which case the
        outcome is UNSUPPORTED rather than FAILED.
        """
        return self._status.cancel_transaction(token, transaction_id)

    # ==================== Code path ====================

    def issue_payment_code(
        self,
        order_id: str,
        sub_total: AmountInput,
        delivery_cost: AmountInput,
        tax_amount: AmountInput,
        total: AmountInput,
        comment1: str,
        comment2: str,
        items: Optional[Sequence[OrderItem]],
        payer: str,
        mobile: str,
        provider: str,
        provider_type: str,
    ) -> PaymentCode:
        """
        Generate a payment order code for paying via a third party provider.

        Args:
            payer: Name of payer
            mobile: Mobile number of payer. Required by PayLIVE for mobile
                money providers; not checked here, the caller must supply it
            provider: The third party payment provider
            provider_type: Type of provider (eg. MOBILE_MONEY, BANK, CARD)

        Returns:
            The generated payment code with the payer/provider details it was issued for
        """
        return self._orders.issue_payment_code(
            order_id, sub_total, delivery_cost, tax_amount, total, comment1, comment2, items,
            payer, mobile, provider, provider_type,
        )

    def check_payment_status(self, order_id: str, provider: str, provider_type: str) -> str:
        """Check the status of a third party payment. Safe to call repeatedly."""
        return self._status.check_payment_status(order_id, provider, provider_type)
