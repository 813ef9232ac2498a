"""
Order issuance against the PayLIVE gateway.

Three request variants exist for a new order:
- issue_mobile_payment: wallet (token path), returns token + QR code URL + order code
- issue_payment_token: wallet (token path), returns a tagged token result
- issue_payment_code: third party provider (code path), returns a payment code

An order id must go down exactly one of the two paths. This service keeps no
record of which one was used; callers that need that tracking own it.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from paylive.integrations.contracts.interfaces import (
    MobilePaymentOrderResponse,
    OrderItem,
    PaymentCode,
    PaymentGateway,
    PaymentOrder,
    TokenIssuance,
    as_item_tuple,
)
from paylive.integrations.policy.amounts import AmountInput, normalize_amounts
from paylive.integrations.policy.header_builder import HeaderFactory

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(self, gateway: PaymentGateway, header_factory: HeaderFactory) -> None:
        self.gateway = gateway
        self.header_factory = header_factory

    @staticmethod
    def build_order(
        order_id: str,
        sub_total: AmountInput,
        delivery_cost: AmountInput,
        tax_amount: AmountInput,
        total: AmountInput,
        comment1: str,
        comment2: str,
        items: Optional[Sequence[OrderItem]],
    ) -> PaymentOrder:
        return PaymentOrder(
            order_id=order_id,
            amounts=normalize_amounts(sub_total, delivery_cost, tax_amount, total),
            comment1=comment1,
            comment2=comment2,
            items=as_item_tuple(items),
        )

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
        order = self.build_order(order_id, sub_total, delivery_cost, tax_amount, total, comment1, comment2, items)
        logger.debug("mobilePaymentOrder order_id=%s items=%d", order_id, len(order.items))
        return self.gateway.mobile_payment_order(self.header_factory(), order)

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
        Generate a payment code for a third party provider.

        ``mobile`` is required by the gateway for mobile money providers. It is
        forwarded exactly as given, empty or not; validating it is the
        caller's job (or the gateway's).
        """
        order = self.build_order(order_id, sub_total, delivery_cost, tax_amount, total, comment1, comment2, items)
        provider_type = getattr(provider_type, "value", provider_type)
        logger.debug(
            "generatePaymentCode order_id=%s provider=%s provider_type=%s",
            order_id, provider, provider_type,
        )
        code = self.gateway.generate_payment_code(
            self.header_factory(), order, payer, mobile, provider, provider_type
        )
        return PaymentCode(
            code=code,
            order_id=order_id,
            payer=payer,
            mobile=mobile,
            provider=provider,
            provider_type=provider_type,
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
        order = self.build_order(order_id, sub_total, delivery_cost, tax_amount, total, comment1, comment2, items)
        logger.debug("processPaymentOrder order_id=%s", order_id)
        result = self.gateway.process_payment_order(self.header_factory(), order)
        if not result.succeeded:
            logger.info("PayLIVE rejected order_id=%s: %s", order_id, result.error)
        return result
