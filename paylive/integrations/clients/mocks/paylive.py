"""
PayLIVE MOCK gateway.

⚠️  This is an in-memory implementation for development and testing.
    It never touches the network. Orders live in memory and are lost on
    restart. Payer actions (which happen on the payer's phone against the
    real service) are simulated with simulate_payment().

Behaviour mirrors what the live service documents:
- cancelTransaction is not implemented and always reports failure
- confirmTransaction only succeeds for a token/transaction pair it issued
- token-path and code-path orders cannot be mixed
"""

import logging
import random
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from paylive.integrations.contracts.interfaces import (
    MobilePaymentOrderResponse,
    PaymentGateway,
    PaymentHeader,
    PaymentOrder,
    ProviderType,
    TokenIssuance,
    VerifyMobilePaymentResponse,
)
from paylive.integrations.contracts.payments import (
    CODE_PATH_STAGES,
    RESULT_FAILED,
    RESULT_INVALID_TOKEN,
    RESULT_SUCCESS,
    TOKEN_PATH_STAGES,
    OrderStage,
    PaymentCallback,
    validate_transition,
)
from paylive.integrations.policy.response_wrappers import GatewayFault

logger = logging.getLogger(__name__)

STATUS_PENDING = "PENDING"
STATUS_COMPLETED = "COMPLETED"
STATUS_CONFIRMED = "CONFIRMED"
STATUS_PAID = "PAID"
STATUS_NOT_FOUND = "NOT_FOUND"


@dataclass
class _MockOrder:
    order: PaymentOrder
    stage: OrderStage
    status: str = STATUS_PENDING
    token: Optional[str] = None
    payment_code: Optional[str] = None
    provider: Optional[str] = None
    provider_type: Optional[str] = None
    transaction_id: Optional[str] = None


# ---------------------------------------------------------------------------
# Mock gateway
# ---------------------------------------------------------------------------

class PayliveMockGateway(PaymentGateway):
    """
    Mock PayLIVE gateway.

    Parameters
    ----------
    qr_base_url : str
        Prefix used for generated QR code URLs.
    """

    def __init__(self, qr_base_url: str = "https://i-walletlive.com/payLIVE/qr"):
        self._qr_base_url = qr_base_url.rstrip("/")

        # In-memory stores (reset on restart)
        self._orders: Dict[str, _MockOrder] = {}
        self._tokens: Dict[str, str] = {}           # token -> order_id

        self.received_headers: List[PaymentHeader] = []
        self.calls: List[Tuple[str, PaymentHeader]] = []
        self.code_requests: List[Dict[str, str]] = []

        logger.info("[PAYLIVE MOCK] Gateway initialised")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _accept(self, operation: str, header: PaymentHeader) -> None:
        self.received_headers.append(header)
        self.calls.append((operation, header))
        if not (header.api_version and header.merchant_email and header.merchant_key and header.service_type):
            raise GatewayFault("Merchant authentication failed", fault_code="AUTHENTICATION")

    def _validate_new_order(self, order: PaymentOrder) -> Optional[str]:
        if not order.order_id:
            return "Order id is required"
        if order.order_id in self._orders:
            return f"Order id '{order.order_id}' has already been used"
        total = order.amounts.total
        if not total.present or total.amount <= Decimal("0"):
            return "Order total must be greater than zero"
        return None

    def _register_token_order(self, order: PaymentOrder) -> _MockOrder:
        token = str(uuid.uuid4())
        validate_transition(OrderStage.CREATED, OrderStage.TOKEN_ISSUED)
        record = _MockOrder(order=order, stage=OrderStage.TOKEN_ISSUED, token=token)
        self._orders[order.order_id] = record
        self._tokens[token] = order.order_id
        return record

    def order_stage(self, order_id: str) -> Optional[OrderStage]:
        record = self._orders.get(order_id)
        return record.stage if record else None

    def order_payload(self, order_id: str) -> Optional[PaymentOrder]:
        """The order exactly as the gateway received it."""
        record = self._orders.get(order_id)
        return record.order if record else None

    # ------------------------------------------------------------------
    # Token path
    # ------------------------------------------------------------------

    def mobile_payment_order(self, header: PaymentHeader, order: PaymentOrder) -> MobilePaymentOrderResponse:
        self._accept("mobilePaymentOrder", header)
        error = self._validate_new_order(order)
        if error:
            raise GatewayFault(error, fault_code="INVALID_ORDER")

        record = self._register_token_order(order)
        order_code = f"PL{random.randint(0, 99_999_999):08d}"
        logger.info("[PAYLIVE MOCK] Mobile payment order %s -> code=%s", order.order_id, order_code)
        return MobilePaymentOrderResponse(
            token=record.token,
            qr_code_url=f"{self._qr_base_url}/{order_code}.png",
            payment_order_code=order_code,
            raw={"integration_mode": header.integration_mode},
        )

    def process_payment_order(self, header: PaymentHeader, order: PaymentOrder) -> TokenIssuance:
        try:
            self._accept("processPaymentOrder", header)
        except GatewayFault as fault:
            # this operation reports every gateway failure as an error message
            return TokenIssuance.failure(fault.fault_string)
        error = self._validate_new_order(order)
        if error:
            logger.info("[PAYLIVE MOCK] Order %s rejected: %s", order.order_id, error)
            return TokenIssuance.failure(error)

        record = self._register_token_order(order)
        logger.info("[PAYLIVE MOCK] Payment order %s accepted", order.order_id)
        return TokenIssuance.success(record.token)

    def verify_mobile_payment(self, header: PaymentHeader, order_id: str) -> VerifyMobilePaymentResponse:
        self._accept("verifyMobilePayment", header)
        record = self._orders.get(order_id)
        if record is None:
            return VerifyMobilePaymentResponse(order_id=order_id, status=STATUS_NOT_FOUND)
        if record.stage in CODE_PATH_STAGES:
            raise GatewayFault(
                f"Order '{order_id}' was issued a payment code; use checkPaymentStatus",
                fault_code="WRONG_PATH",
            )
        return VerifyMobilePaymentResponse(
            order_id=order_id,
            status=record.status,
            transaction_id=record.transaction_id,
        )

    def confirm_transaction(self, header: PaymentHeader, token: str, transaction_id: str) -> int:
        self._accept("confirmTransaction", header)
        order_id = self._tokens.get(token)
        if order_id is None:
            logger.warning("[PAYLIVE MOCK] Confirm with unknown token")
            return RESULT_INVALID_TOKEN

        record = self._orders[order_id]
        if record.transaction_id is None or record.transaction_id != transaction_id:
            logger.warning("[PAYLIVE MOCK] Confirm for order %s with unexpected transaction id", order_id)
            return RESULT_FAILED
        if record.stage is OrderStage.CONFIRMED:
            return RESULT_SUCCESS

        validate_transition(record.stage, OrderStage.CONFIRMED)
        record.stage = OrderStage.CONFIRMED
        record.status = STATUS_CONFIRMED
        logger.info("[PAYLIVE MOCK] Order %s confirmed", order_id)
        return RESULT_SUCCESS

    def cancel_transaction(self, header: PaymentHeader, token: str, transaction_id: str) -> int:
        self._accept("cancelTransaction", header)
        logger.info("[PAYLIVE MOCK] cancelTransaction is not implemented by PayLIVE")
        return RESULT_FAILED

    # ------------------------------------------------------------------
    # Code path
    # ------------------------------------------------------------------

    def generate_payment_code(
        self,
        header: PaymentHeader,
        order: PaymentOrder,
        payer: str,
        mobile: str,
        provider: str,
        provider_type: str,
    ) -> str:
        self._accept("generatePaymentCode", header)
        self.code_requests.append({
            "order_id": order.order_id,
            "payer": payer,
            "mobile": mobile,
            "provider": provider,
            "provider_type": provider_type,
        })
        error = self._validate_new_order(order)
        if error is None and provider_type == ProviderType.MOBILE_MONEY.value and not mobile:
            error = "Mobile number is required for mobile money providers"
        if error:
            raise GatewayFault(error, fault_code="INVALID_ORDER")

        code = f"{random.randint(0, 9_999_999_999):010d}"
        validate_transition(OrderStage.CREATED, OrderStage.CODE_ISSUED)
        self._orders[order.order_id] = _MockOrder(
            order=order,
            stage=OrderStage.CODE_ISSUED,
            payment_code=code,
            provider=provider,
            provider_type=provider_type,
        )
        logger.info("[PAYLIVE MOCK] Payment code issued for %s via %s (%s)", order.order_id, provider, provider_type)
        return code

    def check_payment_status(self, header: PaymentHeader, order_id: str, provider: str, provider_type: str) -> str:
        self._accept("checkPaymentStatus", header)
        record = self._orders.get(order_id)
        if record is None:
            return STATUS_NOT_FOUND
        if record.stage in TOKEN_PATH_STAGES:
            raise GatewayFault(
                f"Order '{order_id}' was issued a token; use verifyMobilePayment",
                fault_code="WRONG_PATH",
            )
        if record.provider != provider or record.provider_type != provider_type:
            raise GatewayFault(f"Order '{order_id}' was not issued for provider {provider}", fault_code="PROVIDER")
        return record.status

    # ------------------------------------------------------------------
    # Payer simulation
    # ------------------------------------------------------------------

    def simulate_payment(self, order_id: str, transaction_id: Optional[str] = None) -> PaymentCallback:
        """Mark an order as paid by the payer and return the callback PayLIVE would send."""
        record = self._orders.get(order_id)
        if record is None:
            raise ValueError(f"[PAYLIVE MOCK] Order '{order_id}' not found.")

        transaction_id = transaction_id or uuid.uuid4().hex[:16].upper()
        if record.stage in CODE_PATH_STAGES:
            validate_transition(record.stage, OrderStage.PAID)
            record.stage = OrderStage.PAID
            record.status = STATUS_PAID
        elif record.stage is OrderStage.TOKEN_ISSUED and record.status == STATUS_PENDING:
            record.status = STATUS_COMPLETED
        else:
            raise ValueError(f"[PAYLIVE MOCK] Order '{order_id}' is already {record.status}.")

        record.transaction_id = transaction_id
        logger.info("[PAYLIVE MOCK] Payer completed order %s transaction=%s", order_id, transaction_id)
        return PaymentCallback(
            status=record.status,
            order_id=order_id,
            token=record.token,
            transaction_id=transaction_id,
        )
