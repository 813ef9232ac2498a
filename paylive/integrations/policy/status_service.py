from __future__ import annotations

import logging

from paylive.integrations.contracts.interfaces import (
    CancellationOutcome,
    CancellationResult,
    PaymentGateway,
    VerifyMobilePaymentResponse,
)
from paylive.integrations.contracts.payments import is_success_code
from paylive.integrations.policy.header_builder import HeaderFactory

logger = logging.getLogger(__name__)


class StatusService:
    """Status checks and terminal transitions for orders that already exist on PayLIVE."""

    def __init__(self, gateway: PaymentGateway, header_factory: HeaderFactory) -> None:
        self.gateway = gateway
        self.header_factory = header_factory

    def verify_mobile_payment_status(self, order_id: str) -> VerifyMobilePaymentResponse:
        return self.gateway.verify_mobile_payment(self.header_factory(), order_id)

    def check_payment_status(self, order_id: str, provider: str, provider_type: str) -> str:
        provider_type = getattr(provider_type, "value", provider_type)
        return self.gateway.check_payment_status(self.header_factory(), order_id, provider, provider_type)

    def confirm_transaction(self, token: str, transaction_id: str) -> int:
        """
        Confirm receipt of the transaction id returned via callback.

        The gateway result code is returned as is. Repeated calls are
        forwarded every time; idempotency belongs to the gateway.
        """
        code = self.gateway.confirm_transaction(self.header_factory(), token, transaction_id)
        if not is_success_code(code):
            logger.warning("confirmTransaction not successful transaction_id=%s code=%s", transaction_id, code)
        return code

    def cancel_transaction(self, token: str, transaction_id: str) -> CancellationResult:
        """
        Cancel a processed transaction.

        The call always goes to the gateway. When the gateway does not
        implement cancellation the outcome is UNSUPPORTED whatever the code,
        so a capability gap is never mistaken for a failed or successful cancel.
        """
        code = self.gateway.cancel_transaction(self.header_factory(), token, transaction_id)
        if not self.gateway.supports_cancellation:
            outcome = CancellationOutcome.UNSUPPORTED
        elif is_success_code(code):
            outcome = CancellationOutcome.CANCELLED
        else:
            outcome = CancellationOutcome.FAILED
        logger.info("cancelTransaction transaction_id=%s code=%s outcome=%s", transaction_id, code, outcome.value)
        return CancellationResult(code=code, outcome=outcome)
