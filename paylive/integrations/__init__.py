"""
Integrations layer.

This package contains all code used to communicate with the PayLIVE payment
service:
- contracts: request/response shapes and the PaymentGateway interface
- policy: header building, amount normalization, order and status services
- clients: the mock gateway and the real SOAP gateway

Key rule:
- Callers use paylive.connector.PayliveConnector, never a gateway directly.
"""

from .contracts.interfaces import (
    CancellationOutcome,
    CancellationResult,
    MobilePaymentOrderResponse,
    MoneyField,
    OrderAmounts,
    OrderItem,
    PaymentCode,
    PaymentGateway,
    PaymentHeader,
    PaymentOrder,
    ProviderType,
    TokenIssuance,
    VerifyMobilePaymentResponse,
)
from .contracts.payments import (
    ALLOWED_TRANSITIONS,
    RESULT_FAILED,
    RESULT_INVALID_TOKEN,
    RESULT_SUCCESS,
    InvalidTransitionError,
    OrderStage,
    PaymentCallback,
    is_success_code,
    is_terminal_stage,
    validate_transition,
)

__all__ = [
    # interfaces
    "CancellationOutcome", "CancellationResult", "MobilePaymentOrderResponse",
    "MoneyField", "OrderAmounts", "OrderItem", "PaymentCode", "PaymentGateway",
    "PaymentHeader", "PaymentOrder", "ProviderType", "TokenIssuance",
    "VerifyMobilePaymentResponse",
    # payments
    "ALLOWED_TRANSITIONS", "RESULT_FAILED", "RESULT_INVALID_TOKEN", "RESULT_SUCCESS",
    "InvalidTransitionError", "OrderStage", "PaymentCallback", "is_success_code",
    "is_terminal_stage", "validate_transition",
]
