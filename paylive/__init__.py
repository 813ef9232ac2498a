"""
PayLIVE connector

Client-side integration for the iWallet PayLIVE payment service: payment
orders, tokens and payment codes, status checks, and transaction
confirmation/cancellation.
"""

from .connector import PayliveConnector
from .integrations.clients.mocks.paylive import PayliveMockGateway
from .integrations.clients.real_http.paylive import SoapPayliveGateway
from .integrations.contracts.interfaces import (
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
from .integrations.contracts.payments import (
    RESULT_FAILED,
    RESULT_INVALID_TOKEN,
    RESULT_SUCCESS,
    OrderStage,
    PaymentCallback,
    is_success_code,
)
from .integrations.policy.amounts import AmountError
from .integrations.policy.response_wrappers import GatewayFault, IntegrationResponseError
from .utils.config_loader import ConfigurationError, PayliveSettings, load_paylive_settings

__version__ = "0.1.0"

__all__ = [
    # Connector
    "PayliveConnector",
    "PayliveSettings",
    "load_paylive_settings",
    # Gateways
    "PaymentGateway",
    "PayliveMockGateway",
    "SoapPayliveGateway",
    # Errors
    "AmountError",
    "ConfigurationError",
    "GatewayFault",
    "IntegrationResponseError",
    # Models
    "CancellationOutcome",
    "CancellationResult",
    "MobilePaymentOrderResponse",
    "MoneyField",
    "OrderAmounts",
    "OrderItem",
    "PaymentCallback",
    "PaymentCode",
    "PaymentHeader",
    "PaymentOrder",
    "ProviderType",
    "TokenIssuance",
    "VerifyMobilePaymentResponse",
    # Lifecycle
    "OrderStage",
    "RESULT_FAILED",
    "RESULT_INVALID_TOKEN",
    "RESULT_SUCCESS",
    "is_success_code",
]
