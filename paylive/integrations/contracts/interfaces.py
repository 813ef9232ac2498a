from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ProviderType(str, Enum):
    MOBILE_MONEY = "MOBILE_MONEY"
    BANK = "BANK"
    CARD = "CARD"


class CancellationOutcome(str, Enum):
    CANCELLED = "CANCELLED"
    FAILED = "FAILED"
    UNSUPPORTED = "UNSUPPORTED"


DEFAULT_SERVICE_TYPE = "C2B"


# ---------------------------------------------------------------------------
# Shared data models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PaymentHeader:
    """Credential context attached to every gateway call."""
    api_version: str
    merchant_email: str
    merchant_key: str
    service_type: str = DEFAULT_SERVICE_TYPE
    integration_mode: bool = False       # True = sandbox, False = live

    def __repr__(self) -> str:
        return (
            f"PaymentHeader(api_version={self.api_version!r}, merchant_email={self.merchant_email!r}, "
            f"merchant_key='***', service_type={self.service_type!r}, "
            f"integration_mode={self.integration_mode!r})"
        )


@dataclass
class OrderItem:
    item_code: str
    item_name: str
    unit_price: Decimal
    quantity: int
    sub_total: Optional[Decimal] = None  # unit_price * quantity when omitted

    def __post_init__(self) -> None:
        # local import: amounts depends on this module
        from paylive.integrations.policy.amounts import AmountError, to_decimal

        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise AmountError("quantity", self.quantity)
        self.unit_price = to_decimal(self.unit_price, "unit_price")
        if self.sub_total is None:
            self.sub_total = self.unit_price * self.quantity
        else:
            self.sub_total = to_decimal(self.sub_total, "sub_total")


@dataclass(frozen=True)
class MoneyField:
    amount: Decimal
    present: bool = True


@dataclass(frozen=True)
class OrderAmounts:
    sub_total: MoneyField
    delivery_cost: MoneyField
    tax_amount: MoneyField
    total: MoneyField

    def as_pairs(self) -> Tuple[Tuple[str, MoneyField], ...]:
        """Wire order of the four amount fields."""
        return (
            ("subTotal", self.sub_total),
            ("deliveryCost", self.delivery_cost),
            ("taxAmount", self.tax_amount),
            ("total", self.total),
        )


@dataclass(frozen=True)
class PaymentOrder:
    order_id: str
    amounts: OrderAmounts
    comment1: str
    comment2: str
    items: Tuple[OrderItem, ...] = ()


@dataclass
class MobilePaymentOrderResponse:
    token: str
    qr_code_url: str
    payment_order_code: str
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class VerifyMobilePaymentResponse:
    order_id: str
    status: str                          # gateway-defined, e.g. PENDING / COMPLETED
    transaction_id: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PaymentCode:
    code: str
    order_id: str
    payer: str
    mobile: str
    provider: str
    provider_type: str


@dataclass(frozen=True)
class TokenIssuance:
    """Either a payment token or the gateway's error description, never both."""
    succeeded: bool
    token: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, token: str) -> "TokenIssuance":
        return cls(succeeded=True, token=token)

    @classmethod
    def failure(cls, error: str) -> "TokenIssuance":
        return cls(succeeded=False, error=error)


@dataclass(frozen=True)
class CancellationResult:
    code: int
    outcome: CancellationOutcome

    @property
    def cancelled(self) -> bool:
        return self.outcome is CancellationOutcome.CANCELLED


# ---------------------------------------------------------------------------
# Abstract gateway interface
# ---------------------------------------------------------------------------

class PaymentGateway(ABC):
    """Every PayLIVE gateway implementation (mock or real) must implement this interface.

    The header is passed explicitly on every call; implementations must not
    hold on to one between calls.
    """

    @property
    def supports_cancellation(self) -> bool:
        """Whether cancel_transaction is actually implemented by the backend."""
        return False

    # -- Token path --

    @abstractmethod
    def mobile_payment_order(self, header: PaymentHeader, order: PaymentOrder) -> MobilePaymentOrderResponse:
        """Create a mobile payment order and return its token, QR code URL and order code."""

    @abstractmethod
    def verify_mobile_payment(self, header: PaymentHeader, order_id: str) -> VerifyMobilePaymentResponse:
        """Return the current state of a mobile payment order."""

    @abstractmethod
    def process_payment_order(self, header: PaymentHeader, order: PaymentOrder) -> TokenIssuance:
        """Send order information and receive a token, or the gateway's error message."""

    @abstractmethod
    def confirm_transaction(self, header: PaymentHeader, token: str, transaction_id: str) -> int:
        """Confirm receipt of a transaction id. Returns the gateway result code."""

    @abstractmethod
    def cancel_transaction(self, header: PaymentHeader, token: str, transaction_id: str) -> int:
        """Cancel a processed transaction. Returns the gateway result code."""

    # -- Code path --

    @abstractmethod
    def generate_payment_code(
        self,
        header: PaymentHeader,
        order: PaymentOrder,
        payer: str,
        mobile: str,
        provider: str,
        provider_type: str,
    ) -> str:
        """Generate a payment code for a third party provider."""

    @abstractmethod
    def check_payment_status(self, header: PaymentHeader, order_id: str, provider: str, provider_type: str) -> str:
        """Return the status string of a third party payment."""


def as_item_tuple(items: Optional[Sequence[OrderItem]]) -> Tuple[OrderItem, ...]:
    return tuple(items or ())
