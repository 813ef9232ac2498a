"""
Payment lifecycle contracts.

Defines the stages a PayLIVE order moves through and the result codes the
gateway reports for terminal transitions. Two mutually exclusive paths exist:

- token path:  CREATED -> TOKEN_ISSUED -> CONFIRMED | CANCELLED
- code path:   CREATED -> CODE_ISSUED -> PAID

The connector itself is stateless and never tracks these stages; they are
used by the mock gateway and by callers that keep their own order records.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Set


# ---------------------------------------------------------------------------
# Result codes
# ---------------------------------------------------------------------------

RESULT_SUCCESS = 1
RESULT_FAILED = 0
RESULT_INVALID_TOKEN = -1


def is_success_code(code: int) -> bool:
    return code == RESULT_SUCCESS


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

class OrderStage(str, Enum):
    CREATED = "CREATED"
    TOKEN_ISSUED = "TOKEN_ISSUED"
    CODE_ISSUED = "CODE_ISSUED"
    PAID = "PAID"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


ALLOWED_TRANSITIONS: Dict[OrderStage, Set[OrderStage]] = {
    OrderStage.CREATED: {OrderStage.TOKEN_ISSUED, OrderStage.CODE_ISSUED},
    OrderStage.TOKEN_ISSUED: {OrderStage.CONFIRMED, OrderStage.CANCELLED},
    OrderStage.CODE_ISSUED: {OrderStage.PAID},
    OrderStage.PAID: set(),
    OrderStage.CONFIRMED: set(),
    OrderStage.CANCELLED: set(),
}

TOKEN_PATH_STAGES = frozenset({OrderStage.TOKEN_ISSUED, OrderStage.CONFIRMED, OrderStage.CANCELLED})
CODE_PATH_STAGES = frozenset({OrderStage.CODE_ISSUED, OrderStage.PAID})


class InvalidTransitionError(ValueError):
    def __init__(self, current: OrderStage, new: OrderStage) -> None:
        super().__init__(f"Invalid transition: {current.value} -> {new.value}")
        self.current = current
        self.new = new


def validate_transition(current: OrderStage, new: OrderStage) -> None:
    """Raise when a transition is not allowed by the order lifecycle."""
    if new not in ALLOWED_TRANSITIONS.get(current, set()):
        raise InvalidTransitionError(current, new)


def is_terminal_stage(stage: OrderStage) -> bool:
    return not ALLOWED_TRANSITIONS.get(stage)


# ---------------------------------------------------------------------------
# Callback
# ---------------------------------------------------------------------------

@dataclass
class PaymentCallback:
    """Notification sent by PayLIVE to the merchant's callback URL once a payer completes payment."""
    status: str
    order_id: str
    token: Optional[str] = None
    transaction_id: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def can_confirm(self) -> bool:
        """True when the callback carries the token/transaction pair confirm_transaction needs."""
        return bool(self.token and self.transaction_id)
