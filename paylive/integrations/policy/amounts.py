"""
Amount normalization for PayLIVE orders.

Every order carries four amounts (sub-total, delivery cost, tax, total), each
paired on the wire with a flag saying whether it was supplied. The connector
always supplies all four, so every flag is True here, zero amounts included.
No cross-field check (sub_total + delivery + tax == total) is made; the
gateway owns that validation.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Union

from paylive.integrations.contracts.interfaces import MoneyField, OrderAmounts

AmountInput = Union[Decimal, int, float, str]


class AmountError(ValueError):
    def __init__(self, label: str, value: Any) -> None:
        super().__init__(f"Invalid {label}: {value!r}")
        self.label = label
        self.value = value


def to_decimal(value: AmountInput, label: str) -> Decimal:
    if isinstance(value, bool):
        raise AmountError(label, value)
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, float):
        # str() keeps the short repr, so 10.1 becomes Decimal("10.1")
        amount = Decimal(str(value))
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, TypeError) as exc:
            raise AmountError(label, value) from exc
    if not amount.is_finite():
        raise AmountError(label, value)
    return amount


def present(value: AmountInput, label: str) -> MoneyField:
    return MoneyField(amount=to_decimal(value, label), present=True)


def normalize_amounts(
    sub_total: AmountInput,
    delivery_cost: AmountInput,
    tax_amount: AmountInput,
    total: AmountInput,
) -> OrderAmounts:
    return OrderAmounts(
        sub_total=present(sub_total, "sub_total"),
        delivery_cost=present(delivery_cost, "delivery_cost"),
        tax_amount=present(tax_amount, "tax_amount"),
        total=present(total, "total"),
    )
