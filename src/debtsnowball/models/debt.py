"""Debt entities used by the snowball simulator."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

Amount = Union[Decimal, int, str, float]


def as_decimal(value: Amount) -> Decimal:
    """Return ``value`` as an exact Decimal.

    Floats go through ``str()`` so ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary expansion.
    """

    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@dataclass(slots=True)
class Debt:
    """A single balance being paid down."""

    balance: Decimal
    minimum_payment: Decimal

    def __post_init__(self) -> None:
        self.balance = as_decimal(self.balance)
        self.minimum_payment = as_decimal(self.minimum_payment)

    @property
    def is_paid_off(self) -> bool:
        return self.balance <= 0

    def make_payment(self, amount: Amount) -> Decimal:
        """Apply ``amount`` to the balance and return the unused portion."""

        amount = as_decimal(amount)
        if self.is_paid_off or amount <= 0:
            # Non-positive amounts apply nothing; the balance never increases.
            return amount

        applied = min(amount, self.balance)
        self.balance -= applied
        return amount - applied

    def __str__(self) -> str:
        return f"Balance: ${self.balance:.2f}, Min Payment: ${self.minimum_payment:.2f}"


@dataclass(frozen=True, slots=True)
class DebtSnapshot:
    """Read-only view of a debt at a point in the simulation."""

    index: int
    balance: Decimal
    minimum_payment: Decimal

    @property
    def is_paid_off(self) -> bool:
        return self.balance <= 0

    @classmethod
    def from_debt(cls, index: int, debt: Debt) -> "DebtSnapshot":
        return cls(index=index, balance=debt.balance, minimum_payment=debt.minimum_payment)
