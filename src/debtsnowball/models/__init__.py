"""Domain model exports."""

from .debt import Debt, DebtSnapshot, as_decimal

__all__ = [
    "Debt",
    "DebtSnapshot",
    "as_decimal",
]
