"""Debt input parsing: console lines and CSV files."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable

import pandas as pd

from ..logging_config import get_logger
from ..models.debt import Debt

logger = get_logger(__name__)

BALANCE_COLUMN = "balance"
MINIMUM_COLUMNS = ("minimum_payment", "minimum", "min_payment")


class DebtInputError(ValueError):
    """Raised when user-supplied debt or allocation input is invalid."""


def parse_amount(text: object, *, field: str = "amount") -> Decimal:
    """Parse ``text`` into an exact Decimal, rejecting NaN and infinities."""

    raw = "" if text is None else str(text).strip()
    if raw.startswith("$"):
        raw = raw[1:].strip()
    try:
        value = Decimal(raw)
    except InvalidOperation as exc:
        raise DebtInputError(f"Invalid {field}: {text!r}") from exc
    if not value.is_finite():
        raise DebtInputError(f"Invalid {field}: {text!r}")
    return value


def _positive(value: Decimal, *, field: str) -> Decimal:
    if value <= 0:
        raise DebtInputError(f"{field.capitalize()} must be greater than zero.")
    return value


def parse_debt_line(line: str) -> Debt:
    """Parse a ``balance,minimum`` line into a :class:`Debt`."""

    parts = line.split(",")
    if len(parts) != 2:
        raise DebtInputError("Invalid format. Please use: Balance,MinimumPayment")
    balance = _positive(parse_amount(parts[0], field="balance"), field="balance")
    minimum = _positive(parse_amount(parts[1], field="minimum payment"), field="minimum payment")
    return Debt(balance=balance, minimum_payment=minimum)


def parse_extra_allocation(text: object) -> Decimal:
    """Parse the extra per-period budget; it must be strictly positive."""

    return _positive(parse_amount(text, field="extra allocation"), field="extra allocation")


def normalize_frame(*, file_path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a CSV file as strings with consistent column casing."""

    # dtype=str keeps amounts out of float parsing so Decimal stays exact
    frame = pd.read_csv(file_path, encoding=encoding, dtype=str, skip_blank_lines=True)
    frame.columns = [str(c).strip().lower() for c in frame.columns]
    return frame


def _minimum_column(columns: Iterable[str]) -> str | None:
    available = set(columns)
    for candidate in MINIMUM_COLUMNS:
        if candidate in available:
            return candidate
    return None


def load_debts_csv(path: Path, *, encoding: str = "utf-8") -> list[Debt]:
    """Read debts from a CSV file with balance and minimum payment columns."""

    frame = normalize_frame(file_path=Path(path), encoding=encoding)
    minimum_column = _minimum_column(frame.columns)
    if BALANCE_COLUMN not in frame.columns or minimum_column is None:
        raise DebtInputError(
            f"{path} must have '{BALANCE_COLUMN}' and 'minimum_payment' columns."
        )

    debts: list[Debt] = []
    for row_number, (balance_raw, minimum_raw) in enumerate(
        zip(frame[BALANCE_COLUMN], frame[minimum_column]), start=2
    ):
        if pd.isna(balance_raw) and pd.isna(minimum_raw):
            continue
        try:
            debts.append(parse_debt_line(f"{balance_raw},{minimum_raw}"))
        except DebtInputError as exc:
            raise DebtInputError(f"{path}, line {row_number}: {exc}") from exc

    logger.info("Loaded debts from CSV", extra={"path": str(path), "count": len(debts)})
    return debts


def sort_for_snowball(debts: Iterable[Debt]) -> list[Debt]:
    """Return debts ordered smallest balance first; ties keep input order."""

    return sorted(debts, key=lambda d: d.balance)


__all__ = [
    "DebtInputError",
    "load_debts_csv",
    "normalize_frame",
    "parse_amount",
    "parse_debt_line",
    "parse_extra_allocation",
    "sort_for_snowball",
]
