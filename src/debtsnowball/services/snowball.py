"""Debt snowball settlement engine.

Each period pays the minimum on every open debt, then cascades the extra
allocation through the debts in stored order. A debt's minimum payment is
folded permanently into the extra allocation the period it clears.

The engine never re-sorts; callers present debts smallest balance first
(see :func:`debtsnowball.services.import_csv.sort_for_snowball`).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence, Tuple, Union

from ..config import DEFAULT_MAX_PERIODS
from ..logging_config import get_logger
from ..models.debt import Amount, Debt, DebtSnapshot, as_decimal

logger = get_logger(__name__)

DebtInput = Union[Debt, Tuple[Amount, Amount]]


class CompletionStatus(str, Enum):
    """Why a run stopped, or that it has not run yet."""

    PAID_OFF = "paid_off"
    SAFETY_BOUND = "safety_bound"
    STOPPED = "stopped"
    NOT_STARTED = "not_started"


@dataclass(frozen=True, slots=True)
class DebtCleared:
    """Emitted when a debt reaches a zero balance during settlement."""

    index: int
    allocation_increase: Decimal
    new_allocation: Decimal


@dataclass(frozen=True, slots=True)
class PeriodResult:
    """State of the simulation after one settlement step."""

    period: int
    debts: tuple[DebtSnapshot, ...]
    cleared: tuple[DebtCleared, ...]
    extra_allocation: Decimal

    @property
    def remaining_balance(self) -> Decimal:
        return sum((d.balance for d in self.debts if not d.is_paid_off), Decimal("0"))

    @property
    def unpaid_debts(self) -> tuple[DebtSnapshot, ...]:
        return tuple(d for d in self.debts if not d.is_paid_off)

    @property
    def all_paid_off(self) -> bool:
        return all(d.is_paid_off for d in self.debts)


@dataclass(frozen=True, slots=True)
class FinalSummary:
    """Totals reported at the end of a run."""

    periods: int
    status: CompletionStatus
    total_minimum_paid: Decimal
    total_extra_paid: Decimal
    total_paid: Decimal
    initial_allocation: Decimal
    final_allocation: Decimal

    @property
    def completed(self) -> bool:
        return self.status is CompletionStatus.PAID_OFF

    @property
    def years(self) -> Decimal:
        return Decimal(self.periods) / Decimal(12)


class DebtSnowballSimulator:
    """Runs a debt snowball one period at a time."""

    def __init__(
        self,
        debts: Iterable[DebtInput],
        initial_extra_allocation: Amount,
        *,
        on_debt_cleared: Optional[Callable[[DebtCleared], None]] = None,
    ) -> None:
        self._debts: list[Debt] = [self._own(item) for item in debts]
        self._extra_allocation = as_decimal(initial_extra_allocation)
        self._initial_allocation = self._extra_allocation
        self._period_count = 0
        self._allocation_history: list[Decimal] = []
        self._on_debt_cleared = on_debt_cleared
        self._status: Optional[CompletionStatus] = None

    @staticmethod
    def _own(item: DebtInput) -> Debt:
        """Copy caller input so the simulator has exclusive ownership."""

        if isinstance(item, Debt):
            return Debt(balance=item.balance, minimum_payment=item.minimum_payment)
        balance, minimum_payment = item
        return Debt(balance=balance, minimum_payment=minimum_payment)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def debts(self) -> tuple[DebtSnapshot, ...]:
        return tuple(DebtSnapshot.from_debt(i, d) for i, d in enumerate(self._debts))

    @property
    def extra_allocation(self) -> Decimal:
        return self._extra_allocation

    @property
    def initial_allocation(self) -> Decimal:
        return self._initial_allocation

    @property
    def period_count(self) -> int:
        return self._period_count

    @property
    def period_allocation_history(self) -> tuple[Decimal, ...]:
        return tuple(self._allocation_history)

    @property
    def all_debts_paid_off(self) -> bool:
        return all(d.is_paid_off for d in self._debts)

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------
    def _credit_payoff(self, index: int, credited: set[int], cleared: list[DebtCleared]) -> None:
        """Fold a cleared debt's minimum into the allocation, once per step."""

        if index in credited:
            return
        credited.add(index)
        increase = self._debts[index].minimum_payment
        self._extra_allocation += increase
        event = DebtCleared(
            index=index, allocation_increase=increase, new_allocation=self._extra_allocation
        )
        cleared.append(event)
        logger.info(
            "Debt paid off",
            extra={
                "debt_index": index,
                "allocation_increase": increase,
                "new_allocation": self._extra_allocation,
            },
        )
        if self._on_debt_cleared is not None:
            self._on_debt_cleared(event)

    def _first_unpaid(self) -> Optional[int]:
        for index, debt in enumerate(self._debts):
            if not debt.is_paid_off:
                return index
        return None

    def settle_one_period(self) -> PeriodResult:
        """Apply one period of minimum payments and cascaded extra allocation."""

        credited: set[int] = set()
        cleared: list[DebtCleared] = []

        # Minimum payments are independent per debt; nothing cascades here.
        open_before = [i for i, d in enumerate(self._debts) if not d.is_paid_off]
        for index in open_before:
            debt = self._debts[index]
            payment = min(debt.minimum_payment, debt.balance)
            if payment > 0:
                debt.make_payment(payment)

        for index in open_before:
            if self._debts[index].is_paid_off:
                self._credit_payoff(index, credited, cleared)

        remaining = self._extra_allocation
        while remaining > 0:
            index = self._first_unpaid()
            if index is None:
                break
            debt = self._debts[index]
            leftover = debt.make_payment(remaining)
            if debt.is_paid_off:
                self._credit_payoff(index, credited, cleared)
            if leftover == remaining:
                # Nothing was absorbed; looping again would never progress.
                break
            remaining = leftover

        self._allocation_history.append(self._extra_allocation)

        result = PeriodResult(
            period=len(self._allocation_history),
            debts=self.debts,
            cleared=tuple(cleared),
            extra_allocation=self._extra_allocation,
        )
        logger.debug(
            "Settled period",
            extra={
                "period": result.period,
                "remaining_balance": result.remaining_balance,
                "extra_allocation": self._extra_allocation,
                "cleared": len(cleared),
            },
        )
        return result

    def run_to_completion(
        self,
        max_periods: int = DEFAULT_MAX_PERIODS,
        *,
        on_period: Optional[Callable[[PeriodResult], None]] = None,
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> FinalSummary:
        """Settle periods until every debt is paid off or ``max_periods`` is hit."""

        if max_periods < 1:
            raise ValueError("max_periods must be at least 1.")

        logger.info(
            "Starting debt snowball",
            extra={
                "debts": len(self._debts),
                "extra_allocation": self._extra_allocation,
                "max_periods": max_periods,
            },
        )

        status = CompletionStatus.PAID_OFF
        while not self.all_debts_paid_off:
            if self._period_count >= max_periods:
                # Also covers a repeat call on a simulator already at the bound.
                status = CompletionStatus.SAFETY_BOUND
                logger.warning(
                    "Simulation stopped at safety bound",
                    extra={"max_periods": max_periods, "period": self._period_count},
                )
                break

            if should_stop is not None and should_stop():
                status = CompletionStatus.STOPPED
                logger.info("Simulation stopped", extra={"period": self._period_count})
                break

            self._period_count += 1
            result = self.settle_one_period()
            if on_period is not None:
                on_period(result)

        self._status = status
        return self.summary()

    # ------------------------------------------------------------------
    # Totals
    # ------------------------------------------------------------------
    @property
    def total_minimum_paid(self) -> Decimal:
        minimums = sum((d.minimum_payment for d in self._debts), Decimal("0"))
        return minimums * self._period_count

    @property
    def total_extra_paid(self) -> Decimal:
        return sum(self._allocation_history, Decimal("0"))

    @property
    def total_paid(self) -> Decimal:
        return self.total_minimum_paid + self.total_extra_paid

    def summary(self) -> FinalSummary:
        """Build the end-of-run totals from the current state."""

        status = self._status
        if status is None:
            status = (
                CompletionStatus.PAID_OFF
                if self.all_debts_paid_off
                else CompletionStatus.NOT_STARTED
            )
        return FinalSummary(
            periods=self._period_count,
            status=status,
            total_minimum_paid=self.total_minimum_paid,
            total_extra_paid=self.total_extra_paid,
            total_paid=self.total_paid,
            initial_allocation=self._initial_allocation,
            final_allocation=self._extra_allocation,
        )


def run_snowball(
    debts: Sequence[DebtInput],
    extra_allocation: Amount,
    *,
    max_periods: int = DEFAULT_MAX_PERIODS,
) -> tuple[FinalSummary, list[PeriodResult]]:
    """Convenience wrapper returning the summary plus every period's result."""

    results: list[PeriodResult] = []
    simulator = DebtSnowballSimulator(debts, extra_allocation)
    summary = simulator.run_to_completion(max_periods, on_period=results.append)
    return summary, results


__all__ = [
    "CompletionStatus",
    "DebtCleared",
    "DebtSnowballSimulator",
    "FinalSummary",
    "PeriodResult",
    "run_snowball",
]
