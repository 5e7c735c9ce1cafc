"""Reporting utilities: console text and payoff charts."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Iterable, Protocol, Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
from matplotlib.figure import Figure

from ..models.debt import DebtSnapshot
from .snowball import CompletionStatus, DebtCleared, FinalSummary, PeriodResult

CENT = Decimal("0.01")


class ReportRenderer(Protocol):
    """Protocol describing renderer behavior."""

    def render(self, figure: Figure, *, output_path: Path) -> None:  # pragma: no cover - interface
        ...


def format_currency(amount: Decimal) -> str:
    """Round to cents half-up and format with a dollar sign and separators."""

    rounded = Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
    if rounded < 0:
        return f"-${-rounded:,.2f}"
    return f"${rounded:,.2f}"


def render_debt_status(debts: Iterable[DebtSnapshot]) -> list[str]:
    """One line per debt, numbered from 1."""

    lines = []
    for number, debt in enumerate(debts, start=1):
        status = "PAID OFF" if debt.is_paid_off else f"Balance: {format_currency(debt.balance)}"
        lines.append(f"Debt #{number}: {status}")
    return lines


def render_payoff_notice(event: DebtCleared) -> str:
    return (
        f"Debt #{event.index + 1} paid off! Extra allocation increased by "
        f"{format_currency(event.allocation_increase)} to {format_currency(event.new_allocation)}"
    )


def render_period_summary(result: PeriodResult, *, label: str = "Month") -> list[str]:
    """Render remaining balances after a settlement step."""

    lines = [f"=== {label} {result.period} ==="]
    unpaid = result.unpaid_debts
    if not unpaid:
        lines.append("ALL DEBTS PAID OFF!")
        return lines

    lines.append(f"Remaining debts: {len(unpaid)}")
    lines.append(f"Total remaining balance: {format_currency(result.remaining_balance)}")
    for debt in unpaid:
        lines.append(
            f"  - Debt #{debt.index + 1}: Balance: {format_currency(debt.balance)}, "
            f"Min Payment: {format_currency(debt.minimum_payment)}"
        )
    return lines


def render_final_summary(summary: FinalSummary) -> list[str]:
    """Render the end-of-run totals."""

    years = summary.years.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    lines = [
        "=== FINAL SUMMARY ===",
        f"Total months to pay off all debts: {summary.periods}",
        f"Total years: {years}",
        f"Total minimum payments: {format_currency(summary.total_minimum_paid)}",
        f"Total extra payments: {format_currency(summary.total_extra_paid)}",
        f"Total amount paid: {format_currency(summary.total_paid)}",
        (
            f"Final extra allocation: {format_currency(summary.final_allocation)} "
            f"(started at {format_currency(summary.initial_allocation)})"
        ),
        "",
    ]
    if summary.status is CompletionStatus.PAID_OFF:
        lines.append("Congratulations! You're debt-free!")
    elif summary.status is CompletionStatus.SAFETY_BOUND:
        lines.append(
            f"Simulation stopped after {summary.periods} months to prevent an infinite loop; "
            "debts remain."
        )
    elif summary.status is CompletionStatus.NOT_STARTED:
        lines.append("Simulation has not run yet; debts remain.")
    else:
        lines.append(f"Simulation stopped after {summary.periods} months; debts remain.")
    return lines


def build_payoff_chart(results: Sequence[PeriodResult], *, starting_balance: Decimal | None = None) -> Figure:
    """Create a matplotlib line chart of total remaining balance per period."""

    x_vals: list[int] = []
    totals: list[float] = []
    if starting_balance is not None:
        x_vals.append(0)
        totals.append(float(starting_balance))
    for result in results:
        x_vals.append(result.period)
        totals.append(float(result.remaining_balance))

    fig, ax = plt.subplots(figsize=(10, 6))

    if totals:
        ax.plot(x_vals, totals, marker="o", color="#4F46E5", linewidth=2.5, markersize=4)
        ax.fill_between(x_vals, totals, color="#E0E7FF", alpha=0.5)

        # Periods where a debt cleared
        for result in results:
            if result.cleared:
                ax.axvline(x=result.period, color="#22C55E", linestyle="--", alpha=0.4, linewidth=1)

        if totals[-1] <= 0:
            ax.scatter([x_vals[-1]], [0], s=200, c="gold", marker="*", zorder=5, edgecolors="#F59E0B")
            ax.annotate(
                "DEBT FREE!",
                (x_vals[-1], 0),
                xytext=(0, 25),
                textcoords="offset points",
                ha="center",
                fontsize=12,
                fontweight="bold",
                color="#16A34A",
            )

        ax.grid(True, linestyle="--", alpha=0.3)
        ax.set_axisbelow(True)
        ax.set_title("Debt Snowball Payoff", fontsize=14, fontweight="bold", pad=15)
        ax.set_ylabel("Remaining Balance ($)", fontsize=11)
        ax.set_xlabel("Month", fontsize=11)
        ax.yaxis.set_major_formatter(mticker.FuncFormatter(lambda x, p: f"${x:,.0f}"))
    else:
        ax.text(0.5, 0.5, "No payoff schedule", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")

    plt.tight_layout()
    return fig


def export_payoff_png(
    results: Sequence[PeriodResult],
    *,
    output_path: Path,
    starting_balance: Decimal | None = None,
    renderer: ReportRenderer | None = None,
) -> Path:
    """Render the payoff chart to PNG and return the path."""

    fig = build_payoff_chart(results, starting_balance=starting_balance)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if renderer is not None:
        renderer.render(fig, output_path=output_path)
    else:
        fig.savefig(output_path, bbox_inches="tight", dpi=120)
    plt.close(fig)
    return output_path
