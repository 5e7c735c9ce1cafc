"""Command line interface for the debt snowball simulator."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import click

from .config import BaseConfig
from .logging_config import get_logger, setup_logging
from .models.debt import Debt
from .services.export_csv import export_schedule_csv
from .services.import_csv import (
    DebtInputError,
    load_debts_csv,
    parse_debt_line,
    parse_extra_allocation,
    sort_for_snowball,
)
from .services.reports import (
    export_payoff_png,
    format_currency,
    render_debt_status,
    render_final_summary,
    render_payoff_notice,
    render_period_summary,
)
from .services.snowball import DebtCleared, DebtSnowballSimulator, PeriodResult

logger = get_logger(__name__)


class ExtraAllocationType(click.ParamType):
    """Positive decimal amount."""

    name = "amount"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            return parse_extra_allocation(value)
        except DebtInputError as exc:
            self.fail(str(exc), param, ctx)


class DebtLineType(click.ParamType):
    """A ``balance,minimum`` pair."""

    name = "balance,minimum"

    def convert(self, value, param, ctx):
        if isinstance(value, Debt):
            return value
        try:
            return parse_debt_line(value)
        except DebtInputError as exc:
            self.fail(str(exc), param, ctx)


def _echo_lines(lines) -> None:
    for line in lines:
        click.echo(line)


def _prompt_extra_allocation() -> Decimal:
    while True:
        raw = click.prompt(
            "Enter the EXTRA amount you can pay toward debt each month "
            "(on top of minimum payments)",
            default="",
            show_default=False,
            prompt_suffix=": $",
        )
        try:
            return parse_extra_allocation(raw)
        except DebtInputError:
            click.echo("Please enter a valid positive amount.")


def _prompt_debts() -> list[Debt]:
    click.echo("")
    click.echo("Enter your debts (one per line).")
    click.echo("Format: Balance,MinimumPayment (e.g., 5000.00,150.00)")
    click.echo("Enter an empty line when finished.")
    click.echo("")

    debts: list[Debt] = []
    while True:
        raw = click.prompt(f"Debt #{len(debts) + 1}", default="", show_default=False)
        if not raw.strip():
            return debts
        try:
            debts.append(parse_debt_line(raw))
        except DebtInputError:
            click.echo("Invalid format. Please use: Balance,MinimumPayment")


@click.group()
def main() -> None:
    """Debt snowball calculator."""


@main.command("simulate")
@click.option("--extra", "extra", type=ExtraAllocationType(), default=None,
              help="Extra amount paid each month on top of minimum payments.")
@click.option("--debt", "debt_lines", type=DebtLineType(), multiple=True,
              help="A debt as BALANCE,MINIMUM. Repeat for several debts.")
@click.option("--file", "csv_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              default=None, help="CSV file with balance and minimum_payment columns.")
@click.option("--max-periods", type=click.IntRange(min=1), default=None,
              help="Safety bound on simulated months (default from config).")
@click.option("--export-csv", "export_csv_path", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="Write the month-by-month schedule to CSV.")
@click.option("--chart", "chart_path", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="Write a payoff chart PNG.")
@click.option("--quiet", is_flag=True, default=False, help="Only print the final summary.")
def simulate(
    extra: Decimal | None,
    debt_lines: tuple[Debt, ...],
    csv_file: Path | None,
    max_periods: int | None,
    export_csv_path: Path | None,
    chart_path: Path | None,
    quiet: bool,
) -> None:
    """Simulate paying off debts with the snowball method."""

    config = BaseConfig()
    setup_logging(config)

    click.echo("=== Debt Snowball Calculator ===")
    click.echo("")

    if extra is None:
        extra = _prompt_extra_allocation()

    debts = list(debt_lines)
    if csv_file is not None:
        try:
            debts.extend(load_debts_csv(csv_file))
        except DebtInputError as exc:
            raise click.ClickException(str(exc)) from exc
    if not debts:
        debts = _prompt_debts()

    if not debts:
        click.echo("No debts entered. Exiting...")
        return

    ordered = sort_for_snowball(debts)
    starting_balance = sum((d.balance for d in ordered), Decimal("0"))

    def on_debt_cleared(event: DebtCleared) -> None:
        if not quiet:
            click.echo(render_payoff_notice(event))

    results: list[PeriodResult] = []

    def on_period(result: PeriodResult) -> None:
        results.append(result)
        if not quiet:
            _echo_lines(render_period_summary(result))
            click.echo("")

    simulator = DebtSnowballSimulator(ordered, extra, on_debt_cleared=on_debt_cleared)

    click.echo("")
    click.echo("=== Debt Snowball Simulation ===")
    click.echo("")
    click.echo(
        f"Starting debt snowball with {format_currency(extra)} extra monthly allocation "
        "(on top of minimum payments)."
    )
    click.echo("")
    click.echo("Initial debt balances:")
    _echo_lines(render_debt_status(simulator.debts))
    click.echo("")

    summary = simulator.run_to_completion(
        max_periods or config.MAX_PERIODS, on_period=on_period
    )
    _echo_lines(render_final_summary(summary))

    if export_csv_path is not None:
        path = export_schedule_csv(results=results, output_path=export_csv_path)
        click.echo(f"Schedule written: {path}")
    if chart_path is not None:
        path = export_payoff_png(results, output_path=chart_path, starting_balance=starting_balance)
        click.echo(f"Chart written: {path}")

    logger.info(
        "Simulation finished",
        extra={"periods": summary.periods, "status": summary.status.value},
    )


if __name__ == "__main__":  # pragma: no cover
    main()
