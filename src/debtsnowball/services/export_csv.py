"""CSV export helpers for payoff schedules."""

from __future__ import annotations

import csv
from decimal import Decimal
from pathlib import Path
from typing import Sequence

from .snowball import PeriodResult


def _serialize_value(value):
    if value is None:
        return ""
    if isinstance(value, Decimal):
        # Plain notation; full precision is kept, rounding is a display concern
        return format(value, "f")
    return str(value)


def export_schedule_csv(*, results: Sequence[PeriodResult], output_path: Path) -> Path:
    """Write one row per settled period to CSV at `output_path`.

    Columns are deterministic: period, extra_allocation, remaining_balance,
    then debt_1..debt_n balances in stored order. Returns the path written.
    """

    debt_count = max((len(r.debts) for r in results), default=0)
    debt_headers = [f"debt_{n}" for n in range(1, debt_count + 1)]
    headers = ["period", "extra_allocation", "remaining_balance", *debt_headers]
    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(
            fh, fieldnames=headers, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
        )
        writer.writeheader()
        for result in results:
            row = {
                "period": _serialize_value(result.period),
                "extra_allocation": _serialize_value(result.extra_allocation),
                "remaining_balance": _serialize_value(result.remaining_balance),
            }
            for header, debt in zip(debt_headers, result.debts):
                row[header] = _serialize_value(debt.balance)
            writer.writerow(row)

    return output_path
