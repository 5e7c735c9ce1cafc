"""Debt snowball payoff simulator."""

from __future__ import annotations

from .config import BaseConfig, DevConfig, TestConfig
from .models.debt import Debt, DebtSnapshot
from .services.snowball import (
    CompletionStatus,
    DebtCleared,
    DebtSnowballSimulator,
    FinalSummary,
    PeriodResult,
    run_snowball,
)

__all__ = [
    "BaseConfig",
    "CompletionStatus",
    "Debt",
    "DebtCleared",
    "DebtSnapshot",
    "DebtSnowballSimulator",
    "DevConfig",
    "FinalSummary",
    "PeriodResult",
    "TestConfig",
    "run_snowball",
]
