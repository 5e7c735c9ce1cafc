"""Pytest configuration and shared fixtures for debt snowball tests.

Provides an isolated environment (data dir, dev mode), debt and simulator
factories, and exact-money assertion helpers.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable

import pytest

from debtsnowball.logging_config import ROOT_LOGGER_NAME
from debtsnowball.models.debt import Debt
from debtsnowball.services.snowball import DebtSnowballSimulator


def D(value) -> Decimal:
    """Shorthand for exact decimal literals in tests."""
    return Decimal(str(value))


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point configuration at a temporary data dir for every test.

    Also resets the package logger afterwards so file handlers opened in one
    test never write into another test's temporary directory.
    """
    data_dir = tmp_path / "data"
    monkeypatch.setenv("DEBTSNOWBALL_DATA_DIR", str(data_dir))
    monkeypatch.setenv("DEBTSNOWBALL_DEV_MODE", "false")
    monkeypatch.delenv("DEBTSNOWBALL_MAX_PERIODS", raising=False)
    monkeypatch.delenv("DEBTSNOWBALL_LOG_LEVEL", raising=False)

    yield data_dir

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


# =============================================================================
# Factories
# =============================================================================


@pytest.fixture
def debt_factory():
    """Build a Debt from string/number amounts."""

    def _create_debt(balance="1000.00", minimum_payment="50.00") -> Debt:
        return Debt(balance=D(balance), minimum_payment=D(minimum_payment))

    return _create_debt


@pytest.fixture
def simulator_factory():
    """Build a simulator from ``(balance, minimum)`` pairs.

    Returns the simulator; pass ``events`` to collect DebtCleared notifications.
    """

    def _create_simulator(
        pairs: Iterable[tuple], allocation="100.00", events: list | None = None
    ) -> DebtSnowballSimulator:
        debts = [Debt(balance=D(b), minimum_payment=D(m)) for b, m in pairs]
        callback = events.append if events is not None else None
        return DebtSnowballSimulator(debts, D(allocation), on_debt_cleared=callback)

    return _create_simulator


# =============================================================================
# Assertion Helpers
# =============================================================================


def assert_money_equal(actual: Decimal, expected) -> None:
    """Assert exact decimal equality (no float tolerance).

    Args:
        actual: Value produced by the code under test
        expected: Expected amount as str, int or Decimal

    Raises:
        AssertionError: If the amounts differ at all
    """
    assert isinstance(actual, Decimal), f"expected Decimal, got {type(actual).__name__}"
    assert actual == D(expected), f"Expected {expected}, got {actual}"


def balances(simulator: DebtSnowballSimulator) -> list[Decimal]:
    """Current balances in stored order."""
    return [debt.balance for debt in simulator.debts]
