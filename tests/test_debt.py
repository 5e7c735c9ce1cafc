"""Tests for the Debt entity and its payment application."""

from __future__ import annotations

import dataclasses
from decimal import Decimal

import pytest

from debtsnowball.models.debt import Debt, DebtSnapshot, as_decimal
from tests.conftest import D, assert_money_equal


class TestDebtConstruction:
    """Tests for building debts from different amount types."""

    def test_constructor_sets_balance_and_minimum(self, debt_factory):
        """Balance and minimum payment are stored exactly."""
        debt = debt_factory("1000.00", "50.00")

        assert_money_equal(debt.balance, "1000.00")
        assert_money_equal(debt.minimum_payment, "50.00")

    def test_string_and_int_amounts_become_decimal(self):
        """Non-Decimal inputs are converted on construction."""
        debt = Debt(balance="250.10", minimum_payment=25)

        assert debt.balance == Decimal("250.10")
        assert debt.minimum_payment == Decimal("25")

    def test_float_amounts_keep_their_literal_value(self):
        """Floats are converted through str() so 0.1 stays 0.1."""
        debt = Debt(balance=0.1, minimum_payment=0.2)

        assert debt.balance == Decimal("0.1")
        assert debt.minimum_payment == Decimal("0.2")
        assert as_decimal(19.99) == Decimal("19.99")

    def test_negative_minimum_payment_is_accepted(self, debt_factory):
        """Construction does not validate minimum payments."""
        debt = debt_factory("1000.00", "-25.00")

        assert_money_equal(debt.minimum_payment, "-25.00")

    @pytest.mark.parametrize(
        "balance, minimum",
        [("0.01", "0.01"), ("100.00", "25.00"), ("9999.99", "500.00"), ("999999.99", "5000.00")],
    )
    def test_valid_amounts_round_trip(self, debt_factory, balance, minimum):
        """Small and large amounts are kept verbatim."""
        debt = debt_factory(balance, minimum)

        assert debt.balance == D(balance)
        assert debt.minimum_payment == D(minimum)
        assert not debt.is_paid_off

    def test_str_formats_two_fraction_digits(self, debt_factory):
        """String form is a display helper rounded to cents."""
        debt = debt_factory("1234.56", "78.90")

        assert str(debt) == "Balance: $1234.56, Min Payment: $78.90"


class TestIsPaidOff:
    """Tests for the paid-off predicate."""

    @pytest.mark.parametrize(
        "balance, expected",
        [("0.00", True), ("-10.00", True), ("-100.00", True), ("100.00", False), ("0.01", False)],
    )
    def test_paid_off_iff_balance_not_positive(self, debt_factory, balance, expected):
        """A debt is paid off exactly when balance <= 0."""
        assert debt_factory(balance, "50.00").is_paid_off is expected


class TestMakePayment:
    """Tests for applying a payment to a debt."""

    def test_payment_less_than_balance_reduces_balance(self, debt_factory):
        """Partial payment leaves no leftover."""
        debt = debt_factory("1000.00", "50.00")

        leftover = debt.make_payment(D("300.00"))

        assert_money_equal(debt.balance, "700.00")
        assert_money_equal(leftover, "0.00")

    def test_payment_equal_to_balance_clears_debt(self, debt_factory):
        """Exact payment clears the debt with nothing left over."""
        debt = debt_factory("1000.00", "50.00")

        leftover = debt.make_payment(D("1000.00"))

        assert_money_equal(debt.balance, "0.00")
        assert_money_equal(leftover, "0.00")
        assert debt.is_paid_off

    def test_payment_exceeding_balance_returns_excess(self, debt_factory):
        """Overpayment is returned to the caller."""
        debt = debt_factory("1000.00", "50.00")

        leftover = debt.make_payment(D("1500.00"))

        assert_money_equal(debt.balance, "0.00")
        assert_money_equal(leftover, "500.00")
        assert debt.is_paid_off

    def test_paid_off_debt_returns_full_amount(self, debt_factory):
        """Payments to a cleared debt are not consumed."""
        debt = debt_factory("0.00", "50.00")

        leftover = debt.make_payment(D("100.00"))

        assert_money_equal(debt.balance, "0.00")
        assert_money_equal(leftover, "100.00")

    def test_negative_balance_is_never_clamped(self, debt_factory):
        """A negative starting balance stays as it was."""
        debt = debt_factory("-10.00", "50.00")

        leftover = debt.make_payment(D("25.00"))

        assert_money_equal(debt.balance, "-10.00")
        assert_money_equal(leftover, "25.00")

    def test_zero_payment_changes_nothing(self, debt_factory):
        """A zero payment leaves balance and returns zero."""
        debt = debt_factory("1000.00", "50.00")

        leftover = debt.make_payment(D("0.00"))

        assert_money_equal(debt.balance, "1000.00")
        assert_money_equal(leftover, "0.00")

    @pytest.mark.parametrize("payment", ["-10.00", "-0.01"])
    def test_negative_payment_never_increases_balance(self, debt_factory, payment):
        """A negative amount is handed back untouched."""
        debt = debt_factory("100.00", "10.00")

        leftover = debt.make_payment(D(payment))

        assert_money_equal(debt.balance, "100.00")
        assert_money_equal(leftover, payment)

    def test_very_small_balance(self, debt_factory):
        """One cent owed, two cents paid: one cent comes back."""
        debt = debt_factory("0.01", "25.00")

        leftover = debt.make_payment(D("0.02"))

        assert_money_equal(debt.balance, "0.00")
        assert_money_equal(leftover, "0.01")
        assert debt.is_paid_off

    def test_decimal_precision_is_exact(self, debt_factory):
        """Sub-cent amounts are not rounded."""
        debt = debt_factory("100.123", "25.456")

        debt.make_payment(D("50.789"))

        assert_money_equal(debt.balance, "49.334")

    @pytest.mark.parametrize(
        "balance, payment, expected_balance",
        [
            ("1000.00", "100.00", "900.00"),
            ("500.00", "75.00", "425.00"),
            ("200.00", "200.00", "0.00"),
            ("200.00", "350.00", "0.00"),
        ],
    )
    def test_applied_plus_leftover_equals_payment(self, debt_factory, balance, payment, expected_balance):
        """Every cent of a payment is either applied or returned."""
        debt = debt_factory(balance, "25.00")
        before = debt.balance

        leftover = debt.make_payment(D(payment))
        applied = before - debt.balance

        assert_money_equal(debt.balance, expected_balance)
        assert applied + leftover == D(payment)
        assert debt.balance <= before


class TestDebtSnapshot:
    """Tests for the read-only snapshot view."""

    def test_snapshot_copies_values(self, debt_factory):
        """Snapshots reflect the debt at capture time."""
        debt = debt_factory("300.00", "30.00")
        snapshot = DebtSnapshot.from_debt(2, debt)

        debt.make_payment(D("100.00"))

        assert snapshot.index == 2
        assert_money_equal(snapshot.balance, "300.00")
        assert not snapshot.is_paid_off

    def test_snapshot_is_immutable(self, debt_factory):
        """Callers cannot mutate a snapshot."""
        snapshot = DebtSnapshot.from_debt(0, debt_factory())

        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.balance = D("0")  # type: ignore[misc]
