"""Tests for the record and analytics models.

This module tests:
- ExpenseRecord
- BudgetRecord
- BudgetStatusLabel ordering
- BudgetStatus derived fields
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from ledgerlens_core.models import (
    ALL_CATEGORIES,
    BudgetRecord,
    BudgetStatus,
    BudgetStatusLabel,
    ExpenseRecord,
    MonthlyPoint,
    RecurringPeriod,
)


def _expense(category: str, amount: str, day: date, expense_id: str = "e") -> ExpenseRecord:
    return ExpenseRecord(
        id=expense_id,
        account_id="acct_1",
        amount=Decimal(amount),
        category=category,
        date=day,
    )


class TestExpenseRecord:
    """Tests for ExpenseRecord model."""

    def test_create_basic_expense(self):
        """Should create an expense with required fields."""
        expense = _expense("Food", "42.50", date(2024, 1, 15))

        assert expense.amount == Decimal("42.50")
        assert expense.category == "Food"
        assert expense.date == date(2024, 1, 15)
        assert expense.tags == []
        assert expense.subcategory is None

    def test_datetime_is_reduced_to_date(self):
        """Time of day should be dropped from datetimes."""
        expense = ExpenseRecord(
            id="e1",
            account_id="acct_1",
            amount=Decimal("10"),
            category="Food",
            date=datetime(2024, 1, 15, 23, 59),
        )
        assert expense.date == date(2024, 1, 15)

    def test_iso_timestamp_is_reduced_to_date(self):
        """ISO timestamps should be parsed and reduced to their date."""
        expense = ExpenseRecord(
            id="e1",
            account_id="acct_1",
            amount="10",
            category="Food",
            date="2024-02-29T08:30:00",
        )
        assert expense.date == date(2024, 2, 29)
        assert expense.amount == Decimal("10")

    @pytest.mark.parametrize(
        "timestamp",
        ["2024-01-15T10:00:00Z", "2024-01-15T10:00:00.123Z", "2024-01-15T10:00:00+05:30"],
    )
    def test_utc_and_offset_timestamps_accepted(self, timestamp):
        """Zulu and offset timestamps reduce to the date as written."""
        expense = ExpenseRecord(
            id="e1",
            account_id="acct_1",
            amount=Decimal("10"),
            category="Food",
            date=timestamp,
        )
        assert expense.date == date(2024, 1, 15)

    def test_negative_amount_rejected(self):
        """Amounts must be non-negative."""
        with pytest.raises(ValueError):
            _expense("Food", "-1", date(2024, 1, 1))

    def test_blank_category_rejected(self):
        """Category must not be empty or whitespace."""
        with pytest.raises(ValueError):
            _expense("", "1", date(2024, 1, 1))
        with pytest.raises(ValueError):
            _expense("   ", "1", date(2024, 1, 1))

    def test_original_currency_fields_are_optional(self):
        """Original amount/currency/rate are kept for display."""
        expense = ExpenseRecord(
            id="e1",
            account_id="acct_1",
            amount=Decimal("108.00"),
            original_amount=Decimal("100.00"),
            original_currency="EUR",
            exchange_rate=Decimal("1.08"),
            category="Travel",
            date=date(2024, 1, 1),
        )
        assert expense.original_currency == "EUR"
        assert expense.amount == Decimal("108.00")

    def test_expense_is_frozen(self):
        """Expenses should be immutable once created."""
        expense = _expense("Food", "1", date(2024, 1, 1))
        with pytest.raises(ValueError):
            expense.amount = Decimal("2")


class TestBudgetRecord:
    """Tests for BudgetRecord model."""

    def test_create_budget(self):
        """Should create a budget with defaults."""
        budget = BudgetRecord(
            id="b1",
            account_id="acct_1",
            name="Groceries",
            category="Food",
            amount=Decimal("500"),
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 31),
            recurring_period=RecurringPeriod.MONTHLY,
        )

        assert budget.is_active is True
        assert budget.currency == "USD"
        assert budget.recurring_period == RecurringPeriod.MONTHLY
        assert budget.covers_all_categories is False
        assert budget.category_label == "Food"

    def test_all_sentinel(self):
        """The 'All' category should be labelled 'Overall'."""
        budget = BudgetRecord(
            id="b1",
            account_id="acct_1",
            name="Everything",
            category=ALL_CATEGORIES,
            amount=Decimal("2000"),
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 31),
        )
        assert budget.covers_all_categories is True
        assert budget.category_label == "Overall"

    @pytest.mark.parametrize("amount", ["0", "-5"])
    def test_non_positive_amount_rejected(self, amount: str):
        """Budget amount must be greater than zero."""
        with pytest.raises(ValueError):
            BudgetRecord(
                id="b1",
                account_id="acct_1",
                name="Bad",
                category="Food",
                amount=Decimal(amount),
                start_date=date(2024, 1, 1),
                end_date=date(2024, 1, 31),
            )

    def test_end_before_start_rejected(self):
        """end_date must be on or after start_date."""
        with pytest.raises(ValueError):
            BudgetRecord(
                id="b1",
                account_id="acct_1",
                name="Bad",
                category="Food",
                amount=Decimal("100"),
                start_date=date(2024, 2, 1),
                end_date=date(2024, 1, 31),
            )

    def test_single_day_budget_allowed(self):
        """A budget may start and end on the same day."""
        budget = BudgetRecord(
            id="b1",
            account_id="acct_1",
            name="Day out",
            category="Entertainment",
            amount=Decimal("50"),
            start_date=date(2024, 1, 6),
            end_date=date(2024, 1, 6),
        )
        assert budget.start_date == budget.end_date


class TestBudgetStatusLabel:
    """Tests for the status bucket ordering."""

    def test_severity_order(self):
        """Buckets should rank from Under Budget (best) to Expired."""
        ordered = [
            BudgetStatusLabel.UNDER_BUDGET,
            BudgetStatusLabel.ON_TRACK,
            BudgetStatusLabel.NEAR_LIMIT,
            BudgetStatusLabel.OVER_BUDGET,
            BudgetStatusLabel.EXPIRED,
        ]
        assert [label.severity for label in ordered] == [0, 1, 2, 3, 4]

    def test_values_are_display_strings(self):
        """Status values are the labels shown to users."""
        assert BudgetStatusLabel.NEAR_LIMIT.value == "Near Limit"
        assert BudgetStatusLabel.OVER_BUDGET == "Over Budget"


class TestBudgetStatus:
    """Tests for BudgetStatus derived fields."""

    @pytest.fixture
    def budget(self) -> BudgetRecord:
        return BudgetRecord(
            id="b1",
            account_id="acct_1",
            name="Groceries",
            category="Food",
            amount=Decimal("500"),
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 31),
        )

    def test_display_percent_capped(self, budget: BudgetRecord):
        """display_percent never exceeds 100."""
        status = BudgetStatus(
            budget=budget,
            spent=Decimal("600"),
            remaining=Decimal("0"),
            percent_used=Decimal("120"),
            status=BudgetStatusLabel.OVER_BUDGET,
        )
        assert status.display_percent == Decimal("100")
        assert status.is_over_budget is True

    def test_category_breakdown_folds_tail(self, budget: BudgetRecord):
        """More than k categories should fold into 'Other'."""
        expenses = [
            _expense(cat, str(amount), date(2024, 1, 10), f"e{i}")
            for i, (cat, amount) in enumerate(
                [("A", 60), ("B", 50), ("C", 40), ("D", 30), ("E", 20), ("F", 10)]
            )
        ]
        status = BudgetStatus(
            budget=budget,
            spent=Decimal("210"),
            remaining=Decimal("290"),
            percent_used=Decimal("42"),
            status=BudgetStatusLabel.UNDER_BUDGET,
            matching_expenses=expenses,
        )

        breakdown = status.category_breakdown(5)

        assert [row.key for row in breakdown] == ["A", "B", "C", "D", "Other"]
        assert breakdown[-1].total == Decimal("30")
        assert breakdown[-1].count == 2


class TestMonthlyPoint:
    """Tests for MonthlyPoint model."""

    def test_month_key_format_enforced(self):
        """Month keys must look like YYYY-MM."""
        MonthlyPoint(month_key="2024-01", label="Jan 2024", amount=Decimal("1"))
        with pytest.raises(ValueError):
            MonthlyPoint(month_key="2024-1", label="Jan 2024", amount=Decimal("1"))
