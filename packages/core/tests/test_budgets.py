"""Tests for the budget evaluator."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerlens_core import BudgetEvaluator, BudgetStatus
from ledgerlens_core.budgets import is_active, is_expired, matches_budget, percent_of
from ledgerlens_core.config import BudgetThresholds
from ledgerlens_core.models import ALL_CATEGORIES, BudgetRecord, BudgetStatusLabel, ExpenseRecord


def _expense(category: str, amount: str, day: date, expense_id: str) -> ExpenseRecord:
    return ExpenseRecord(
        id=expense_id,
        account_id="acct_1",
        amount=Decimal(amount),
        category=category,
        date=day,
    )


def _budget(
    category: str = "Food",
    amount: str = "500",
    start: date = date(2024, 1, 1),
    end: date = date(2024, 1, 31),
    **kwargs,
) -> BudgetRecord:
    return BudgetRecord(
        id=kwargs.pop("id", f"bud_{category.lower()}"),
        account_id="acct_1",
        name=f"{category} budget",
        category=category,
        amount=Decimal(amount),
        start_date=start,
        end_date=end,
        **kwargs,
    )


@pytest.fixture
def food_budget() -> BudgetRecord:
    return _budget()


@pytest.fixture
def january_expenses() -> list[ExpenseRecord]:
    """Food spend of 520 inside January plus noise outside the budget."""
    return [
        _expense("Food", "300", date(2024, 1, 5), "e1"),
        _expense("Food", "220", date(2024, 1, 31), "e2"),
        _expense("Transport", "80", date(2024, 1, 12), "e3"),
        _expense("Food", "999", date(2023, 12, 31), "e4"),
        _expense("Food", "999", date(2024, 2, 1), "e5"),
    ]


class TestBudgetEvaluator:
    """Test suite for BudgetEvaluator.evaluate."""

    def test_over_budget_within_window(self, food_budget, january_expenses):
        """520 spent of 500 is Over Budget at 104%."""
        status = BudgetEvaluator().evaluate(food_budget, january_expenses, date(2024, 1, 20))

        assert isinstance(status, BudgetStatus)
        assert status.spent == Decimal("520")
        assert status.remaining == Decimal("0")
        assert status.percent_used == Decimal("104")
        assert status.status == BudgetStatusLabel.OVER_BUDGET
        assert [e.id for e in status.matching_expenses] == ["e1", "e2"]

    def test_expired_regardless_of_spend(self, food_budget, january_expenses):
        """A budget past its end date is Expired whatever it used."""
        status = BudgetEvaluator().evaluate(food_budget, january_expenses, date(2024, 3, 1))

        assert status.status == BudgetStatusLabel.EXPIRED
        assert status.percent_used == Decimal("104")

    def test_end_date_itself_is_not_expired(self, food_budget):
        """The last day of a budget still counts as running."""
        status = BudgetEvaluator().evaluate(food_budget, [], date(2024, 1, 31))
        assert status.status == BudgetStatusLabel.UNDER_BUDGET

    @pytest.mark.parametrize(
        "spent,expected",
        [
            ("0", BudgetStatusLabel.UNDER_BUDGET),
            ("374.99", BudgetStatusLabel.UNDER_BUDGET),
            ("375", BudgetStatusLabel.ON_TRACK),
            ("449.99", BudgetStatusLabel.ON_TRACK),
            ("450", BudgetStatusLabel.NEAR_LIMIT),
            ("499.99", BudgetStatusLabel.NEAR_LIMIT),
            ("500", BudgetStatusLabel.OVER_BUDGET),
        ],
    )
    def test_threshold_boundaries(self, food_budget, spent, expected):
        """75/90/100 percent boundaries are inclusive."""
        expenses = [_expense("Food", spent, date(2024, 1, 10), "e1")]
        status = BudgetEvaluator().evaluate(food_budget, expenses, date(2024, 1, 15))
        assert status.status == expected

    def test_all_categories_budget(self, january_expenses):
        """The 'All' sentinel sums every category inside the window."""
        budget = _budget(category=ALL_CATEGORIES, amount="1000")
        status = BudgetEvaluator().evaluate(budget, january_expenses, date(2024, 1, 15))

        assert status.spent == Decimal("600")
        assert status.remaining == Decimal("400")
        assert status.percent_used == Decimal("60")

    def test_zero_amount_is_guarded(self, january_expenses):
        """An unvalidated zero-amount budget reports 0% instead of dividing by zero."""
        budget = BudgetRecord.model_construct(
            id="b0",
            account_id="acct_1",
            name="Broken",
            category="Food",
            amount=Decimal("0"),
            currency="USD",
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 31),
            notes=None,
            is_active=True,
            recurring_period=None,
        )
        status = BudgetEvaluator().evaluate(budget, january_expenses, date(2024, 1, 15))

        assert status.percent_used == Decimal("0")
        assert status.remaining == Decimal("0")
        assert status.spent == Decimal("520")

    def test_percent_of_guard(self):
        """percent_of never divides by a non-positive amount."""
        assert percent_of(Decimal("10"), Decimal("0")) == Decimal("0")
        assert percent_of(Decimal("10"), Decimal("-5")) == Decimal("0")
        assert percent_of(Decimal("25"), Decimal("50")) == Decimal("50")

    def test_monotone_in_spend(self, food_budget):
        """More spend never lowers percent used or improves the bucket."""
        evaluator = BudgetEvaluator()
        previous_percent = Decimal("-1")
        previous_severity = -1
        for spent in range(0, 800, 25):
            expenses = [_expense("Food", str(spent), date(2024, 1, 10), "e1")]
            status = evaluator.evaluate(food_budget, expenses, date(2024, 1, 15))
            assert status.percent_used >= previous_percent
            assert status.status.severity >= previous_severity
            previous_percent = status.percent_used
            previous_severity = status.status.severity

    def test_deterministic(self, food_budget, january_expenses):
        """Repeated evaluation of the same inputs gives equal results."""
        evaluator = BudgetEvaluator()
        now = date(2024, 1, 20)
        assert evaluator.evaluate(food_budget, january_expenses, now) == evaluator.evaluate(
            food_budget, january_expenses, now
        )

    def test_custom_thresholds(self, food_budget):
        """Thresholds come from configuration."""
        evaluator = BudgetEvaluator(
            BudgetThresholds(
                over_budget_percent=Decimal("100"),
                near_limit_percent=Decimal("80"),
                on_track_percent=Decimal("50"),
            )
        )
        expenses = [_expense("Food", "400", date(2024, 1, 10), "e1")]
        status = evaluator.evaluate(food_budget, expenses, date(2024, 1, 15))
        assert status.status == BudgetStatusLabel.NEAR_LIMIT


class TestBudgetPredicates:
    """Tests for the active/expired predicates and matching."""

    def test_active_window(self, food_budget):
        """Active means switched on and within the date range."""
        assert is_active(food_budget, date(2024, 1, 1))
        assert is_active(food_budget, date(2024, 1, 31))
        assert not is_active(food_budget, date(2023, 12, 31))
        assert not is_active(food_budget, date(2024, 2, 1))

    def test_inactive_flag(self):
        """Switched-off budgets are never active."""
        budget = _budget(is_active=False)
        assert not is_active(budget, date(2024, 1, 15))

    def test_expired(self, food_budget):
        """Expired only after the end date."""
        assert not is_expired(food_budget, date(2024, 1, 31))
        assert is_expired(food_budget, date(2024, 2, 1))

    def test_matches_budget(self, food_budget):
        """Category and date range must both match."""
        assert matches_budget(_expense("Food", "1", date(2024, 1, 1), "e"), food_budget)
        assert not matches_budget(_expense("Fuel", "1", date(2024, 1, 1), "e"), food_budget)
        assert not matches_budget(_expense("Food", "1", date(2024, 2, 1), "e"), food_budget)


class TestBudgetPortfolio:
    """Tests for BudgetEvaluator.summarize."""

    def test_only_active_budgets_counted(self, january_expenses):
        """Expired, future and switched-off budgets are excluded."""
        budgets = [
            _budget("Food", "500", id="food"),
            _budget("Transport", "100", id="transport"),
            _budget("Food", "500", date(2023, 12, 1), date(2023, 12, 31), id="expired"),
            _budget("Food", "500", date(2024, 2, 1), date(2024, 2, 29), id="future"),
            _budget("Transport", "100", is_active=False, id="off"),
        ]

        summary = BudgetEvaluator().summarize(budgets, january_expenses, date(2024, 1, 20))

        assert summary.active_count == 2
        assert summary.total_budgeted == Decimal("600")
        assert summary.total_spent == Decimal("600")
        assert summary.over_budget_count == 1
        assert summary.total_remaining == Decimal("0")
        assert [s.budget.id for s in summary.statuses] == ["food", "transport"]

    def test_statuses_sorted_by_percent_used(self, january_expenses):
        """Statuses are ordered by percent used, highest first."""
        budgets = [
            _budget("Transport", "100", id="transport"),
            _budget("Food", "500", id="food"),
        ]
        summary = BudgetEvaluator().summarize(budgets, january_expenses, date(2024, 1, 20))
        assert [s.budget.id for s in summary.statuses] == ["food", "transport"]

    def test_empty_portfolio(self):
        """No budgets give zero totals."""
        summary = BudgetEvaluator().summarize([], [], date(2024, 1, 20))
        assert summary.active_count == 0
        assert summary.total_budgeted == Decimal("0")
        assert summary.statuses == []
