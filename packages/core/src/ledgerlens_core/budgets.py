"""Budget consumption and status classification.

A budget's status is a pure function of the budget, the expense snapshot
and the evaluation date:

1. ``end_date < now``         -> Expired
2. ``percent_used >= 100``    -> Over Budget
3. ``percent_used >= 90``     -> Near Limit
4. ``percent_used >= 75``     -> On Track
5. otherwise                  -> Under Budget

The cut-offs come from ``BudgetThresholds``. Portfolio roll-ups only count
budgets that are active at ``now`` (switched on and ``start <= now <= end``),
not merely unexpired ones.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Union

import structlog

from .config import BudgetThresholds
from .models import (
    BudgetPortfolioSummary,
    BudgetRecord,
    BudgetStatus,
    BudgetStatusLabel,
    ExpenseRecord,
)
from .periods import as_date

logger = structlog.get_logger()


def is_active(budget: BudgetRecord, now: Union[date, datetime]) -> bool:
    """True if the budget is switched on and ``now`` lies within its range."""
    today = as_date(now)
    return budget.is_active and budget.start_date <= today <= budget.end_date


def is_expired(budget: BudgetRecord, now: Union[date, datetime]) -> bool:
    """True once ``now`` is past the budget's last day."""
    return as_date(now) > budget.end_date


def matches_budget(expense: ExpenseRecord, budget: BudgetRecord) -> bool:
    """Check whether an expense counts toward a budget (date range and category)."""
    if not budget.start_date <= expense.date <= budget.end_date:
        return False
    return budget.covers_all_categories or expense.category == budget.category


def percent_of(spent: Decimal, amount: Decimal) -> Decimal:
    """``spent / amount * 100``, or 0 when the amount is not positive."""
    if amount <= 0:
        return Decimal("0")
    return spent / amount * Decimal("100")


class BudgetEvaluator:
    """
    Evaluate budgets against an expense snapshot.

    The evaluator holds no state besides its thresholds; the same inputs
    always give the same ``BudgetStatus``.
    """

    def __init__(self, thresholds: Optional[BudgetThresholds] = None):
        """
        Initialize evaluator with status thresholds.

        Args:
            thresholds: Status cut-offs (default: 100/90/75 percent)
        """
        self.thresholds = thresholds or BudgetThresholds()

    def classify(
        self,
        percent_used: Decimal,
        end_date: date,
        now: Union[date, datetime],
    ) -> BudgetStatusLabel:
        """Map a consumption percentage and expiry to a status bucket."""
        if end_date < as_date(now):
            return BudgetStatusLabel.EXPIRED
        if percent_used >= self.thresholds.over_budget_percent:
            return BudgetStatusLabel.OVER_BUDGET
        if percent_used >= self.thresholds.near_limit_percent:
            return BudgetStatusLabel.NEAR_LIMIT
        if percent_used >= self.thresholds.on_track_percent:
            return BudgetStatusLabel.ON_TRACK
        return BudgetStatusLabel.UNDER_BUDGET

    def evaluate(
        self,
        budget: BudgetRecord,
        expenses: Iterable[ExpenseRecord],
        now: Union[date, datetime],
    ) -> BudgetStatus:
        """
        Compute spent, remaining and percent used for one budget.

        Args:
            budget: Budget to evaluate
            expenses: All expenses of the account; filtered here by the
                budget's date range and category
            now: Evaluation date, used only for the Expired check

        Returns:
            BudgetStatus snapshot for the budget at ``now``
        """
        matching = [e for e in expenses if matches_budget(e, budget)]
        spent = sum((e.amount for e in matching), Decimal("0"))
        remaining = max(budget.amount - spent, Decimal("0"))
        percent_used = percent_of(spent, budget.amount)
        status = self.classify(percent_used, budget.end_date, now)

        logger.debug(
            "budget_evaluated",
            budget_id=budget.id,
            category=budget.category,
            spent=str(spent),
            percent_used=str(percent_used),
            status=status.value,
        )

        return BudgetStatus(
            budget=budget,
            spent=spent,
            remaining=remaining,
            percent_used=percent_used,
            status=status,
            matching_expenses=matching,
        )

    def evaluate_active(
        self,
        budgets: Iterable[BudgetRecord],
        expenses: Sequence[ExpenseRecord],
        now: Union[date, datetime],
    ) -> list[BudgetStatus]:
        """Evaluate every budget active at ``now``, in input order."""
        return [self.evaluate(b, expenses, now) for b in budgets if is_active(b, now)]

    def summarize(
        self,
        budgets: Iterable[BudgetRecord],
        expenses: Sequence[ExpenseRecord],
        now: Union[date, datetime],
    ) -> BudgetPortfolioSummary:
        """
        Roll up the budgets active at ``now``.

        Returns:
            Totals over active budgets plus their statuses ordered by
            percent used, highest first.
        """
        statuses = self.evaluate_active(budgets, expenses, now)
        ranked = sorted(statuses, key=lambda s: s.percent_used, reverse=True)
        summary = BudgetPortfolioSummary(
            total_budgeted=sum((s.budget.amount for s in statuses), Decimal("0")),
            total_spent=sum((s.spent for s in statuses), Decimal("0")),
            over_budget_count=sum(1 for s in statuses if s.is_over_budget),
            active_count=len(statuses),
            statuses=ranked,
        )
        logger.info(
            "budget_portfolio_summarized",
            active=summary.active_count,
            over_budget=summary.over_budget_count,
            total_budgeted=str(summary.total_budgeted),
            total_spent=str(summary.total_spent),
        )
        return summary
