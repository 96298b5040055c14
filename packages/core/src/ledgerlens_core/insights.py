"""Heuristic spending insights.

Five independent rule families run in a fixed order on every pass:

1. Over budget        - active budgets that have reached their ceiling
2. Spending increase  - the category with the largest jump over last month
3. Top category       - a category taking an outsized share of this month
4. Savings            - watched categories with a high trailing average
5. Cold start         - no budgets yet

Each insight carries the numbers behind its message in ``data``.
Insights are rebuilt from scratch each time; nothing is carried over
between passes.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Union

import structlog

from .aggregation import by_category, sum_by_key, total_of
from .budgets import BudgetEvaluator
from .config import LedgerLensConfig
from .formatting import format_currency, format_percent, round_half_up
from .models import (
    BudgetRecord,
    ExpenseRecord,
    InsightPriority,
    InsightRecord,
    InsightType,
)
from .periods import DateWindow, as_date, filter_by_period, last_n_months, previous_month_window

logger = structlog.get_logger()


class InsightGenerator:
    """
    Build the insight list for one account.

    All thresholds come from ``LedgerLensConfig``; the generator itself is
    stateless, so repeated calls with the same inputs give the same list.
    """

    def __init__(self, config: Optional[LedgerLensConfig] = None):
        """
        Initialize generator.

        Args:
            config: Engine configuration (default: loaded from environment)
        """
        self.config = config or LedgerLensConfig()
        self.thresholds = self.config.insights
        self.evaluator = BudgetEvaluator(self.config.budgets)

    def generate(
        self,
        expenses: Sequence[ExpenseRecord],
        budgets: Iterable[BudgetRecord],
        now: Union[date, datetime],
    ) -> list[InsightRecord]:
        """
        Run every rule family against one snapshot.

        Args:
            expenses: Expense snapshot for the account
            budgets: Budget snapshot for the account
            now: Evaluation date, captured once by the caller for the pass

        Returns:
            Insights in rule order. Empty inputs never raise; with no
            expenses and no budgets only the cold-start prompt is returned.
        """
        today = as_date(now)
        budgets = list(budgets)
        current_month = filter_by_period(
            expenses, DateWindow(start=today.replace(day=1), end=today)
        )
        previous_month = filter_by_period(expenses, previous_month_window(today))

        insights: list[InsightRecord] = []
        over_budget = self._over_budget(expenses, budgets, today)
        if over_budget:
            insights.append(over_budget)

        increase = self._spending_increase(current_month, previous_month)
        if increase:
            insights.append(increase)

        top = self._top_category(current_month)
        if top:
            insights.append(top)

        insights.extend(self._savings_opportunities(expenses, today))

        if not budgets:
            insights.append(self._cold_start())

        logger.info(
            "insights_generated",
            as_of=today.isoformat(),
            count=len(insights),
            types=[i.type.value for i in insights],
        )
        return insights

    def _over_budget(
        self,
        expenses: Sequence[ExpenseRecord],
        budgets: Sequence[BudgetRecord],
        today: date,
    ) -> Optional[InsightRecord]:
        """One alert naming every active budget classified Over Budget."""
        over = [
            s for s in self.evaluator.evaluate_active(budgets, expenses, today)
            if s.is_over_budget
        ]
        if not over:
            return None

        labels = [s.budget.category_label for s in over]
        noun = "category" if len(labels) == 1 else "categories"
        return InsightRecord(
            id="over-budget",
            type=InsightType.OVER_BUDGET,
            title="Budget Alert",
            message=f"You're over budget in {len(labels)} {noun}: {', '.join(labels)}",
            priority=InsightPriority.HIGH,
            actionable=True,
            action_ref="/budgets",
            related_categories=labels,
            data={
                "budget_ids": [s.budget.id for s in over],
                "percent_used": [str(round_half_up(s.percent_used, 1)) for s in over],
            },
        )

    def _spending_increase(
        self,
        current_month: Sequence[ExpenseRecord],
        previous_month: Sequence[ExpenseRecord],
    ) -> Optional[InsightRecord]:
        """The category with the largest qualifying increase over last month."""
        current = sum_by_key(current_month, lambda e: e.category)
        previous = sum_by_key(previous_month, lambda e: e.category)

        best: Optional[tuple[str, Decimal, Decimal, Decimal]] = None
        for category, (current_total, _count) in current.items():
            previous_total = previous.get(category, (Decimal("0"), 0))[0]
            if previous_total <= 0:
                continue
            increase = (current_total - previous_total) / previous_total * Decimal("100")
            if (
                increase > self.thresholds.increase_percent
                and current_total > self.thresholds.increase_floor
            ):
                if best is None or increase > best[1]:
                    best = (category, increase, current_total, previous_total)

        if best is None:
            return None

        category, increase, current_total, previous_total = best
        logger.debug(
            "spending_increase_detected",
            category=category,
            increase=str(increase),
        )
        return InsightRecord(
            id="spending-increase",
            type=InsightType.SPENDING_INCREASE,
            title="Spending Trend",
            message=(
                f"Your spending in {category} has increased by "
                f"{format_percent(increase)} compared to last month."
            ),
            priority=InsightPriority.MEDIUM,
            related_categories=[category],
            data={
                "category": category,
                "percentage": round_half_up(increase, 1),
                "current_total": current_total,
                "previous_total": previous_total,
            },
        )

    def _top_category(self, current_month: Sequence[ExpenseRecord]) -> Optional[InsightRecord]:
        """The largest category this month, if its share is significant."""
        ranking = by_category(current_month)
        total = total_of(ranking)
        if total <= 0:
            return None

        top = ranking[0]
        share = top.total / total * Decimal("100")
        if share <= self.thresholds.top_category_share_percent:
            return None

        return InsightRecord(
            id="top-category",
            type=InsightType.TOP_CATEGORY,
            title="Top Spending Category",
            message=(
                f"Your highest spending category is {top.key} "
                f"({format_percent(share)} of total)."
            ),
            priority=InsightPriority.LOW,
            related_categories=[top.key],
            data={"category": top.key, "percentage": round_half_up(share, 1), "total": top.total},
        )

    def _savings_opportunities(
        self,
        expenses: Sequence[ExpenseRecord],
        today: date,
    ) -> list[InsightRecord]:
        """Watched categories with a high trailing monthly average.

        Falls back to the single highest-average category when no watched
        category qualifies.
        """
        months = self.thresholds.savings_lookback_months
        recent = filter_by_period(expenses, last_n_months(months), today)
        sums = sum_by_key(recent, lambda e: e.category)
        averages = {cat: total / Decimal(months) for cat, (total, _count) in sums.items()}
        currency = self.config.currency

        opportunities: list[InsightRecord] = []
        for category in self.thresholds.savings_watch_categories:
            if category not in sums:
                continue
            count = sums[category][1]
            average = averages[category]
            if (
                average > self.thresholds.savings_average_threshold
                and count > self.thresholds.savings_min_transactions
            ):
                opportunities.append(
                    InsightRecord(
                        id=f"savings-{len(opportunities)}",
                        type=InsightType.SAVINGS_OPPORTUNITY,
                        title="Savings Opportunity",
                        message=(
                            f"Consider reviewing your {category.lower()} expenses - "
                            f"you're spending an average of "
                            f"{format_currency(average, currency)} per month."
                        ),
                        priority=InsightPriority.MEDIUM,
                        related_categories=[category],
                        data={
                            "category": category,
                            "monthly_average": round_half_up(average),
                            "transaction_count": count,
                        },
                    )
                )

        if opportunities or not averages:
            return opportunities

        highest_category, highest_average = None, Decimal("0")
        for category, average in averages.items():
            if average > highest_average:
                highest_category, highest_average = category, average

        if highest_category is None or highest_average <= self.thresholds.savings_fallback_threshold:
            return []

        return [
            InsightRecord(
                id="savings-0",
                type=InsightType.SAVINGS_OPPORTUNITY,
                title="Savings Opportunity",
                message=(
                    f"Your highest spending category is {highest_category}. "
                    "Consider setting a budget to track and potentially reduce these expenses."
                ),
                priority=InsightPriority.MEDIUM,
                actionable=True,
                action_ref="/budgets/new",
                related_categories=[highest_category],
                data={
                    "category": highest_category,
                    "monthly_average": round_half_up(highest_average),
                },
            )
        ]

    def _cold_start(self) -> InsightRecord:
        """Prompt to create a first budget."""
        return InsightRecord(
            id="create-budget",
            type=InsightType.COLD_START,
            title="Create Your First Budget",
            message="Start tracking your spending against budgets to better manage your finances.",
            priority=InsightPriority.LOW,
            actionable=True,
            action_ref="/budgets/new",
        )
