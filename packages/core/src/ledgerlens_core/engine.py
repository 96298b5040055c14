"""Single-pass analytics over an account's expense and budget snapshot.

``AnalyticsEngine.run`` captures the evaluation date once and threads it
through every component so no part of a pass sees a different clock.
The engine keeps no cache; callers that want memoization key it on their
own input identities.
"""

from datetime import date, datetime
from typing import Iterable, Optional, Union

import structlog

from .aggregation import by_category, top_k_with_overflow
from .budgets import BudgetEvaluator
from .config import LedgerLensConfig
from .insights import InsightGenerator
from .models import AnalyticsSnapshot, BudgetRecord, ExpenseRecord
from .periods import Window, as_date, filter_by_period, last_n_months
from .trends import category_series, month_over_month_change, spending_summary, trend_series

logger = structlog.get_logger()


class AnalyticsEngine:
    """
    Derive budget status, breakdowns, trends and insights in one pass.

    Every computation is a pure function of (expenses, budgets, now), so
    running the engine twice on the same snapshot gives identical results.
    """

    def __init__(self, config: Optional[LedgerLensConfig] = None):
        """
        Initialize engine.

        Args:
            config: Engine configuration (default: loaded from environment)
        """
        self.config = config or LedgerLensConfig()
        self.evaluator = BudgetEvaluator(self.config.budgets)
        self.insight_generator = InsightGenerator(self.config)

    def run(
        self,
        expenses: Iterable[ExpenseRecord],
        budgets: Iterable[BudgetRecord],
        now: Union[date, datetime, None] = None,
        window: Window = None,
    ) -> AnalyticsSnapshot:
        """
        Run a full analytics pass.

        Args:
            expenses: Expense snapshot, already scoped to one account
            budgets: Budget snapshot for the same account
            now: Evaluation instant (default: today, captured once)
            window: Period for breakdowns and trends
                (default: the configured trailing number of months)

        Returns:
            AnalyticsSnapshot with every derived view of the inputs
        """
        today = as_date(now)
        expenses = list(expenses)
        budgets = list(budgets)
        trends = self.config.trends
        if window is None:
            window = last_n_months(trends.default_window_months)

        windowed = filter_by_period(expenses, window, today)
        monthly = trend_series(expenses, window, today, trends.moving_average_window)

        snapshot = AnalyticsSnapshot(
            now=today,
            budget_statuses=[self.evaluator.evaluate(b, expenses, today) for b in budgets],
            portfolio=self.evaluator.summarize(budgets, expenses, today),
            category_breakdown=top_k_with_overflow(by_category(windowed), trends.breakdown_top_k),
            monthly_trend=monthly,
            month_over_month_change=month_over_month_change(monthly),
            category_trend=category_series(expenses, window, today, trends.category_top_n),
            summary=spending_summary(windowed),
            insights=self.insight_generator.generate(expenses, budgets, today),
        )

        logger.info(
            "analytics_pass_completed",
            as_of=today.isoformat(),
            expenses=len(expenses),
            budgets=len(budgets),
            months=len(snapshot.monthly_trend),
            insights=len(snapshot.insights),
        )
        return snapshot
