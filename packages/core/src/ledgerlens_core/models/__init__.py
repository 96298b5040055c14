"""Data models for ledgerlens-core.

This package provides:
- Input records: expenses and budgets (records.py)
- Derived analytics results: budget status, monthly points, insights (analytics.py)
"""

from ledgerlens_core.models.records import (
    ALL_CATEGORIES,
    BudgetRecord,
    ExpenseRecord,
    RecurringPeriod,
)
from ledgerlens_core.models.analytics import (
    AnalyticsSnapshot,
    BudgetPortfolioSummary,
    BudgetStatus,
    BudgetStatusLabel,
    CategoryMonthPoint,
    CategoryTotal,
    InsightPriority,
    InsightRecord,
    InsightType,
    MonthlyPoint,
    SpendingSummary,
)

__all__ = [
    # Records
    "ALL_CATEGORIES",
    "BudgetRecord",
    "ExpenseRecord",
    "RecurringPeriod",
    # Derived results
    "AnalyticsSnapshot",
    "BudgetPortfolioSummary",
    "BudgetStatus",
    "BudgetStatusLabel",
    "CategoryMonthPoint",
    "CategoryTotal",
    "InsightPriority",
    "InsightRecord",
    "InsightType",
    "MonthlyPoint",
    "SpendingSummary",
]
