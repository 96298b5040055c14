"""LedgerLens Core - Budget status, spending trends and insights."""

__version__ = "0.1.0"

from .aggregation import group_sum, top_k, top_k_with_overflow
from .budgets import BudgetEvaluator, is_active, is_expired
from .config import BudgetThresholds, InsightThresholds, LedgerLensConfig, TrendSettings
from .engine import AnalyticsEngine
from .exceptions import LedgerLensError, ValidationError
from .insights import InsightGenerator
from .models import (
    ALL_CATEGORIES,
    AnalyticsSnapshot,
    BudgetPortfolioSummary,
    BudgetRecord,
    BudgetStatus,
    BudgetStatusLabel,
    CategoryMonthPoint,
    CategoryTotal,
    ExpenseRecord,
    InsightPriority,
    InsightRecord,
    InsightType,
    MonthlyPoint,
    RecurringPeriod,
    SpendingSummary,
)
from .periods import DateWindow, RelativeWindow, filter_by_period, last_n_months, resolve_window
from .trends import (
    category_series,
    month_over_month_change,
    monthly_series,
    moving_average,
    spending_summary,
)

__all__ = [
    # Engine
    "AnalyticsEngine",
    "BudgetEvaluator",
    "InsightGenerator",
    # Configuration
    "BudgetThresholds",
    "InsightThresholds",
    "LedgerLensConfig",
    "TrendSettings",
    # Errors
    "LedgerLensError",
    "ValidationError",
    # Models
    "ALL_CATEGORIES",
    "AnalyticsSnapshot",
    "BudgetPortfolioSummary",
    "BudgetRecord",
    "BudgetStatus",
    "BudgetStatusLabel",
    "CategoryMonthPoint",
    "CategoryTotal",
    "ExpenseRecord",
    "InsightPriority",
    "InsightRecord",
    "InsightType",
    "MonthlyPoint",
    "RecurringPeriod",
    "SpendingSummary",
    # Functions
    "category_series",
    "filter_by_period",
    "group_sum",
    "is_active",
    "is_expired",
    "last_n_months",
    "month_over_month_change",
    "monthly_series",
    "moving_average",
    "resolve_window",
    "spending_summary",
    "top_k",
    "top_k_with_overflow",
    "DateWindow",
    "RelativeWindow",
]
