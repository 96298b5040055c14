"""Derived analytics models returned by the engine.

Nothing in this module is persisted. Every value is recomputed on demand
from a snapshot of expense and budget records and handed to presentation
layers as a read-only result.
"""

import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field

from .records import BudgetRecord, ExpenseRecord


class BudgetStatusLabel(str, Enum):
    """Status bucket of a budget, ordered from best to worst."""

    UNDER_BUDGET = "Under Budget"
    ON_TRACK = "On Track"
    NEAR_LIMIT = "Near Limit"
    OVER_BUDGET = "Over Budget"
    EXPIRED = "Expired"

    @property
    def severity(self) -> int:
        """Rank used to compare buckets; higher is worse."""
        return list(BudgetStatusLabel).index(self)


class InsightType(str, Enum):
    """Rule family that produced an insight."""

    OVER_BUDGET = "over_budget"
    SPENDING_INCREASE = "spending_increase"
    TOP_CATEGORY = "top_category"
    SAVINGS_OPPORTUNITY = "savings_opportunity"
    COLD_START = "cold_start"


class InsightPriority(str, Enum):
    """How prominently an insight should be shown."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CategoryTotal(BaseModel):
    """One row of a grouped sum."""

    model_config = {"frozen": True}

    key: str = Field(description="Grouping key (category name, month key, ...)")
    total: Decimal = Field(description="Sum of amounts in the group")
    count: int = Field(default=0, ge=0, description="Number of records in the group")


class BudgetStatus(BaseModel):
    """A budget evaluated against an expense set at one point in time."""

    model_config = {"frozen": True}

    budget: BudgetRecord
    spent: Decimal = Field(ge=Decimal("0"), description="Sum of matching expenses")
    remaining: Decimal = Field(ge=Decimal("0"), description="max(amount - spent, 0)")
    percent_used: Decimal = Field(ge=Decimal("0"), description="spent / amount * 100")
    status: BudgetStatusLabel
    matching_expenses: list[ExpenseRecord] = Field(default_factory=list)

    @computed_field
    @property
    def is_over_budget(self) -> bool:
        """Returns True when spend has reached or passed the ceiling."""
        return self.status == BudgetStatusLabel.OVER_BUDGET

    @computed_field
    @property
    def display_percent(self) -> Decimal:
        """Percent used, capped at 100 for progress bars."""
        return min(self.percent_used, Decimal("100"))

    def category_breakdown(self, k: int = 5) -> list[CategoryTotal]:
        """Split the matching expenses by category, folding the tail into 'Other'.

        Args:
            k: Maximum number of entries to return.

        Returns:
            Category totals sorted by amount descending.
        """
        from ..aggregation import by_category, top_k_with_overflow

        return top_k_with_overflow(by_category(self.matching_expenses), k)


class BudgetPortfolioSummary(BaseModel):
    """Roll-up over the budgets that are active at evaluation time."""

    model_config = {"frozen": True}

    total_budgeted: Decimal = Field(default=Decimal("0"))
    total_spent: Decimal = Field(default=Decimal("0"))
    over_budget_count: int = Field(default=0, ge=0)
    active_count: int = Field(default=0, ge=0)
    statuses: list[BudgetStatus] = Field(
        default_factory=list,
        description="Active budget statuses sorted by percent used, highest first",
    )

    @computed_field
    @property
    def total_remaining(self) -> Decimal:
        """Unspent amount across active budgets, never negative."""
        return max(self.total_budgeted - self.total_spent, Decimal("0"))


class MonthlyPoint(BaseModel):
    """Total spend for one calendar month."""

    model_config = {"frozen": True}

    month_key: str = Field(pattern=r"^\d{4}-\d{2}$", description="'YYYY-MM'")
    label: str = Field(description="Human label, e.g. 'Jan 2024'")
    amount: Decimal
    trend: Optional[Decimal] = Field(default=None, description="Moving average, if computed")


class CategoryMonthPoint(BaseModel):
    """Per-category spend for one month of the category trend view."""

    model_config = {"frozen": True}

    month_key: str = Field(pattern=r"^\d{4}-\d{2}$")
    label: str
    totals: dict[str, Decimal] = Field(default_factory=dict)


class SpendingSummary(BaseModel):
    """Headline numbers for a set of expenses."""

    model_config = {"frozen": True}

    total_spent: Decimal = Field(default=Decimal("0"))
    average_monthly: Decimal = Field(default=Decimal("0"))
    largest_expense: Decimal = Field(default=Decimal("0"))
    transaction_count: int = Field(default=0, ge=0)


class InsightRecord(BaseModel):
    """A human-readable finding produced by one analytics pass."""

    model_config = {"frozen": True}

    id: str
    type: InsightType
    title: str
    message: str
    priority: InsightPriority = InsightPriority.MEDIUM
    actionable: bool = False
    action_ref: Optional[str] = Field(
        default=None,
        description="Where the presentation layer should send the user, e.g. '/budgets'",
    )
    related_categories: list[str] = Field(default_factory=list)
    data: dict[str, Any] = Field(
        default_factory=dict,
        description="Numbers behind the message",
    )


class AnalyticsSnapshot(BaseModel):
    """Everything one analytics pass derives from its inputs."""

    model_config = {"frozen": True}

    now: datetime.date
    budget_statuses: list[BudgetStatus] = Field(default_factory=list)
    portfolio: BudgetPortfolioSummary = Field(default_factory=BudgetPortfolioSummary)
    category_breakdown: list[CategoryTotal] = Field(default_factory=list)
    monthly_trend: list[MonthlyPoint] = Field(default_factory=list)
    month_over_month_change: Decimal = Field(default=Decimal("0"))
    category_trend: list[CategoryMonthPoint] = Field(default_factory=list)
    summary: SpendingSummary = Field(default_factory=SpendingSummary)
    insights: list[InsightRecord] = Field(default_factory=list)
