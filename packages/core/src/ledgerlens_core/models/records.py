"""Input record models consumed by the analytics engine.

This module provides the already-fetched, currency-normalized records the
engine works on:
- Expense records, one per spend event against an account
- Budget records, a spending ceiling for a category over a date range

Records are frozen once constructed; every analytics pass treats them as
an immutable snapshot.
"""

import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from dateutil.parser import isoparse
from pydantic import BaseModel, Field, field_validator

ALL_CATEGORIES = "All"
"""Budget category sentinel that matches every expense."""


def _coerce_to_date(v):
    """Reduce timestamps to their calendar date; time of day is irrelevant."""
    if isinstance(v, datetime.datetime):
        return v.date()
    if isinstance(v, str) and "T" in v:
        return isoparse(v).date()
    return v


class RecurringPeriod(str, Enum):
    """How often a recurring budget renews."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"


class ExpenseRecord(BaseModel):
    """A single expense recorded against an account.

    `amount` is already converted to the account's base currency. The
    original amount/currency/rate triple is kept for display only and is
    never used in aggregation.
    """

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": "exp_001",
                    "account_id": "acct_family",
                    "amount": "42.50",
                    "category": "Food",
                    "date": "2024-01-15",
                    "description": "Groceries",
                    "tags": ["weekly-shop"],
                }
            ]
        },
    }

    id: str = Field(description="Unique expense identifier")
    account_id: str = Field(description="Identifier of the owning account")
    amount: Decimal = Field(
        ge=Decimal("0"),
        description="Amount in the account's base currency",
    )
    original_amount: Optional[Decimal] = Field(
        default=None,
        description="Amount in the currency it was paid in, if different",
    )
    original_currency: Optional[str] = Field(
        default=None,
        description="ISO code of the currency the expense was paid in",
    )
    exchange_rate: Optional[Decimal] = Field(
        default=None,
        gt=Decimal("0"),
        description="Rate used to convert original_amount to amount",
    )
    category: str = Field(min_length=1, description="Category key")
    subcategory: Optional[str] = Field(default=None, description="Optional subcategory")
    date: datetime.date = Field(description="Calendar date of the expense")
    description: str = Field(default="", description="Free-text description")
    notes: Optional[str] = Field(default=None, description="Additional notes")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")
    is_recurring: bool = Field(default=False, description="Generated from a recurring template")
    payment_method: Optional[str] = Field(default=None, description="Card, cash, transfer, ...")

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        """Accept datetimes and ISO timestamps, keeping only the date."""
        return _coerce_to_date(v)

    @field_validator("category")
    @classmethod
    def category_not_blank(cls, v: str) -> str:
        """Ensure category is not just whitespace."""
        if not v.strip():
            raise ValueError("category cannot be empty")
        return v.strip()


class BudgetRecord(BaseModel):
    """A spending ceiling for one category (or all) over a date range."""

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": "bud_food_jan",
                    "account_id": "acct_family",
                    "name": "January groceries",
                    "category": "Food",
                    "amount": "500.00",
                    "start_date": "2024-01-01",
                    "end_date": "2024-01-31",
                }
            ]
        },
    }

    id: str = Field(description="Unique budget identifier")
    account_id: str = Field(description="Identifier of the owning account")
    name: str = Field(description="Display name of the budget")
    category: str = Field(
        min_length=1,
        description=f"Category key, or '{ALL_CATEGORIES}' to match every expense",
    )
    amount: Decimal = Field(
        gt=Decimal("0"),
        description="Target ceiling in the account's base currency",
    )
    currency: str = Field(default="USD", description="Base currency of the account")
    start_date: datetime.date = Field(description="First day of the budget (inclusive)")
    end_date: datetime.date = Field(description="Last day of the budget (inclusive)")
    notes: Optional[str] = Field(default=None, description="Additional notes")
    is_active: bool = Field(default=True, description="Whether the budget is switched on")
    recurring_period: Optional[RecurringPeriod] = Field(
        default=None,
        description="Renewal period for recurring budgets",
    )

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def coerce_dates(cls, v):
        """Accept datetimes and ISO timestamps, keeping only the date."""
        return _coerce_to_date(v)

    @field_validator("end_date")
    @classmethod
    def end_date_after_start_date(cls, v, info):
        """Validate that end_date is not before start_date."""
        if "start_date" in info.data and v < info.data["start_date"]:
            raise ValueError("end_date must be on or after start_date")
        return v

    @property
    def covers_all_categories(self) -> bool:
        """True for budgets using the 'All' sentinel."""
        return self.category == ALL_CATEGORIES

    @property
    def category_label(self) -> str:
        """Category name as shown in alerts ('Overall' for the sentinel)."""
        return "Overall" if self.covers_all_categories else self.category
