"""Configuration system for LedgerLens analytics.

This module provides Pydantic Settings-based configuration with environment
variable support. Every heuristic constant the engine uses (status
thresholds, insight noise floors, moving-average width) lives here as a
named setting so it can be tuned and tested without touching the rules.

Usage:
    from ledgerlens_core.config import LedgerLensConfig

    # Load from environment variables and .env file
    config = LedgerLensConfig()

    # Access budget thresholds
    print(config.budgets.near_limit_percent)

    # Access insight settings
    for category in config.insights.savings_watch_categories:
        print(category)
"""

from decimal import Decimal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BudgetThresholds(BaseSettings):
    """Budget status classification thresholds.

    Percent-used cut-offs for the status buckets, applied highest first.

    Environment Variables:
        LEDGERLENS_BUDGET_OVER_BUDGET_PERCENT: Spend at or above this is Over Budget
        LEDGERLENS_BUDGET_NEAR_LIMIT_PERCENT: Spend at or above this is Near Limit
        LEDGERLENS_BUDGET_ON_TRACK_PERCENT: Spend at or above this is On Track
        LEDGERLENS_BUDGET_BREAKDOWN_TOP_K: Entries in a budget's category breakdown
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGERLENS_BUDGET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    over_budget_percent: Decimal = Field(
        default=Decimal("100"),
        gt=0,
        description="Percent used at which a budget is Over Budget",
    )
    near_limit_percent: Decimal = Field(
        default=Decimal("90"),
        gt=0,
        description="Percent used at which a budget is Near Limit",
    )
    on_track_percent: Decimal = Field(
        default=Decimal("75"),
        ge=0,
        description="Percent used at which a budget is On Track",
    )
    breakdown_top_k: int = Field(
        default=5,
        ge=1,
        description="Entries shown in a budget's category breakdown, 'Other' included",
    )

    @model_validator(mode="after")
    def thresholds_descend(self) -> "BudgetThresholds":
        """Ensure the buckets are ordered over >= near >= on track."""
        if not (
            self.over_budget_percent >= self.near_limit_percent >= self.on_track_percent
        ):
            raise ValueError(
                "Budget thresholds must satisfy over_budget >= near_limit >= on_track"
            )
        return self


class InsightThresholds(BaseSettings):
    """Noise floors and watch lists for the insight rules.

    Environment Variables:
        LEDGERLENS_INSIGHT_INCREASE_PERCENT: Minimum month-over-month increase
        LEDGERLENS_INSIGHT_INCREASE_FLOOR: Minimum current-month category total
        LEDGERLENS_INSIGHT_TOP_CATEGORY_SHARE_PERCENT: Share needed for a top-category notice
        LEDGERLENS_INSIGHT_SAVINGS_WATCH_CATEGORIES: JSON list of watched categories
        LEDGERLENS_INSIGHT_SAVINGS_AVERAGE_THRESHOLD: Monthly average that flags a watched category
        LEDGERLENS_INSIGHT_SAVINGS_MIN_TRANSACTIONS: Transactions required (exclusive)
        LEDGERLENS_INSIGHT_SAVINGS_FALLBACK_THRESHOLD: Monthly average for the fallback flag
        LEDGERLENS_INSIGHT_SAVINGS_LOOKBACK_MONTHS: Trailing window for savings rules
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGERLENS_INSIGHT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    increase_percent: Decimal = Field(
        default=Decimal("25"),
        ge=0,
        description="Category increase (percent) that counts as unusual",
    )
    increase_floor: Decimal = Field(
        default=Decimal("100"),
        ge=0,
        description="Current-month category total below which increases are ignored",
    )
    top_category_share_percent: Decimal = Field(
        default=Decimal("25"),
        ge=0,
        le=100,
        description="Share of monthly spend a category must exceed to be reported",
    )
    savings_watch_categories: list[str] = Field(
        default_factory=lambda: ["Subscriptions", "Entertainment", "Utilities", "Food"],
        description="Categories checked for savings opportunities",
    )
    savings_average_threshold: Decimal = Field(
        default=Decimal("200"),
        ge=0,
        description="Monthly average above which a watched category is flagged",
    )
    savings_min_transactions: int = Field(
        default=3,
        ge=0,
        description="A watched category needs more than this many transactions",
    )
    savings_fallback_threshold: Decimal = Field(
        default=Decimal("300"),
        ge=0,
        description="Monthly average above which the top category is flagged as a fallback",
    )
    savings_lookback_months: int = Field(
        default=3,
        ge=1,
        le=24,
        description="Months of history averaged by the savings rules",
    )


class TrendSettings(BaseSettings):
    """Trend and breakdown settings.

    Environment Variables:
        LEDGERLENS_TREND_MOVING_AVERAGE_WINDOW: Points in the trailing average
        LEDGERLENS_TREND_CATEGORY_TOP_N: Categories in the category trend view
        LEDGERLENS_TREND_BREAKDOWN_TOP_K: Entries in the category breakdown
        LEDGERLENS_TREND_DEFAULT_WINDOW_MONTHS: History used for trend views
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGERLENS_TREND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    moving_average_window: int = Field(default=3, ge=1, le=24)
    category_top_n: int = Field(default=5, ge=1)
    breakdown_top_k: int = Field(default=7, ge=1)
    default_window_months: int = Field(default=6, ge=1, le=120)


class LedgerLensConfig(BaseSettings):
    """Root configuration for LedgerLens.

    Environment Variables:
        LEDGERLENS_CURRENCY: Currency used when formatting insight messages

    Example:
        # Load all configuration from environment
        config = LedgerLensConfig()

        # Override specific settings
        config = LedgerLensConfig(
            budgets=BudgetThresholds(near_limit_percent=Decimal("85")),
            trends=TrendSettings(moving_average_window=6),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGERLENS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="ISO currency code used in insight messages",
    )

    # Nested configuration
    budgets: BudgetThresholds = Field(default_factory=BudgetThresholds)
    insights: InsightThresholds = Field(default_factory=InsightThresholds)
    trends: TrendSettings = Field(default_factory=TrendSettings)

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        """Store currency codes upper-cased."""
        return v.upper()
