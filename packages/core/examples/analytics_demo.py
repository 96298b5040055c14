#!/usr/bin/env python3
"""
LedgerLens Analytics Demonstration

This script walks through one analytics pass over a sample account:
1. Create expense and budget records
2. Evaluate budgets and roll up the active portfolio
3. Build monthly trends, the category breakdown and insights

Run: python packages/core/examples/analytics_demo.py
"""

from datetime import date
from decimal import Decimal

from ledgerlens_core import (
    AnalyticsEngine,
    BudgetRecord,
    ExpenseRecord,
    LedgerLensConfig,
    RecurringPeriod,
)
from ledgerlens_core.formatting import format_currency, format_percent
from ledgerlens_core.trends import describe_change

AS_OF = date(2024, 3, 20)


def create_sample_expenses() -> list[ExpenseRecord]:
    """Create three months of realistic household spending."""
    rows = [
        ("Housing", "1850.00", date(2024, 1, 1), "Rent"),
        ("Food", "142.37", date(2024, 1, 6), "Groceries"),
        ("Food", "96.10", date(2024, 1, 19), "Groceries"),
        ("Utilities", "118.45", date(2024, 1, 22), "Electric"),
        ("Subscriptions", "15.49", date(2024, 1, 28), "Streaming"),
        ("Housing", "1850.00", date(2024, 2, 1), "Rent"),
        ("Food", "188.92", date(2024, 2, 4), "Groceries"),
        ("Food", "64.50", date(2024, 2, 16), "Dinner out"),
        ("Shopping", "120.00", date(2024, 2, 18), "Shoes"),
        ("Utilities", "131.02", date(2024, 2, 21), "Electric"),
        ("Subscriptions", "15.49", date(2024, 2, 28), "Streaming"),
        ("Housing", "1850.00", date(2024, 3, 1), "Rent"),
        ("Food", "201.44", date(2024, 3, 3), "Groceries"),
        ("Food", "87.25", date(2024, 3, 9), "Dinner out"),
        ("Shopping", "264.99", date(2024, 3, 12), "Jacket"),
        ("Utilities", "99.80", date(2024, 3, 18), "Electric"),
    ]
    return [
        ExpenseRecord(
            id=f"exp_{i:03d}",
            account_id="acct_demo",
            amount=Decimal(amount),
            category=category,
            date=day,
            description=description,
        )
        for i, (category, amount, day, description) in enumerate(rows, start=1)
    ]


def create_sample_budgets() -> list[BudgetRecord]:
    """Create a monthly food budget and an overall cap for March."""
    return [
        BudgetRecord(
            id="bud_food",
            account_id="acct_demo",
            name="Groceries & dining",
            category="Food",
            amount=Decimal("250"),
            start_date=date(2024, 3, 1),
            end_date=date(2024, 3, 31),
            recurring_period=RecurringPeriod.MONTHLY,
        ),
        BudgetRecord(
            id="bud_all",
            account_id="acct_demo",
            name="Monthly spending cap",
            category="All",
            amount=Decimal("3000"),
            start_date=date(2024, 3, 1),
            end_date=date(2024, 3, 31),
            recurring_period=RecurringPeriod.MONTHLY,
        ),
    ]


def main():
    """Run the analytics demonstration."""
    print("=" * 70)
    print("LEDGERLENS CORE - Analytics Demo")
    print("=" * 70)
    print()

    # Step 1: Create sample data
    print("Step 1: Creating sample records...")
    expenses = create_sample_expenses()
    budgets = create_sample_budgets()
    print(f"  - Expenses: {len(expenses)}")
    print(f"  - Budgets: {len(budgets)}")
    print(f"  - As of: {AS_OF.isoformat()}")
    print()

    # Step 2: Run the engine
    print("Step 2: Running analytics pass...")
    config = LedgerLensConfig()
    snapshot = AnalyticsEngine(config).run(expenses, budgets, AS_OF)
    currency = config.currency
    print()

    print("Budgets")
    print("-" * 70)
    for status in snapshot.budget_statuses:
        print(
            f"  {status.budget.category_label:<12} "
            f"{format_currency(status.spent, currency):>12} of "
            f"{format_currency(status.budget.amount, currency):>12}  "
            f"{format_percent(status.percent_used):>7}  {status.status.value}"
        )
        for row in status.category_breakdown(config.budgets.breakdown_top_k):
            print(f"      {row.key:<10} {format_currency(row.total, currency):>12}")
    portfolio = snapshot.portfolio
    print(
        f"  Active: {portfolio.active_count}, over budget: {portfolio.over_budget_count}, "
        f"remaining: {format_currency(portfolio.total_remaining, currency)}"
    )
    print()

    print("Monthly trend")
    print("-" * 70)
    for point in snapshot.monthly_trend:
        print(
            f"  {point.label:<10} {format_currency(point.amount, currency):>12}  "
            f"avg {format_currency(point.trend, currency):>12}"
        )
    change = snapshot.month_over_month_change
    print(f"  Month over month: {format_percent(abs(change))} {describe_change(change)}")
    print()

    print("Category breakdown")
    print("-" * 70)
    for row in snapshot.category_breakdown:
        print(f"  {row.key:<14} {format_currency(row.total, currency):>12}  ({row.count} txns)")
    print()

    print("Insights")
    print("-" * 70)
    for insight in snapshot.insights:
        print(f"  [{insight.priority.value.upper():<6}] {insight.title}")
        print(f"           {insight.message}")
    print()

    print("=" * 70)
    print("Demo complete!")
    print("=" * 70)


if __name__ == "__main__":
    main()
