"""Monthly spending series, moving averages and period-over-period change.

Month keys are ``"YYYY-MM"`` strings. They sort lexicographically in the
same order as the months they name, so series are ordered by key without
re-parsing dates.
"""

from calendar import month_abbr
from datetime import date, datetime
from decimal import Decimal
from typing import Sequence, Union

import structlog

from .aggregation import by_category, sum_by_key, top_k
from .exceptions import ValidationError
from .formatting import round_half_up
from .models import CategoryMonthPoint, ExpenseRecord, MonthlyPoint, SpendingSummary
from .periods import Window, filter_by_period

logger = structlog.get_logger()


def month_key(day: date) -> str:
    """``'YYYY-MM'`` key of the month containing ``day``."""
    return f"{day.year}-{day.month:02d}"


def month_label(key: str) -> str:
    """Human label for a month key, e.g. ``'2024-01' -> 'Jan 2024'``."""
    year, month = key.split("-")
    return f"{month_abbr[int(month)]} {year}"


def monthly_series(
    expenses: Sequence[ExpenseRecord],
    window: Window = None,
    now: Union[date, datetime, None] = None,
) -> list[MonthlyPoint]:
    """Total spend per calendar month, oldest month first.

    Args:
        expenses: Expense snapshot.
        window: Optional period to restrict the series to.
        now: Evaluation instant for relative windows.

    Returns:
        One point per month that has at least one expense in the window.
    """
    filtered = filter_by_period(expenses, window, now)
    sums = sum_by_key(filtered, lambda e: month_key(e.date))
    return [
        MonthlyPoint(month_key=key, label=month_label(key), amount=total)
        for key, (total, _count) in sorted(sums.items())
    ]


def moving_average(series: Sequence[MonthlyPoint], window_size: int = 3) -> list[MonthlyPoint]:
    """Attach a trailing moving average as each point's ``trend``.

    Points without enough history (the first ``window_size - 1``) take their
    own amount as trend.

    Raises:
        ValidationError: If ``window_size`` is less than 1.
    """
    if window_size < 1:
        raise ValidationError(
            "Moving average window must contain at least one point",
            field="window_size",
            value=window_size,
            constraint=">= 1",
        )

    points = []
    for i, point in enumerate(series):
        if i < window_size - 1:
            trend = point.amount
        else:
            trailing = series[i - window_size + 1 : i + 1]
            trend = sum((p.amount for p in trailing), Decimal("0")) / Decimal(window_size)
        points.append(point.model_copy(update={"trend": trend}))
    return points


def month_over_month_change(series: Sequence[MonthlyPoint]) -> Decimal:
    """Percent change of the last point against the one before it.

    Rounded to one decimal place. Returns 0 when there are fewer than two
    points or the previous month's amount is zero.
    """
    if len(series) < 2:
        return Decimal("0")
    previous, last = series[-2].amount, series[-1].amount
    if previous == 0:
        return Decimal("0")
    return round_half_up((last - previous) / previous * Decimal("100"), 1)


def describe_change(percent: Decimal) -> str:
    """Word for the direction of a percentage change."""
    if percent > 0:
        return "increase"
    if percent < 0:
        return "decrease"
    return "no change"


def category_series(
    expenses: Sequence[ExpenseRecord],
    window: Window = None,
    now: Union[date, datetime, None] = None,
    top_n: int = 5,
) -> list[CategoryMonthPoint]:
    """Per-month totals for the ``top_n`` categories of the window.

    Categories outside the top N are left out of every month rather than
    folded into an "Other" series. A top category with no spend in a month
    reports 0 for that month.
    """
    filtered = filter_by_period(expenses, window, now)
    categories = [g.key for g in top_k(by_category(filtered), top_n)]
    wanted = set(categories)

    by_month: dict[str, dict[str, Decimal]] = {}
    for expense in filtered:
        totals = by_month.setdefault(
            month_key(expense.date), {c: Decimal("0") for c in categories}
        )
        if expense.category in wanted:
            totals[expense.category] += expense.amount

    logger.debug("category_series_built", months=len(by_month), categories=categories)
    return [
        CategoryMonthPoint(month_key=key, label=month_label(key), totals=totals)
        for key, totals in sorted(by_month.items())
    ]


def average_monthly_spending(expenses: Sequence[ExpenseRecord]) -> Decimal:
    """Total spend divided by the number of months between first and last expense.

    The month count is the calendar-month difference between the earliest
    and latest expense, with a minimum of one.
    """
    if not expenses:
        return Decimal("0")
    first = min(e.date for e in expenses)
    last = max(e.date for e in expenses)
    months = max(1, (last.year - first.year) * 12 + (last.month - first.month))
    total = sum((e.amount for e in expenses), Decimal("0"))
    return total / Decimal(months)


def spending_summary(expenses: Sequence[ExpenseRecord]) -> SpendingSummary:
    """Total, monthly average, largest single expense and count."""
    if not expenses:
        return SpendingSummary()
    return SpendingSummary(
        total_spent=sum((e.amount for e in expenses), Decimal("0")),
        average_monthly=average_monthly_spending(expenses),
        largest_expense=max(e.amount for e in expenses),
        transaction_count=len(expenses),
    )


def trend_series(
    expenses: Sequence[ExpenseRecord],
    window: Window = None,
    now: Union[date, datetime, None] = None,
    window_size: int = 3,
) -> list[MonthlyPoint]:
    """Monthly series with its moving average attached."""
    return moving_average(monthly_series(expenses, window, now), window_size)
