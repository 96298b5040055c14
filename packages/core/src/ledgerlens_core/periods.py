"""Date windows and period filtering for expense records.

A window is either an absolute ``DateWindow`` (either bound may be left
open) or a relative window such as ``RelativeWindow.THIS_MONTH`` or
``last_n_months(3)`` that is resolved against ``now`` on every call.
Nothing is cached, so the same relative window selects a different range
on a different day.

Weeks start on Sunday. All bounds are inclusive.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, Optional, TypeVar, Union

import structlog
from dateutil.relativedelta import relativedelta

from .exceptions import ValidationError

logger = structlog.get_logger()

R = TypeVar("R")


class RelativeWindow(str, Enum):
    """Named windows resolved against the evaluation date."""

    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_WEEK = "this_week"
    LAST_WEEK = "last_week"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    THIS_YEAR = "this_year"


@dataclass(frozen=True)
class DateWindow:
    """An inclusive date range; a missing bound is unbounded on that side."""

    start: Optional[date] = None
    end: Optional[date] = None

    def __post_init__(self) -> None:
        if self.start is not None and self.end is not None and self.end < self.start:
            raise ValidationError(
                "Window end must not precede its start",
                field="end",
                value=self.end.isoformat(),
                constraint=f">= {self.start.isoformat()}",
            )

    def contains(self, day: date) -> bool:
        """Check whether a date falls inside the window."""
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True


@dataclass(frozen=True)
class LastNMonths:
    """Window from ``months`` calendar months before ``now`` up to ``now``."""

    months: int

    def __post_init__(self) -> None:
        if self.months < 1:
            raise ValidationError(
                "Relative month window must cover at least one month",
                field="months",
                value=self.months,
                constraint=">= 1",
            )


Window = Union[DateWindow, RelativeWindow, LastNMonths, str, None]


def last_n_months(n: int) -> LastNMonths:
    """Build a trailing window of ``n`` calendar months."""
    return LastNMonths(months=n)


def as_date(now: Union[date, datetime, None] = None) -> date:
    """Normalize an evaluation instant to a calendar date (today if omitted)."""
    if now is None:
        return date.today()
    if isinstance(now, datetime):
        return now.date()
    return now


def start_of_week(day: date) -> date:
    """Sunday on or before ``day``."""
    # date.weekday(): Monday == 0 ... Sunday == 6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def month_window(day: date) -> DateWindow:
    """Full calendar month containing ``day``."""
    first = day.replace(day=1)
    last = first + relativedelta(months=1) - timedelta(days=1)
    return DateWindow(start=first, end=last)


def previous_month_window(day: date) -> DateWindow:
    """Full calendar month before the one containing ``day``."""
    return month_window(day.replace(day=1) - timedelta(days=1))


def resolve_window(window: Window, now: Union[date, datetime, None] = None) -> DateWindow:
    """Turn any supported window into an absolute ``DateWindow``.

    Args:
        window: Absolute window, relative window (enum or its string value),
            ``LastNMonths``, or None for "all time".
        now: Evaluation instant. Relative windows are anchored on its date.

    Returns:
        The absolute, inclusive window.

    Raises:
        ValidationError: If ``window`` is a string that names no relative window.
    """
    if window is None:
        return DateWindow()
    if isinstance(window, DateWindow):
        return window

    today = as_date(now)

    if isinstance(window, LastNMonths):
        return DateWindow(start=today - relativedelta(months=window.months), end=today)

    if isinstance(window, str) and not isinstance(window, RelativeWindow):
        try:
            window = RelativeWindow(window)
        except ValueError:
            raise ValidationError(
                f"Unknown relative window: {window}",
                field="window",
                value=window,
                constraint=f"one of {[w.value for w in RelativeWindow]}",
            ) from None

    if window == RelativeWindow.TODAY:
        return DateWindow(start=today, end=today)
    if window == RelativeWindow.YESTERDAY:
        yesterday = today - timedelta(days=1)
        return DateWindow(start=yesterday, end=yesterday)
    if window == RelativeWindow.THIS_WEEK:
        return DateWindow(start=start_of_week(today), end=today)
    if window == RelativeWindow.LAST_WEEK:
        start = start_of_week(today) - timedelta(days=7)
        return DateWindow(start=start, end=start + timedelta(days=6))
    if window == RelativeWindow.THIS_MONTH:
        return DateWindow(start=today.replace(day=1), end=today)
    if window == RelativeWindow.LAST_MONTH:
        return previous_month_window(today)
    # THIS_YEAR
    return DateWindow(start=today.replace(month=1, day=1), end=today)


def filter_by_period(
    records: Iterable[R],
    window: Window = None,
    now: Union[date, datetime, None] = None,
) -> list[R]:
    """Select records whose ``date`` falls inside the window.

    The input is not modified; a new list is returned in input order.

    Args:
        records: Any records exposing a ``date`` attribute.
        window: Window to filter by (see ``resolve_window``).
        now: Evaluation instant for relative windows.

    Returns:
        Records inside the window, both bounds inclusive.
    """
    resolved = resolve_window(window, now)
    selected = [r for r in records if resolved.contains(r.date)]
    logger.debug(
        "period_filtered",
        start=resolved.start.isoformat() if resolved.start else None,
        end=resolved.end.isoformat() if resolved.end else None,
        selected=len(selected),
    )
    return selected
