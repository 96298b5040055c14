"""Grouped sums over monetary records.

Groups are ranked by total, largest first. Equal totals keep the order in
which their keys were first seen, so results are stable for a given input
order. ``top_k_with_overflow`` folds the tail of a ranking into a synthetic
"Other" entry for pie and bar views; ``top_k`` simply truncates it for the
per-series trend views.
"""

from decimal import Decimal
from typing import Callable, Iterable, Sequence

from .models import CategoryTotal, ExpenseRecord

OTHER_KEY = "Other"


def sum_by_key(
    records: Iterable[ExpenseRecord],
    key_fn: Callable[[ExpenseRecord], str],
) -> dict[str, tuple[Decimal, int]]:
    """Sum amounts and count records per key, in first-encountered key order."""
    sums: dict[str, tuple[Decimal, int]] = {}
    for record in records:
        key = key_fn(record)
        total, count = sums.get(key, (Decimal("0"), 0))
        sums[key] = (total + record.amount, count + 1)
    return sums


def group_sum(
    records: Iterable[ExpenseRecord],
    key_fn: Callable[[ExpenseRecord], str],
) -> list[CategoryTotal]:
    """Group records by ``key_fn`` and rank the groups by total.

    Args:
        records: Records to group.
        key_fn: Maps a record to its group key.

    Returns:
        One ``CategoryTotal`` per key, sorted by total descending. Ties keep
        first-encountered order. Empty input gives an empty list.
    """
    grouped = [
        CategoryTotal(key=key, total=total, count=count)
        for key, (total, count) in sum_by_key(records, key_fn).items()
    ]
    # sorted() is stable, so equal totals stay in encounter order
    return sorted(grouped, key=lambda g: g.total, reverse=True)


def by_category(records: Iterable[ExpenseRecord]) -> list[CategoryTotal]:
    """Rank categories by total spend."""
    return group_sum(records, lambda r: r.category)


def by_month(records: Iterable[ExpenseRecord]) -> list[CategoryTotal]:
    """Rank calendar months ('YYYY-MM') by total spend."""
    return group_sum(records, lambda r: f"{r.date.year}-{r.date.month:02d}")


def top_k(grouped: Sequence[CategoryTotal], k: int) -> list[CategoryTotal]:
    """Keep the first ``k`` entries of a ranking and drop the rest."""
    return list(grouped[: max(k, 0)])


def top_k_with_overflow(grouped: Sequence[CategoryTotal], k: int) -> list[CategoryTotal]:
    """Keep the leading entries and fold the remainder into "Other".

    When there are more than ``k`` entries, the first ``k - 1`` are kept and
    the rest are summed into a trailing ``"Other"`` entry, so at most ``k``
    entries come back. With ``k <= 1`` the top entry is still kept alongside
    "Other" whenever more than one key exists. The sum of all totals is
    unchanged for every ``k``.

    A real category already named "Other" among the kept entries absorbs
    the folded tail in place, leaving one entry fewer.

    Args:
        grouped: Ranking produced by ``group_sum``.
        k: Maximum number of entries to return.

    Returns:
        The folded ranking (a new list).

    Example:
        8 categories with ``k=6`` give the top 5 plus "Other" holding the
        totals of categories 6-8.
    """
    if len(grouped) <= max(k, 1):
        return list(grouped)

    keep = max(k - 1, 1)
    head, tail = grouped[:keep], grouped[keep:]
    tail_total = sum((g.total for g in tail), Decimal("0"))
    tail_count = sum(g.count for g in tail)

    for i, entry in enumerate(head):
        if entry.key == OTHER_KEY:
            merged = entry.model_copy(
                update={"total": entry.total + tail_total, "count": entry.count + tail_count}
            )
            return [*head[:i], merged, *head[i + 1 :]]

    return [*head, CategoryTotal(key=OTHER_KEY, total=tail_total, count=tail_count)]


def total_of(grouped: Iterable[CategoryTotal]) -> Decimal:
    """Sum of the totals of a ranking."""
    return sum((g.total for g in grouped), Decimal("0"))
