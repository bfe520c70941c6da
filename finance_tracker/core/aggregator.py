# finance_tracker/core/aggregator.py
"""Derived statistics over a snapshot of transactions.

Every function here is pure: it reads the transactions and categories it is
given and returns new values. Nothing is cached and nothing is mutated, so
callers recompute whenever they decide their snapshot has changed.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from finance_tracker.core.categories import CategoryIndex
from finance_tracker.core.models import (
    Category,
    CategoryStats,
    MonthlyStats,
    PeriodTotals,
    Transaction,
    TransactionKind,
)
from finance_tracker.utils import add_months, as_date, month_bounds

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_ZERO = Decimal("0")


def transactions_in_range(
    transactions: Iterable[Transaction], start, end
) -> List[Transaction]:
    """Return transactions dated within ``[start, end]``, both ends inclusive."""
    start_d, end_d = as_date(start), as_date(end)
    return [t for t in transactions if start_d <= as_date(t.date) <= end_d]


def transactions_in_month(
    transactions: Iterable[Transaction], reference_date
) -> List[Transaction]:
    start, end = month_bounds(reference_date)
    return transactions_in_range(transactions, start, end)


def _totals(transactions: Iterable[Transaction]) -> PeriodTotals:
    income = _ZERO
    expense = _ZERO
    for t in transactions:
        if t.kind is TransactionKind.INCOME:
            income += t.amount
        else:
            expense += t.amount
    return PeriodTotals(income=income, expense=expense)


def month_totals(transactions: Iterable[Transaction], reference_date) -> PeriodTotals:
    """Income, expense and balance for the calendar month of *reference_date*."""
    return _totals(transactions_in_month(transactions, reference_date))


def total_balance(transactions: Iterable[Transaction]) -> Decimal:
    """All-time balance: income amounts minus expense amounts."""
    return _totals(transactions).balance


def month_label(day: date) -> str:
    return MONTH_ABBR[day.month - 1]


class MonthlySeries(Sequence):
    """Exactly ``count`` consecutive months ending at the reference month.

    Entries are computed on access, oldest month first. Iterating again
    starts over from the oldest month.
    """

    def __init__(self, transactions: Iterable[Transaction], reference_date, count: int = 6):
        if count < 1:
            raise ValueError(f"count must be at least 1, got {count}")
        self._transactions: Tuple[Transaction, ...] = tuple(transactions)
        first_of_month, _ = month_bounds(reference_date)
        self._last_month = first_of_month
        self._count = count

    def __len__(self) -> int:
        return self._count

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(self._count))]
        if index < 0:
            index += self._count
        if not 0 <= index < self._count:
            raise IndexError("monthly series index out of range")
        return self._entry(self.month_start(index))

    def __iter__(self) -> Iterator[MonthlyStats]:
        for index in range(self._count):
            yield self._entry(self.month_start(index))

    def month_start(self, index: int) -> date:
        return add_months(self._last_month, index - (self._count - 1))

    def _entry(self, first_day: date) -> MonthlyStats:
        return MonthlyStats(
            label=month_label(first_day),
            year=first_day.year,
            month=first_day.month,
            totals=month_totals(self._transactions, first_day),
        )

    def __repr__(self) -> str:
        return f"MonthlySeries(count={self._count}, last_month={self._last_month.isoformat()})"


def monthly_series(
    transactions: Iterable[Transaction], reference_date, count: int = 6
) -> MonthlySeries:
    return MonthlySeries(transactions, reference_date, count)


def category_breakdown(
    transactions: Iterable[Transaction],
    categories,
    reference_date,
    kind,
) -> List[CategoryStats]:
    """Per-category totals for one kind within the month of *reference_date*.

    Transactions with no category are grouped into a single uncategorized
    entry (``category_id`` is ``None``) so the percentages of all returned
    entries add up to 100. Entries are ordered by total, largest first, with
    the category id breaking ties.
    """
    kind = TransactionKind(kind)
    index = categories if isinstance(categories, CategoryIndex) else CategoryIndex(categories)

    groups: Dict[Optional[str], List[Decimal]] = defaultdict(list)
    for t in transactions_in_month(transactions, reference_date):
        if t.kind is kind:
            groups[t.category_id].append(t.amount)

    kind_total = sum((sum(amounts, _ZERO) for amounts in groups.values()), _ZERO)

    stats = []
    for category_id, amounts in groups.items():
        group_total = sum(amounts, _ZERO)
        category: Category = index.resolve(category_id, kind)
        percentage = float(group_total * 100 / kind_total) if kind_total > 0 else 0.0
        stats.append(
            CategoryStats(
                category_id=category_id,
                name=category.name,
                icon=category.icon,
                color=category.color,
                total=group_total,
                count=len(amounts),
                percentage=percentage,
            )
        )
    stats.sort(key=lambda s: (-s.total, s.category_id or ""))
    return stats
