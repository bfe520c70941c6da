# finance_tracker/reports.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List

from finance_tracker.core.aggregator import (
    category_breakdown,
    month_totals,
    monthly_series,
    total_balance,
)
from finance_tracker.core.categories import CategoryIndex
from finance_tracker.core.models import (
    Category,
    CategoryStats,
    MonthlyStats,
    PeriodTotals,
    Transaction,
    TransactionKind,
)
from finance_tracker.utils import as_date


@dataclass(frozen=True)
class Report:
    """Everything the dashboard shows for one reference month."""
    reference_date: date
    month: PeriodTotals
    balance: Decimal
    series: List[MonthlyStats] = field(default_factory=list)
    breakdowns: Dict[TransactionKind, List[CategoryStats]] = field(default_factory=dict)

    def as_dict(self) -> dict:
        return {
            "reference_date": self.reference_date.isoformat(),
            "month": self.month.as_dict(),
            "total_balance": float(self.balance),
            "series": [m.as_dict() for m in self.series],
            "breakdown": {
                kind.value: [s.as_dict() for s in stats]
                for kind, stats in self.breakdowns.items()
            },
        }


def build_report(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    reference_date,
    months: int = 6,
) -> Report:
    snapshot = tuple(transactions)
    index = CategoryIndex(categories)
    ref = as_date(reference_date)
    return Report(
        reference_date=ref,
        month=month_totals(snapshot, ref),
        balance=total_balance(snapshot),
        series=list(monthly_series(snapshot, ref, months)),
        breakdowns={
            kind: category_breakdown(snapshot, index, ref, kind)
            for kind in TransactionKind
        },
    )
