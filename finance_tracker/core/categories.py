# finance_tracker/core/categories.py
from __future__ import annotations

from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, List, Optional

from finance_tracker.core.models import Category, TransactionKind

PLACEHOLDER_NAME = "Unknown"
PLACEHOLDER_ICON = "Circle"
PLACEHOLDER_COLOR = "#888888"
UNCATEGORIZED_NAME = "Uncategorized"

# (id, name, icon, color, kind)
DEFAULT_CATEGORIES = [
    ("salary", "Salary", "Briefcase", "#10B981", TransactionKind.INCOME),
    ("freelance", "Freelance", "Laptop", "#34D399", TransactionKind.INCOME),
    ("investments", "Investments", "TrendingUp", "#6EE7B7", TransactionKind.INCOME),
    ("gifts-in", "Gifts", "Gift", "#A7F3D0", TransactionKind.INCOME),
    ("other-income", "Other", "Plus", "#059669", TransactionKind.INCOME),
    ("food", "Food", "UtensilsCrossed", "#F43F5E", TransactionKind.EXPENSE),
    ("transport", "Transport", "Car", "#FB7185", TransactionKind.EXPENSE),
    ("housing", "Housing", "Home", "#FDA4AF", TransactionKind.EXPENSE),
    ("entertainment", "Entertainment", "Gamepad2", "#E11D48", TransactionKind.EXPENSE),
    ("health", "Health", "Heart", "#BE123C", TransactionKind.EXPENSE),
    ("education", "Education", "GraduationCap", "#9F1239", TransactionKind.EXPENSE),
    ("shopping", "Shopping", "ShoppingBag", "#881337", TransactionKind.EXPENSE),
    ("bills", "Bills", "Receipt", "#F472B6", TransactionKind.EXPENSE),
    ("other-expense", "Other", "MoreHorizontal", "#DB2777", TransactionKind.EXPENSE),
]


def default_categories(user_id: str) -> List[Category]:
    return [
        Category(
            id=f"{user_id}:{cat_id}",
            user_id=user_id,
            name=name,
            icon=icon,
            color=color,
            kind=kind,
            is_default=True,
        )
        for cat_id, name, icon, color, kind in DEFAULT_CATEGORIES
    ]


class CategoryIndex(Mapping):
    """Read-only lookup of categories by id.

    ``resolve`` never fails: an id that is not in the snapshot (for example
    a category deleted after the transaction was recorded) resolves to a
    placeholder carrying the same id.
    """

    def __init__(self, categories: Optional[Iterable[Category]] = None):
        self._by_id: Dict[str, Category] = {c.id: c for c in categories or ()}

    def __getitem__(self, category_id: str) -> Category:
        return self._by_id[category_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_id)

    def __len__(self) -> int:
        return len(self._by_id)

    def resolve(self, category_id: Optional[str], kind=TransactionKind.EXPENSE) -> Category:
        if category_id is None:
            return Category(
                id="",
                user_id="",
                name=UNCATEGORIZED_NAME,
                icon=PLACEHOLDER_ICON,
                color=PLACEHOLDER_COLOR,
                kind=kind,
            )
        found = self._by_id.get(category_id)
        if found is not None:
            return found
        return Category(
            id=category_id,
            user_id="",
            name=PLACEHOLDER_NAME,
            icon=PLACEHOLDER_ICON,
            color=PLACEHOLDER_COLOR,
            kind=kind,
        )

    def of_kind(self, kind) -> List[Category]:
        kind = TransactionKind(kind)
        return [c for c in self._by_id.values() if c.kind is kind]
