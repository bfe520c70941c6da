# finance_tracker/core/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional


class TransactionKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class PiggyBankEntryKind(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"


def to_decimal(value) -> Decimal:
    """Coerce *value* to a finite Decimal; anything else is a ValueError."""
    if isinstance(value, Decimal):
        result = value
    else:
        if isinstance(value, float):
            # go through str so 0.1 stays 0.1
            value = str(value)
        try:
            result = Decimal(value.strip() if isinstance(value, str) else value)
        except (InvalidOperation, TypeError, ValueError):
            raise ValueError(f"Not a valid amount: {value!r}") from None
    if not result.is_finite():
        raise ValueError(f"Amount must be a finite number: {value}")
    return result


@dataclass(frozen=True)
class Transaction:
    id: str
    user_id: str
    kind: TransactionKind
    amount: Decimal
    date: date
    category_id: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", TransactionKind(self.kind))
        object.__setattr__(self, "amount", to_decimal(self.amount))
        if self.amount < 0:
            raise ValueError(f"Transaction amount must be non-negative: {self.amount}")

    @property
    def signed_amount(self) -> Decimal:
        """Contribution to a balance: income adds, expense subtracts."""
        if self.kind is TransactionKind.INCOME:
            return self.amount
        return -self.amount


@dataclass(frozen=True)
class TransactionInput:
    """A transaction read from a file, not yet stored.

    ``category`` is whatever the file says: a category id or name.
    """
    kind: TransactionKind
    amount: Decimal
    date: date
    category: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", TransactionKind(self.kind))
        object.__setattr__(self, "amount", to_decimal(self.amount))
        if self.amount < 0:
            raise ValueError(f"Transaction amount must be non-negative: {self.amount}")


@dataclass
class Category:
    id: str
    user_id: str
    name: str
    icon: str
    color: str
    kind: TransactionKind
    is_default: bool = False

    def __post_init__(self) -> None:
        self.kind = TransactionKind(self.kind)


@dataclass
class SavingsGoal:
    id: str
    user_id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal = Decimal("0")
    icon: str = "Target"
    color: str = "#10B981"
    deadline: Optional[date] = None
    is_completed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.target_amount = to_decimal(self.target_amount)
        self.current_amount = to_decimal(self.current_amount)


@dataclass
class PiggyBank:
    id: str
    user_id: str
    balance: Decimal = Decimal("0")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.balance = to_decimal(self.balance)


@dataclass(frozen=True)
class PiggyBankEntry:
    id: str
    user_id: str
    kind: PiggyBankEntryKind
    amount: Decimal
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", PiggyBankEntryKind(self.kind))
        object.__setattr__(self, "amount", to_decimal(self.amount))


@dataclass
class Profile:
    id: str
    user_id: str
    name: str = ""
    email: str = ""
    currency: str = "BRL"


@dataclass(frozen=True)
class PeriodTotals:
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense

    def as_dict(self) -> dict:
        return {
            "income": float(self.income),
            "expense": float(self.expense),
            "balance": float(self.balance),
        }


@dataclass(frozen=True)
class MonthlyStats:
    label: str
    year: int
    month: int
    totals: PeriodTotals = field(default_factory=PeriodTotals)

    @property
    def income(self) -> Decimal:
        return self.totals.income

    @property
    def expense(self) -> Decimal:
        return self.totals.expense

    @property
    def balance(self) -> Decimal:
        return self.totals.balance

    def as_dict(self) -> dict:
        return {"label": self.label, "year": self.year, "month": self.month, **self.totals.as_dict()}


@dataclass(frozen=True)
class CategoryStats:
    category_id: Optional[str]
    name: str
    icon: str
    color: str
    total: Decimal
    count: int
    percentage: float

    def as_dict(self) -> dict:
        return {
            "category_id": self.category_id,
            "name": self.name,
            "icon": self.icon,
            "color": self.color,
            "total": float(self.total),
            "count": self.count,
            "percentage": self.percentage,
        }
