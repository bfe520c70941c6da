# finance_tracker/core/savings.py
from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Tuple

from finance_tracker.core.models import (
    PiggyBankEntry,
    PiggyBankEntryKind,
    SavingsGoal,
    to_decimal,
)


class InsufficientFundsError(ValueError):
    """Raised when a withdrawal exceeds the piggy bank balance."""


def _positive(amount) -> Decimal:
    value = to_decimal(amount)
    if value <= 0:
        raise ValueError(f"Amount must be greater than 0: {amount}")
    return value


def goal_progress(goal: SavingsGoal) -> float:
    if goal.target_amount <= 0:
        return 0.0
    return float(goal.current_amount * 100 / goal.target_amount)


def progress_bar_width(goal: SavingsGoal) -> float:
    return min(goal_progress(goal), 100.0)


def apply_contribution(goal: SavingsGoal, amount, now: datetime | None = None) -> SavingsGoal:
    """Return *goal* with *amount* added; completed once the target is reached."""
    new_amount = goal.current_amount + _positive(amount)
    return replace(
        goal,
        current_amount=new_amount,
        is_completed=new_amount >= goal.target_amount,
        updated_at=now or datetime.now(),
    )


def split_goals(goals: Iterable[SavingsGoal]) -> Tuple[List[SavingsGoal], List[SavingsGoal]]:
    active, completed = [], []
    for goal in goals:
        (completed if goal.is_completed else active).append(goal)
    return active, completed


def apply_piggy_bank_entry(balance, kind, amount) -> Decimal:
    current = to_decimal(balance)
    value = _positive(amount)
    kind = PiggyBankEntryKind(kind)
    if kind is PiggyBankEntryKind.DEPOSIT:
        return current + value
    if value > current:
        raise InsufficientFundsError(
            f"Cannot withdraw {value}: piggy bank balance is {current}"
        )
    return current - value


def ledger_balance(entries: Iterable[PiggyBankEntry]) -> Decimal:
    total = Decimal("0")
    for entry in entries:
        if entry.kind is PiggyBankEntryKind.DEPOSIT:
            total += entry.amount
        else:
            total -= entry.amount
    return total
