from datetime import datetime
from decimal import Decimal

import pytest

from finance_tracker.core.models import PiggyBankEntry, SavingsGoal
from finance_tracker.core.savings import (
    InsufficientFundsError,
    apply_contribution,
    apply_piggy_bank_entry,
    goal_progress,
    ledger_balance,
    progress_bar_width,
    split_goals,
)


def _goal(target, current="0", **kwargs):
    return SavingsGoal(id="g1", user_id="u1", name="Trip", target_amount=target,
                       current_amount=current, **kwargs)


def test_goal_progress_is_not_clamped_but_bar_is():
    goal = _goal("200", "250")
    assert goal_progress(goal) == 125.0
    assert progress_bar_width(goal) == 100.0
    assert goal_progress(_goal("0")) == 0.0


def test_contribution_completes_goal_at_target():
    goal = _goal("100", "60")
    now = datetime(2024, 5, 1, 12, 0)
    partial = apply_contribution(goal, "20", now=now)
    assert partial.current_amount == Decimal("80")
    assert not partial.is_completed
    assert partial.updated_at == now
    done = apply_contribution(partial, Decimal("20"))
    assert done.current_amount == 100
    assert done.is_completed
    # the original is untouched
    assert goal.current_amount == 60


def test_contribution_must_be_positive():
    with pytest.raises(ValueError):
        apply_contribution(_goal("100"), 0)


def test_split_goals():
    goals = [_goal("10", is_completed=True), _goal("20"), _goal("30")]
    active, completed = split_goals(goals)
    assert [g.target_amount for g in active] == [20, 30]
    assert [g.target_amount for g in completed] == [10]


def test_piggy_bank_deposit_and_withdraw():
    assert apply_piggy_bank_entry("10", "deposit", "5.50") == Decimal("15.50")
    assert apply_piggy_bank_entry("10", "withdraw", "10") == 0
    with pytest.raises(InsufficientFundsError):
        apply_piggy_bank_entry("10", "withdraw", "10.01")
    with pytest.raises(ValueError):
        apply_piggy_bank_entry("10", "deposit", "-1")


def test_ledger_balance():
    entries = [
        PiggyBankEntry(id="1", user_id="u1", kind="deposit", amount="50"),
        PiggyBankEntry(id="2", user_id="u1", kind="withdraw", amount="20"),
        PiggyBankEntry(id="3", user_id="u1", kind="deposit", amount="0.25"),
    ]
    assert ledger_balance(entries) == Decimal("30.25")
