import sqlite3
from datetime import date, datetime
from decimal import Decimal

import pytest

from finance_tracker import database as db
from finance_tracker.core.savings import InsufficientFundsError

USER = "u1"


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "finance.db")
    db.bootstrap_user(path, USER, name="Ana", email="ana@example.com")
    return path


def _category_id(db_path, name, kind):
    return next(c.id for c in db.list_categories(db_path, USER, kind=kind) if c.name == name)


def test_bootstrap_seeds_defaults_once(db_path):
    categories = db.list_categories(db_path, USER)
    assert len(categories) == 14
    assert all(c.is_default for c in categories)
    assert len(db.list_categories(db_path, USER, kind="income")) == 5

    db.bootstrap_user(db_path, USER)
    assert len(db.list_categories(db_path, USER)) == 14
    assert db.get_piggy_bank(db_path, USER).balance == 0
    profile = db.get_profile(db_path, USER)
    assert profile.name == "Ana"
    assert profile.currency == "BRL"


def test_add_fetch_and_delete_transactions(db_path):
    food = _category_id(db_path, "Food", "expense")
    salary = _category_id(db_path, "Salary", "income")
    t1 = db.add_transaction(db_path, USER, "income", "1000", date(2024, 3, 5), salary)
    t2 = db.add_transaction(db_path, USER, "expense", Decimal("300.10"), "2024-03-10T18:30:00",
                            food, description="  Groceries ")
    db.add_transaction(db_path, USER, "expense", 200, date(2024, 2, 20))

    txs = db.fetch_transactions(db_path, USER)
    assert [t.date for t in txs] == [date(2024, 3, 10), date(2024, 3, 5), date(2024, 2, 20)]
    assert txs[0].amount == Decimal("300.10")
    assert txs[0].description == "Groceries"
    assert txs[0].created_at is not None

    march = db.fetch_transactions(db_path, USER, start_date=date(2024, 3, 1), end_date=date(2024, 3, 5))
    assert [t.id for t in march] == [t1.id]

    assert len(db.recent_transactions(db_path, USER, limit=2)) == 2

    db.delete_transaction(db_path, USER, t2.id)
    assert len(db.fetch_transactions(db_path, USER)) == 2
    with pytest.raises(KeyError):
        db.delete_transaction(db_path, USER, t2.id)


def test_transactions_are_scoped_by_user(db_path):
    db.add_transaction(db_path, USER, "income", 10, date(2024, 1, 1))
    db.bootstrap_user(db_path, "u2")
    assert db.fetch_transactions(db_path, "u2") == []


def test_add_transaction_validates_category(db_path):
    salary = _category_id(db_path, "Salary", "income")
    with pytest.raises(ValueError):
        db.add_transaction(db_path, USER, "expense", 10, date(2024, 1, 1), salary)
    with pytest.raises(KeyError):
        db.add_transaction(db_path, USER, "expense", 10, date(2024, 1, 1), "missing")
    with pytest.raises(ValueError):
        db.add_transaction(db_path, USER, "expense", -10, date(2024, 1, 1))
    assert db.fetch_transactions(db_path, USER) == []


def test_category_crud(db_path):
    pets = db.add_category(db_path, USER, " Pets ", "PawPrint", "#AABBCC", "expense")
    assert pets.name == "Pets"
    assert not pets.is_default

    updated = db.update_category(db_path, USER, pets.id, name="Animals", color="#000000")
    assert updated.name == "Animals"
    assert db.get_category(db_path, USER, pets.id).color == "#000000"

    with pytest.raises(ValueError):
        db.update_category(db_path, USER, pets.id, color="red")
    with pytest.raises(ValueError):
        db.update_category(db_path, USER, pets.id, user_id="other")
    with pytest.raises(ValueError):
        db.add_category(db_path, USER, "", "Circle", "#123456", "expense")

    db.delete_category(db_path, USER, pets.id)
    with pytest.raises(KeyError):
        db.get_category(db_path, USER, pets.id)
    with pytest.raises(KeyError):
        db.delete_category(db_path, USER, pets.id)


def test_deleting_category_keeps_transactions(db_path):
    pets = db.add_category(db_path, USER, "Pets", "PawPrint", "#AABBCC", "expense")
    db.add_transaction(db_path, USER, "expense", 42, date(2024, 1, 1), pets.id)
    db.delete_category(db_path, USER, pets.id)
    [tx] = db.fetch_transactions(db_path, USER)
    assert tx.category_id == pets.id


def test_savings_goals(db_path):
    goal = db.add_savings_goal(db_path, USER, "Trip", "1000", deadline="2024-12-31")
    assert goal.icon == "Target"
    assert goal.color == "#10B981"
    assert goal.deadline == date(2024, 12, 31)

    goal = db.contribute_to_goal(db_path, USER, goal.id, "400")
    assert goal.current_amount == 400
    assert not goal.is_completed
    goal = db.contribute_to_goal(db_path, USER, goal.id, 600)
    assert goal.is_completed

    stored = db.get_savings_goal(db_path, USER, goal.id)
    assert stored.current_amount == Decimal("1000")
    assert stored.is_completed

    renamed = db.update_savings_goal(db_path, USER, goal.id, name="Holiday", target_amount="1500")
    assert renamed.target_amount == Decimal("1500")
    assert db.list_savings_goals(db_path, USER)[0].name == "Holiday"
    # raising the target above what was saved reopens the goal
    assert not renamed.is_completed
    assert not db.get_savings_goal(db_path, USER, goal.id).is_completed

    lowered = db.update_savings_goal(db_path, USER, goal.id, target_amount="800")
    assert lowered.is_completed

    with pytest.raises(ValueError):
        db.add_savings_goal(db_path, USER, "Bad", 0)
    with pytest.raises(ValueError):
        db.update_savings_goal(db_path, USER, goal.id, target_amount=0)
    with pytest.raises(ValueError):
        db.update_savings_goal(db_path, USER, goal.id, color="green")
    with pytest.raises(ValueError):
        db.update_savings_goal(db_path, USER, goal.id, name="  ")
    assert db.get_savings_goal(db_path, USER, goal.id).target_amount == Decimal("800")

    db.delete_savings_goal(db_path, USER, goal.id)
    assert db.list_savings_goals(db_path, USER) == []
    with pytest.raises(KeyError):
        db.contribute_to_goal(db_path, USER, goal.id, 1)


def test_piggy_bank_ledger(db_path):
    bank = db.deposit_to_piggy_bank(db_path, USER, "50", "first")
    assert bank.balance == 50
    bank = db.withdraw_from_piggy_bank(db_path, USER, "20.5")
    assert bank.balance == Decimal("29.5")

    with pytest.raises(InsufficientFundsError):
        db.withdraw_from_piggy_bank(db_path, USER, 100)

    assert db.get_piggy_bank(db_path, USER).balance == Decimal("29.5")
    entries = db.list_piggy_bank_entries(db_path, USER)
    assert [e.kind.value for e in entries] == ["withdraw", "deposit"]
    assert entries[1].description == "first"


def test_piggy_bank_requires_bootstrap(tmp_path):
    with pytest.raises(KeyError):
        db.deposit_to_piggy_bank(str(tmp_path / "other.db"), USER, 10)


def test_update_profile(db_path):
    profile = db.update_profile(db_path, USER, currency="usd")
    assert profile.currency == "USD"
    assert db.get_profile(db_path, USER).currency == "USD"
    with pytest.raises(ValueError):
        db.update_profile(db_path, USER, id="x")


def test_clear_all_data_keeps_categories_and_profile(db_path):
    db.add_transaction(db_path, USER, "income", 10, date(2024, 1, 1))
    db.add_savings_goal(db_path, USER, "Trip", 100)
    db.deposit_to_piggy_bank(db_path, USER, 5)

    db.clear_all_data(db_path, USER)

    assert db.fetch_transactions(db_path, USER) == []
    assert db.list_savings_goals(db_path, USER) == []
    assert db.list_piggy_bank_entries(db_path, USER) == []
    assert db.get_piggy_bank(db_path, USER).balance == 0
    assert len(db.list_categories(db_path, USER)) == 14
    assert db.get_profile(db_path, USER).name == "Ana"


def test_amounts_are_stored_as_exact_text(db_path):
    db.add_transaction(db_path, USER, "expense", 0.1, date(2024, 1, 1))
    conn = sqlite3.connect(db_path)
    rows = conn.execute("SELECT amount FROM transactions").fetchall()
    conn.close()
    assert rows == [("0.1",)]


@pytest.mark.parametrize("amount", ["Infinity", "-inf", "nan", "abc", Decimal("Infinity"), float("nan")])
def test_add_transaction_rejects_non_numeric_amounts(db_path, amount):
    with pytest.raises(ValueError):
        db.add_transaction(db_path, USER, "income", amount, date(2024, 3, 1))
    assert db.fetch_transactions(db_path, USER) == []


def test_piggy_bank_rejects_infinite_deposit(db_path):
    with pytest.raises(ValueError):
        db.deposit_to_piggy_bank(db_path, USER, "Infinity")
    assert db.get_piggy_bank(db_path, USER).balance == 0
    assert db.list_piggy_bank_entries(db_path, USER) == []
