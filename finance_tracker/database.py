import logging
import re
import sqlite3
import uuid
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional

from finance_tracker.core.categories import default_categories
from finance_tracker.core.models import (
    Category,
    PiggyBank,
    PiggyBankEntry,
    PiggyBankEntryKind,
    Profile,
    SavingsGoal,
    Transaction,
    TransactionKind,
    to_decimal,
)
from finance_tracker.core.savings import apply_contribution, apply_piggy_bank_entry
from finance_tracker.utils import as_date

logger = logging.getLogger(__name__)

_COLOR_RX = re.compile(r"^#[0-9A-Fa-f]{6}$")

_CATEGORY_FIELDS = ("name", "icon", "color", "kind")
_GOAL_FIELDS = (
    "name",
    "target_amount",
    "current_amount",
    "icon",
    "color",
    "deadline",
    "is_completed",
)
_PROFILE_FIELDS = ("name", "email", "currency")


def _init_db(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS transactions (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            category_id TEXT,
            kind TEXT NOT NULL CHECK (kind IN ('income', 'expense')),
            amount TEXT NOT NULL,
            description TEXT,
            date TEXT NOT NULL,
            created_at TEXT NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_transactions_user_date
            ON transactions (user_id, date);
        CREATE TABLE IF NOT EXISTS categories (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            name TEXT NOT NULL,
            icon TEXT NOT NULL,
            color TEXT NOT NULL,
            kind TEXT NOT NULL CHECK (kind IN ('income', 'expense')),
            is_default INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL
        );
        CREATE TABLE IF NOT EXISTS savings_goals (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            name TEXT NOT NULL,
            target_amount TEXT NOT NULL,
            current_amount TEXT NOT NULL DEFAULT '0',
            icon TEXT NOT NULL,
            color TEXT NOT NULL,
            deadline TEXT,
            is_completed INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        CREATE TABLE IF NOT EXISTS piggy_bank (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL UNIQUE,
            balance TEXT NOT NULL DEFAULT '0',
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        CREATE TABLE IF NOT EXISTS piggy_bank_transactions (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            kind TEXT NOT NULL CHECK (kind IN ('deposit', 'withdraw')),
            amount TEXT NOT NULL,
            description TEXT,
            created_at TEXT NOT NULL
        );
        CREATE TABLE IF NOT EXISTS profiles (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL UNIQUE,
            name TEXT NOT NULL DEFAULT '',
            email TEXT NOT NULL DEFAULT '',
            currency TEXT NOT NULL DEFAULT 'BRL'
        );
        """
    )
    conn.commit()


def _connect(db_path: str) -> sqlite3.Connection:
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    _init_db(conn)
    return conn


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now()


def _parse_ts(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def init_db(db_path: str) -> None:
    """Create the schema in *db_path* if it does not exist yet."""
    conn = _connect(db_path)
    conn.close()


# -----------------------------------------------------------------------------
# Row mapping
# -----------------------------------------------------------------------------

def _row_to_transaction(row) -> Transaction:
    return Transaction(
        id=row[0],
        user_id=row[1],
        category_id=row[2],
        kind=row[3],
        amount=to_decimal(row[4]),
        description=row[5],
        date=date.fromisoformat(row[6]),
        created_at=_parse_ts(row[7]),
    )


def _row_to_category(row) -> Category:
    return Category(
        id=row[0],
        user_id=row[1],
        name=row[2],
        icon=row[3],
        color=row[4],
        kind=row[5],
        is_default=bool(row[6]),
    )


def _row_to_goal(row) -> SavingsGoal:
    return SavingsGoal(
        id=row[0],
        user_id=row[1],
        name=row[2],
        target_amount=to_decimal(row[3]),
        current_amount=to_decimal(row[4]),
        icon=row[5],
        color=row[6],
        deadline=date.fromisoformat(row[7]) if row[7] else None,
        is_completed=bool(row[8]),
        created_at=_parse_ts(row[9]),
        updated_at=_parse_ts(row[10]),
    )


_TRANSACTION_COLUMNS = "id, user_id, category_id, kind, amount, description, date, created_at"
_CATEGORY_COLUMNS = "id, user_id, name, icon, color, kind, is_default"
_GOAL_COLUMNS = (
    "id, user_id, name, target_amount, current_amount, icon, color, "
    "deadline, is_completed, created_at, updated_at"
)


# -----------------------------------------------------------------------------
# Bootstrap
# -----------------------------------------------------------------------------

def bootstrap_user(
    db_path: str,
    user_id: str,
    name: str = "",
    email: str = "",
    currency: str = "BRL",
) -> Profile:
    """Seed default categories, an empty piggy bank and a profile.

    Safe to call repeatedly: anything that already exists for *user_id* is
    left alone.
    """
    conn = _connect(db_path)
    try:
        now = _now().isoformat()
        with conn:
            has_categories = conn.execute(
                "SELECT 1 FROM categories WHERE user_id = ? LIMIT 1", (user_id,)
            ).fetchone()
            if not has_categories:
                conn.executemany(
                    f"""
                    INSERT INTO categories ({_CATEGORY_COLUMNS}, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (c.id, c.user_id, c.name, c.icon, c.color, c.kind.value, 1, now)
                        for c in default_categories(user_id)
                    ],
                )
                logger.info("Seeded default categories for %s", user_id)
            conn.execute(
                """
                INSERT OR IGNORE INTO piggy_bank (id, user_id, balance, created_at, updated_at)
                VALUES (?, ?, '0', ?, ?)
                """,
                (_new_id(), user_id, now, now),
            )
            conn.execute(
                """
                INSERT OR IGNORE INTO profiles (id, user_id, name, email, currency)
                VALUES (?, ?, ?, ?, ?)
                """,
                (_new_id(), user_id, name, email, currency.upper()),
            )
    finally:
        conn.close()
    return get_profile(db_path, user_id)


# -----------------------------------------------------------------------------
# Transactions
# -----------------------------------------------------------------------------

def add_transaction(
    db_path: str,
    user_id: str,
    kind,
    amount,
    tx_date,
    category_id: str | None = None,
    description: str | None = None,
) -> Transaction:
    """Record a new transaction.

    Parameters
    ----------
    kind:
        ``income`` or ``expense``.
    amount:
        Non-negative amount; the sign is derived from *kind*.
    tx_date:
        Calendar date of the movement. Any time component is dropped.
    category_id:
        Optional category; it must belong to *user_id* and have the same kind.
    """
    tx = Transaction(
        id=_new_id(),
        user_id=user_id,
        kind=kind,
        amount=amount,
        date=as_date(tx_date),
        category_id=category_id,
        description=(description or "").strip() or None,
        created_at=_now(),
    )
    conn = _connect(db_path)
    try:
        if category_id is not None:
            row = conn.execute(
                f"SELECT {_CATEGORY_COLUMNS} FROM categories WHERE id = ? AND user_id = ?",
                (category_id, user_id),
            ).fetchone()
            if row is None:
                raise KeyError(f"Category not found: {category_id}")
            category = _row_to_category(row)
            if category.kind is not tx.kind:
                raise ValueError(
                    f"Category '{category.name}' is for {category.kind.value} "
                    f"transactions, not {tx.kind.value}"
                )
        with conn:
            conn.execute(
                f"INSERT INTO transactions ({_TRANSACTION_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    tx.id,
                    tx.user_id,
                    tx.category_id,
                    tx.kind.value,
                    str(tx.amount),
                    tx.description,
                    tx.date.isoformat(),
                    tx.created_at.isoformat(),
                ),
            )
    finally:
        conn.close()
    logger.info("Added %s transaction %s of %s", tx.kind.value, tx.id, tx.amount)
    return tx


def delete_transaction(db_path: str, user_id: str, transaction_id: str) -> None:
    conn = _connect(db_path)
    try:
        with conn:
            cur = conn.execute(
                "DELETE FROM transactions WHERE id = ? AND user_id = ?",
                (transaction_id, user_id),
            )
    finally:
        conn.close()
    if cur.rowcount == 0:
        raise KeyError(f"Transaction not found: {transaction_id}")
    logger.info("Deleted transaction %s", transaction_id)


def fetch_transactions(
    db_path: str,
    user_id: str,
    start_date: date | None = None,
    end_date: date | None = None,
    limit: int | None = None,
) -> List[Transaction]:
    """Retrieve a user's transactions, newest date first.

    Parameters
    ----------
    start_date:
        Optional start date to filter transactions (inclusive).
    end_date:
        Optional end date to filter transactions (inclusive).
    limit:
        Optional maximum number of rows.
    """
    conditions = ["user_id = ?"]
    params: list = [user_id]
    if start_date:
        conditions.append("date >= ?")
        params.append(as_date(start_date).isoformat())
    if end_date:
        conditions.append("date <= ?")
        params.append(as_date(end_date).isoformat())
    query = (
        f"SELECT {_TRANSACTION_COLUMNS} FROM transactions"
        f" WHERE {' AND '.join(conditions)}"
        " ORDER BY date DESC, created_at DESC"
    )
    if limit is not None:
        query += " LIMIT ?"
        params.append(int(limit))
    conn = _connect(db_path)
    try:
        rows = conn.execute(query, params).fetchall()
    finally:
        conn.close()
    return [_row_to_transaction(r) for r in rows]


def recent_transactions(db_path: str, user_id: str, limit: int = 10) -> List[Transaction]:
    return fetch_transactions(db_path, user_id, limit=limit)


# -----------------------------------------------------------------------------
# Categories
# -----------------------------------------------------------------------------

def _validate_category_fields(fields: Dict[str, object]) -> Dict[str, object]:
    clean = dict(fields)
    if "name" in clean:
        name = str(clean["name"] or "").strip()
        if not name:
            raise ValueError("Category name is required")
        clean["name"] = name
    if "color" in clean and not _COLOR_RX.match(str(clean["color"])):
        raise ValueError(f"Color must look like #RRGGBB: {clean['color']}")
    if "kind" in clean:
        clean["kind"] = TransactionKind(clean["kind"]).value
    return clean


def add_category(
    db_path: str,
    user_id: str,
    name: str,
    icon: str,
    color: str,
    kind,
) -> Category:
    fields = _validate_category_fields(
        {"name": name, "icon": icon or "Circle", "color": color, "kind": kind}
    )
    category = Category(id=_new_id(), user_id=user_id, is_default=False, **fields)
    conn = _connect(db_path)
    try:
        with conn:
            conn.execute(
                f"INSERT INTO categories ({_CATEGORY_COLUMNS}, created_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    category.id,
                    user_id,
                    category.name,
                    category.icon,
                    category.color,
                    category.kind.value,
                    0,
                    _now().isoformat(),
                ),
            )
    finally:
        conn.close()
    logger.info("Added category %s (%s)", category.name, category.id)
    return category


def get_category(db_path: str, user_id: str, category_id: str) -> Category:
    conn = _connect(db_path)
    try:
        row = conn.execute(
            f"SELECT {_CATEGORY_COLUMNS} FROM categories WHERE id = ? AND user_id = ?",
            (category_id, user_id),
        ).fetchone()
    finally:
        conn.close()
    if row is None:
        raise KeyError(f"Category not found: {category_id}")
    return _row_to_category(row)


def list_categories(db_path: str, user_id: str, kind=None) -> List[Category]:
    query = f"SELECT {_CATEGORY_COLUMNS} FROM categories WHERE user_id = ?"
    params: list = [user_id]
    if kind is not None:
        query += " AND kind = ?"
        params.append(TransactionKind(kind).value)
    query += " ORDER BY name, id"
    conn = _connect(db_path)
    try:
        rows = conn.execute(query, params).fetchall()
    finally:
        conn.close()
    return [_row_to_category(r) for r in rows]


def update_category(db_path: str, user_id: str, category_id: str, **updates) -> Category:
    unknown = set(updates) - set(_CATEGORY_FIELDS)
    if unknown:
        raise ValueError(f"Cannot update category fields: {', '.join(sorted(unknown))}")
    fields = _validate_category_fields({k: v for k, v in updates.items() if v is not None})
    current = get_category(db_path, user_id, category_id)
    if not fields:
        return current
    assignments = ", ".join(f"{name} = ?" for name in fields)
    conn = _connect(db_path)
    try:
        with conn:
            conn.execute(
                f"UPDATE categories SET {assignments} WHERE id = ? AND user_id = ?",
                [*fields.values(), category_id, user_id],
            )
    finally:
        conn.close()
    logger.info("Updated category %s: %s", category_id, ", ".join(fields))
    return replace(current, **fields)


def delete_category(db_path: str, user_id: str, category_id: str) -> None:
    """Remove a category. Transactions keep their (now dangling) reference."""
    conn = _connect(db_path)
    try:
        with conn:
            cur = conn.execute(
                "DELETE FROM categories WHERE id = ? AND user_id = ?",
                (category_id, user_id),
            )
    finally:
        conn.close()
    if cur.rowcount == 0:
        raise KeyError(f"Category not found: {category_id}")
    logger.info("Deleted category %s", category_id)


# -----------------------------------------------------------------------------
# Savings goals
# -----------------------------------------------------------------------------

def _goal_params(goal: SavingsGoal) -> tuple:
    return (
        goal.name,
        str(goal.target_amount),
        str(goal.current_amount),
        goal.icon,
        goal.color,
        goal.deadline.isoformat() if goal.deadline else None,
        int(goal.is_completed),
        goal.updated_at.isoformat(),
    )


def add_savings_goal(
    db_path: str,
    user_id: str,
    name: str,
    target_amount,
    icon: str | None = None,
    color: str | None = None,
    deadline=None,
) -> SavingsGoal:
    name = (name or "").strip()
    if not name:
        raise ValueError("Goal name is required")
    target = to_decimal(target_amount)
    if target <= 0:
        raise ValueError(f"Target amount must be greater than 0: {target_amount}")
    if color and not _COLOR_RX.match(color):
        raise ValueError(f"Color must look like #RRGGBB: {color}")
    now = _now()
    goal = SavingsGoal(
        id=_new_id(),
        user_id=user_id,
        name=name,
        target_amount=target,
        icon=icon or "Target",
        color=color or "#10B981",
        deadline=as_date(deadline) if deadline else None,
        created_at=now,
        updated_at=now,
    )
    conn = _connect(db_path)
    try:
        with conn:
            conn.execute(
                f"INSERT INTO savings_goals ({_GOAL_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (goal.id, user_id, *_goal_params(goal)[:7], now.isoformat(), now.isoformat()),
            )
    finally:
        conn.close()
    logger.info("Created savings goal %s (%s)", goal.name, goal.id)
    return goal


def get_savings_goal(db_path: str, user_id: str, goal_id: str) -> SavingsGoal:
    conn = _connect(db_path)
    try:
        row = conn.execute(
            f"SELECT {_GOAL_COLUMNS} FROM savings_goals WHERE id = ? AND user_id = ?",
            (goal_id, user_id),
        ).fetchone()
    finally:
        conn.close()
    if row is None:
        raise KeyError(f"Savings goal not found: {goal_id}")
    return _row_to_goal(row)


def list_savings_goals(db_path: str, user_id: str) -> List[SavingsGoal]:
    conn = _connect(db_path)
    try:
        rows = conn.execute(
            f"""
            SELECT {_GOAL_COLUMNS} FROM savings_goals
            WHERE user_id = ?
            ORDER BY created_at DESC, rowid DESC
            """,
            (user_id,),
        ).fetchall()
    finally:
        conn.close()
    return [_row_to_goal(r) for r in rows]


def _store_goal(db_path: str, goal: SavingsGoal) -> None:
    conn = _connect(db_path)
    try:
        with conn:
            conn.execute(
                """
                UPDATE savings_goals
                SET name = ?, target_amount = ?, current_amount = ?, icon = ?,
                    color = ?, deadline = ?, is_completed = ?, updated_at = ?
                WHERE id = ? AND user_id = ?
                """,
                (*_goal_params(goal), goal.id, goal.user_id),
            )
    finally:
        conn.close()


def _validate_goal_fields(fields: Dict[str, object]) -> Dict[str, object]:
    clean = dict(fields)
    if "name" in clean:
        name = str(clean["name"] or "").strip()
        if not name:
            raise ValueError("Goal name is required")
        clean["name"] = name
    if "target_amount" in clean:
        target = to_decimal(clean["target_amount"])
        if target <= 0:
            raise ValueError(f"Target amount must be greater than 0: {clean['target_amount']}")
        clean["target_amount"] = target
    if "current_amount" in clean:
        current = to_decimal(clean["current_amount"])
        if current < 0:
            raise ValueError(f"Current amount must be non-negative: {clean['current_amount']}")
        clean["current_amount"] = current
    if "color" in clean and not _COLOR_RX.match(str(clean["color"])):
        raise ValueError(f"Color must look like #RRGGBB: {clean['color']}")
    if "deadline" in clean:
        clean["deadline"] = as_date(clean["deadline"])
    return clean


def update_savings_goal(db_path: str, user_id: str, goal_id: str, **updates) -> SavingsGoal:
    """Change fields of a goal.

    ``is_completed`` follows the amounts: it is recomputed whenever the
    target or the saved amount changes.
    """
    unknown = set(updates) - set(_GOAL_FIELDS)
    if unknown:
        raise ValueError(f"Cannot update goal fields: {', '.join(sorted(unknown))}")
    goal = get_savings_goal(db_path, user_id, goal_id)
    changes = _validate_goal_fields({k: v for k, v in updates.items() if v is not None})
    updated = replace(goal, updated_at=_now(), **changes)
    if "target_amount" in changes or "current_amount" in changes:
        updated = replace(updated, is_completed=updated.current_amount >= updated.target_amount)
    _store_goal(db_path, updated)
    logger.info("Updated savings goal %s", goal_id)
    return updated


def contribute_to_goal(db_path: str, user_id: str, goal_id: str, amount) -> SavingsGoal:
    goal = get_savings_goal(db_path, user_id, goal_id)
    updated = apply_contribution(goal, amount, now=_now())
    _store_goal(db_path, updated)
    if updated.is_completed and not goal.is_completed:
        logger.info("Savings goal %s reached its target", goal_id)
    return updated


def delete_savings_goal(db_path: str, user_id: str, goal_id: str) -> None:
    conn = _connect(db_path)
    try:
        with conn:
            cur = conn.execute(
                "DELETE FROM savings_goals WHERE id = ? AND user_id = ?",
                (goal_id, user_id),
            )
    finally:
        conn.close()
    if cur.rowcount == 0:
        raise KeyError(f"Savings goal not found: {goal_id}")
    logger.info("Deleted savings goal %s", goal_id)


# -----------------------------------------------------------------------------
# Piggy bank
# -----------------------------------------------------------------------------

def _fetch_piggy_bank(conn: sqlite3.Connection, user_id: str) -> PiggyBank:
    row = conn.execute(
        "SELECT id, user_id, balance, created_at, updated_at FROM piggy_bank WHERE user_id = ?",
        (user_id,),
    ).fetchone()
    if row is None:
        raise KeyError(f"No piggy bank for user {user_id}; run init first")
    return PiggyBank(
        id=row[0],
        user_id=row[1],
        balance=to_decimal(row[2]),
        created_at=_parse_ts(row[3]),
        updated_at=_parse_ts(row[4]),
    )


def get_piggy_bank(db_path: str, user_id: str) -> PiggyBank:
    conn = _connect(db_path)
    try:
        return _fetch_piggy_bank(conn, user_id)
    finally:
        conn.close()


def _move_piggy_bank(
    db_path: str, user_id: str, kind: PiggyBankEntryKind, amount, description: str | None
) -> PiggyBank:
    conn = _connect(db_path)
    try:
        # balance update and ledger row commit together or not at all
        with conn:
            bank = _fetch_piggy_bank(conn, user_id)
            new_balance = apply_piggy_bank_entry(bank.balance, kind, amount)
            now = _now().isoformat()
            conn.execute(
                "UPDATE piggy_bank SET balance = ?, updated_at = ? WHERE id = ?",
                (str(new_balance), now, bank.id),
            )
            conn.execute(
                """
                INSERT INTO piggy_bank_transactions (id, user_id, kind, amount, description, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (_new_id(), user_id, kind.value, str(to_decimal(amount)), description or None, now),
            )
    finally:
        conn.close()
    logger.info("Piggy bank %s of %s for %s", kind.value, amount, user_id)
    return replace(bank, balance=new_balance, updated_at=datetime.fromisoformat(now))


def deposit_to_piggy_bank(db_path: str, user_id: str, amount, description: str | None = None) -> PiggyBank:
    return _move_piggy_bank(db_path, user_id, PiggyBankEntryKind.DEPOSIT, amount, description)


def withdraw_from_piggy_bank(db_path: str, user_id: str, amount, description: str | None = None) -> PiggyBank:
    return _move_piggy_bank(db_path, user_id, PiggyBankEntryKind.WITHDRAW, amount, description)


def list_piggy_bank_entries(db_path: str, user_id: str) -> List[PiggyBankEntry]:
    conn = _connect(db_path)
    try:
        rows = conn.execute(
            """
            SELECT id, user_id, kind, amount, description, created_at
            FROM piggy_bank_transactions
            WHERE user_id = ?
            ORDER BY created_at DESC, rowid DESC
            """,
            (user_id,),
        ).fetchall()
    finally:
        conn.close()
    return [
        PiggyBankEntry(
            id=r[0],
            user_id=r[1],
            kind=r[2],
            amount=to_decimal(r[3]),
            description=r[4],
            created_at=_parse_ts(r[5]),
        )
        for r in rows
    ]


# -----------------------------------------------------------------------------
# Profile
# -----------------------------------------------------------------------------

def get_profile(db_path: str, user_id: str) -> Profile:
    conn = _connect(db_path)
    try:
        row = conn.execute(
            "SELECT id, user_id, name, email, currency FROM profiles WHERE user_id = ?",
            (user_id,),
        ).fetchone()
    finally:
        conn.close()
    if row is None:
        raise KeyError(f"No profile for user {user_id}; run init first")
    return Profile(id=row[0], user_id=row[1], name=row[2], email=row[3], currency=row[4])


def update_profile(db_path: str, user_id: str, **updates) -> Profile:
    unknown = set(updates) - set(_PROFILE_FIELDS)
    if unknown:
        raise ValueError(f"Cannot update profile fields: {', '.join(sorted(unknown))}")
    profile = get_profile(db_path, user_id)
    changes = {k: v for k, v in updates.items() if v is not None}
    if "currency" in changes:
        changes["currency"] = str(changes["currency"]).upper()
    if not changes:
        return profile
    assignments = ", ".join(f"{name} = ?" for name in changes)
    conn = _connect(db_path)
    try:
        with conn:
            conn.execute(
                f"UPDATE profiles SET {assignments} WHERE user_id = ?",
                [*changes.values(), user_id],
            )
    finally:
        conn.close()
    logger.info("Updated profile for %s", user_id)
    return replace(profile, **changes)


def clear_all_data(db_path: str, user_id: str) -> None:
    """Remove transactions, goals and piggy bank history; reset the piggy bank.

    Categories and the profile are kept.
    """
    conn = _connect(db_path)
    try:
        with conn:
            conn.execute("DELETE FROM transactions WHERE user_id = ?", (user_id,))
            conn.execute("DELETE FROM savings_goals WHERE user_id = ?", (user_id,))
            conn.execute("DELETE FROM piggy_bank_transactions WHERE user_id = ?", (user_id,))
            conn.execute(
                "UPDATE piggy_bank SET balance = '0', updated_at = ? WHERE user_id = ?",
                (_now().isoformat(), user_id),
            )
    finally:
        conn.close()
    logger.info("Cleared all data for %s", user_id)
