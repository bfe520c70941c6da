from finance_tracker.database import (
    fetch_transactions,
    list_categories,
    list_piggy_bank_entries,
    list_savings_goals,
    recent_transactions,
)


def test_empty_db_queries(tmp_path):
    db_path = str(tmp_path / "empty.db")

    assert fetch_transactions(db_path, "nobody") == []
    assert recent_transactions(db_path, "nobody") == []
    assert list_categories(db_path, "nobody") == []
    assert list_savings_goals(db_path, "nobody") == []
    assert list_piggy_bank_entries(db_path, "nobody") == []
