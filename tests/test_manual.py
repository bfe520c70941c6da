from datetime import date
from decimal import Decimal

import pytest

from finance_tracker.manual import load_manual_transactions


def test_load_manual_transactions(tmp_path):
    path = tmp_path / "manual.yaml"
    path.write_text(
        """\
- date: 2024-05-04
  kind: expense
  description: Farmers Market
  category: Food
  amount: 10.25
- date: 2024-05-05
  type: income
  amount: 100
"""
    )
    txs = load_manual_transactions(path)
    assert [t.date for t in txs] == [date(2024, 5, 4), date(2024, 5, 5)]
    assert txs[0].amount == Decimal("10.25")
    assert txs[0].category == "Food"
    assert txs[1].kind.value == "income"
    assert txs[1].category is None


def test_load_manual_transactions_requires_date_and_kind(tmp_path):
    path = tmp_path / "manual.yaml"
    path.write_text("- kind: expense\n  amount: 1\n")
    with pytest.raises(ValueError, match="date"):
        load_manual_transactions(path)

    path.write_text("- date: 2024-01-01\n  kind: transfer\n  amount: 1\n")
    with pytest.raises(ValueError, match="kind"):
        load_manual_transactions(path)


def test_load_manual_transactions_empty_file(tmp_path):
    path = tmp_path / "manual.yaml"
    path.write_text("")
    assert load_manual_transactions(path) == []


def test_load_manual_transactions_rejects_malformed_yaml(tmp_path):
    path = tmp_path / "manual.yaml"
    path.write_text("- date: [2024-03-01\n")
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_manual_transactions(path)


def test_load_manual_transactions_rejects_non_mapping_entries(tmp_path):
    path = tmp_path / "manual.yaml"
    path.write_text('- "2024-03-01 10"\n')
    with pytest.raises(ValueError, match="mapping"):
        load_manual_transactions(path)


@pytest.mark.parametrize("amount", ["abc", ".inf", ".nan"])
def test_load_manual_transactions_rejects_bad_amounts(tmp_path, amount):
    path = tmp_path / "manual.yaml"
    path.write_text(f"- date: 2024-03-01\n  kind: expense\n  amount: {amount}\n")
    with pytest.raises(ValueError):
        load_manual_transactions(path)
