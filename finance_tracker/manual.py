# finance_tracker/manual.py
import yaml

from finance_tracker.core.models import TransactionInput
from finance_tracker.utils import as_date


def load_manual_transactions(path):
    """Load manually entered transactions from a YAML file."""
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or []
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, list):
        raise ValueError(f"Expected a list of transactions in {path}")

    txs = []
    for entry in data:
        if not isinstance(entry, dict):
            raise ValueError(f"Expected a mapping for each manual entry, got: {entry!r}")
        date_value = entry.get('date')
        if not date_value:
            raise ValueError(f"Missing 'date' in manual entry: {entry}")
        kind = entry.get('kind') or entry.get('type')
        if kind not in ('income', 'expense'):
            raise ValueError(f"'kind' must be income or expense in manual entry: {entry}")
        txs.append(
            TransactionInput(
                kind=kind,
                amount=str(entry.get('amount', 0)),
                date=as_date(date_value),
                category=entry.get('category'),
                description=entry.get('description'),
            )
        )
    return txs
