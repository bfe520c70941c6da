# finance_tracker/loaders/csv_loader.py
import re
import pandas as pd
from finance_tracker.loaders.base import BaseLoader
from finance_tracker.core.models import TransactionInput, TransactionKind

_CLEAN_AMOUNT = re.compile(r"[^\d\-\.]")


class CSVLoader(BaseLoader):
    """
    Read a bank-style CSV export with date, description and amount columns.
    Negative amounts are expenses, positive amounts income. An optional
    category column is passed through untouched.
    """

    def load(self, file_path):
        df = pd.read_csv(file_path, dtype=str, keep_default_na=False)

        cols = {c.strip().lower(): c for c in df.columns}
        def find(frag):
            if frag in cols:
                return cols[frag]
            return next((orig for low, orig in cols.items() if frag in low), None)

        date_col = find('date')
        desc_col = find('description')
        amt_col = find('amount')
        cat_col = find('category')

        for name, col in (('date', date_col), ('amount', amt_col)):
            if col is None:
                raise RuntimeError(f"Missing required column '{name}' in {file_path}")

        for _, row in df.iterrows():
            amt_raw = str(row[amt_col])
            cleaned = _CLEAN_AMOUNT.sub("", amt_raw)
            # blank amounts are separator or balance rows, not transactions
            if not cleaned or cleaned == '-':
                continue
            try:
                amount = float(cleaned)
            except ValueError:
                raise ValueError(f"Could not parse amount '{amt_raw}' in {file_path}")

            d = pd.to_datetime(row[date_col]).date()
            desc = str(row[desc_col]).strip() if desc_col else ''
            category = str(row[cat_col]).strip() if cat_col else ''

            yield TransactionInput(
                kind=TransactionKind.EXPENSE if amount < 0 else TransactionKind.INCOME,
                amount=abs(amount),
                date=d,
                category=category or None,
                description=desc or None,
            )
