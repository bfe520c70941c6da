# finance_tracker/outputs/csv_output.py

import os
import csv
from decimal import Decimal
from finance_tracker.outputs.base import BaseOutput


class CSVOutput(BaseOutput):
    """
    Writes a report as Report<YYYY-MM>.csv: one block with the monthly
    series followed by one block per category breakdown.
    """
    def __init__(self, config):
        self.config     = config
        self.output_dir = config.get('output_dir', 'data')
        os.makedirs(self.output_dir, exist_ok=True)

    def write(self, report):
        filename = f"Report{report.reference_date.strftime('%Y-%m')}.csv"
        out_path = os.path.join(self.output_dir, filename)

        with open(out_path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(['section', 'label', 'income', 'expense', 'balance'])
            for m in report.series:
                writer.writerow([
                    'monthly',
                    f"{m.label} {m.year}",
                    _money(m.income),
                    _money(m.expense),
                    _money(m.balance),
                ])
            writer.writerow([])
            writer.writerow(['section', 'category', 'total', 'count', 'percentage'])
            for kind, stats in report.breakdowns.items():
                for s in stats:
                    writer.writerow([
                        kind.value,
                        s.name,
                        _money(s.total),
                        s.count,
                        f"{s.percentage:.2f}",
                    ])

        print(f"Written report for {report.reference_date:%Y-%m} to {out_path}")
        return out_path


def _money(value):
    return f"{Decimal(value):.2f}"
