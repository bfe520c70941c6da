# finance_tracker/outputs/excel_output.py

"""Excel output module backed by XlsxWriter.

The workbook has a ``Summary`` sheet with the reference month's totals and
the all-time balance, a ``Monthly`` sheet with the monthly series plus a
column chart of income against expense, and a ``Categories`` sheet with the
expense and income breakdowns side by side.
"""

from __future__ import annotations

import os
import xlsxwriter

from finance_tracker.core.models import TransactionKind
from finance_tracker.outputs.base import BaseOutput


class ExcelOutput(BaseOutput):
    """Generate a local Excel workbook for one report."""

    SUMMARY = "Summary"
    MONTHLY = "Monthly"
    CATEGORIES = "Categories"

    def __init__(self, config: dict):
        self.config = config
        self.output_dir = config.get("output_dir", "data")
        os.makedirs(self.output_dir, exist_ok=True)

    def write(self, report):
        out_path = os.path.join(
            self.output_dir, f"Report{report.reference_date.strftime('%Y-%m')}.xlsx"
        )
        workbook = xlsxwriter.Workbook(out_path)
        amount_fmt = workbook.add_format({"num_format": "#,##0.00"})
        pct_fmt = workbook.add_format({"num_format": "0.0"})
        bold = workbook.add_format({"bold": True})

        summary_ws = workbook.add_worksheet(self.SUMMARY)
        summary_ws.write_row(0, 0, ["Month", report.reference_date.strftime("%B %Y")], bold)
        for row_idx, (label, value) in enumerate(
            (
                ("Income", report.month.income),
                ("Expense", report.month.expense),
                ("Balance", report.month.balance),
                ("Total balance", report.balance),
            ),
            start=1,
        ):
            summary_ws.write(row_idx, 0, label)
            summary_ws.write_number(row_idx, 1, float(value), amount_fmt)
        summary_ws.set_column(0, 0, 16)
        summary_ws.set_column(1, 1, 14)

        tables = self._build_tables(report)

        monthly_ws = workbook.add_worksheet(self.MONTHLY)
        monthly_ws.freeze_panes(1, 0)
        monthly_rows = tables["monthly"]
        monthly_ws.write_row(0, 0, monthly_rows[0], bold)
        for idx, row in enumerate(monthly_rows[1:], start=1):
            monthly_ws.write(idx, 0, row[0])
            for col, value in enumerate(row[1:], start=1):
                monthly_ws.write_number(idx, col, value, amount_fmt)
        last = len(monthly_rows) - 1
        if last >= 1:
            chart = workbook.add_chart({"type": "column"})
            for col, name in ((1, "Income"), (2, "Expense")):
                chart.add_series({
                    "name": name,
                    "categories": [self.MONTHLY, 1, 0, last, 0],
                    "values": [self.MONTHLY, 1, col, last, col],
                })
            chart.set_title({"name": "Income vs expense"})
            monthly_ws.insert_chart("F2", chart)

        cat_ws = workbook.add_worksheet(self.CATEGORIES)
        cat_ws.freeze_panes(1, 0)
        for offset, kind in ((0, TransactionKind.EXPENSE), (6, TransactionKind.INCOME)):
            rows = tables[kind.value]
            cat_ws.write_row(0, offset, rows[0], bold)
            for idx, row in enumerate(rows[1:], start=1):
                cat_ws.write(idx, offset, row[0])
                cat_ws.write_number(idx, offset + 1, row[1], amount_fmt)
                cat_ws.write_number(idx, offset + 2, row[2])
                cat_ws.write_number(idx, offset + 3, row[3], pct_fmt)

        workbook.close()
        print(f"Excel report saved to {out_path}")
        return out_path

    def _build_tables(self, report):
        """Return plain row tables for the Monthly and Categories sheets."""
        tables = {
            "monthly": [["Month", "Income", "Expense", "Balance"]]
            + [
                [f"{m.label} {m.year}", float(m.income), float(m.expense), float(m.balance)]
                for m in report.series
            ]
        }
        for kind in TransactionKind:
            header = [f"{kind.value.title()} category", "Total", "Count", "%"]
            tables[kind.value] = [header] + [
                [s.name, float(s.total), s.count, round(s.percentage, 1)]
                for s in report.breakdowns.get(kind, [])
            ]
        return tables
