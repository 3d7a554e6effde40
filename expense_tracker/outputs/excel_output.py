# expense_tracker/outputs/excel_output.py

"""Spreadsheet reports backed by pandas and XlsxWriter.

A report is a single worksheet with one row per transaction. Columns come
from an ordered mapping of header to extractor, so income and expense
reports share the same writer. Rows are written in the order given; callers
sort beforehand.
"""

from __future__ import annotations

import io
from typing import Callable, Dict, Iterable, Mapping

import pandas as pd

from expense_tracker.core.models import EXPENSE, INCOME, Transaction, TransactionKind
from expense_tracker.utils import format_date

XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

ColumnMapping = Mapping[str, Callable[[Transaction], object]]

INCOME_COLUMNS: Dict[str, Callable[[Transaction], object]] = {
    "Source": lambda tx: tx.label,
    "Amount": lambda tx: tx.amount,
    "Date": lambda tx: format_date(tx.date),
}

EXPENSE_COLUMNS: Dict[str, Callable[[Transaction], object]] = {
    "Category": lambda tx: tx.label,
    "Amount": lambda tx: tx.amount,
    "Date": lambda tx: format_date(tx.date),
}

_DEFAULT_COLUMNS = {INCOME.name: INCOME_COLUMNS, EXPENSE.name: EXPENSE_COLUMNS}


def build_rows(transactions: Iterable[Transaction], columns: ColumnMapping) -> list:
    return [[extract(tx) for extract in columns.values()] for tx in transactions]


def export_to_spreadsheet(
    transactions: Iterable[Transaction],
    columns: ColumnMapping,
    sheet_name: str = "Sheet1",
) -> bytes:
    """Return an ``.xlsx`` workbook holding one row per transaction."""
    headers = list(columns)
    frame = pd.DataFrame(build_rows(transactions, columns), columns=headers)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="xlsxwriter") as writer:
        frame.to_excel(writer, sheet_name=sheet_name, index=False)
        worksheet = writer.sheets[sheet_name]
        worksheet.freeze_panes(1, 0)
        amount_fmt = writer.book.add_format({"num_format": "#,##0.00"})
        for idx, header in enumerate(headers):
            if header == "Amount":
                worksheet.set_column(idx, idx, 12, amount_fmt)
            else:
                worksheet.set_column(idx, idx, 20)
    return buffer.getvalue()


def export_report(transactions: Iterable[Transaction], kind: TransactionKind) -> bytes:
    """Export with the default columns and sheet name for ``kind``."""
    return export_to_spreadsheet(transactions, _DEFAULT_COLUMNS[kind.name], kind.sheet_name)
