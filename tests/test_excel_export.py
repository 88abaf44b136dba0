from datetime import date
from io import BytesIO

from openpyxl import load_workbook

from excel_export import SHEET_NAME, export_filename, ledger_workbook_bytes
from ledger import Ledger


def test_workbook_rows_and_totals():
    ledger = Ledger(income={"January": 1000.5, "December": 200}, expense={"January": 400})
    wb = load_workbook(BytesIO(ledger_workbook_bytes(ledger)))
    ws = wb[SHEET_NAME]
    rows = list(ws.iter_rows(values_only=True))
    assert rows[0] == ("Month", "Income", "Expense", "Net")
    assert rows[1] == ("January", 1000.5, 400, 600.5)
    assert rows[12][0] == "December"
    assert rows[13] == ("Total", 1200.5, 400, 800.5)
    assert ws["A1"].font.bold
    assert ws["A14"].font.bold


def test_export_filename():
    assert export_filename(date(2025, 1, 31)) == "income_expense_2025-01-31.xlsx"
