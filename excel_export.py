"""Write the ledger to an .xlsx workbook (Ledger sheet with a totals row)."""

import io
from datetime import date
from typing import Optional

import pandas as pd
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from ledger import Ledger

SHEET_NAME = "Ledger"
MONEY_FORMAT = '"$"#,##0.00'


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"income_expense_{today.isoformat()}.xlsx"


def ledger_workbook_bytes(ledger: Ledger) -> bytes:
    """Ledger as an in-memory .xlsx: one row per month, then Total."""
    df = ledger.to_frame()
    totals = ledger.totals()
    df.loc[len(df)] = ["Total", totals["income"], totals["expense"], totals["net"]]

    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
        ws = writer.sheets[SHEET_NAME]

        header_fill = PatternFill(start_color="667EEA", end_color="667EEA", fill_type="solid")
        for cell in ws[1]:
            cell.font = Font(bold=True, color="FFFFFF")
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center")

        for row in ws.iter_rows(min_row=2, min_col=2, max_col=4):
            for cell in row:
                cell.number_format = MONEY_FORMAT

        total_row = ws.max_row
        top = Border(top=Side(style="thin"))
        for cell in ws[total_row]:
            cell.font = Font(bold=True)
            cell.border = top

        for col_idx, column in enumerate(df.columns, start=1):
            width = max(len(str(column)), *(len(f"{v:,.2f}" if isinstance(v, float) else str(v)) for v in df[column]))
            ws.column_dimensions[get_column_letter(col_idx)].width = width + 4
    return buf.getvalue()
