"""
Monthly income/expense ledger and form collection.
The ledger lives for one page session; nothing here is persisted.
"""

import math
import re
from typing import Mapping, Optional

import pandas as pd

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

KINDS = ("income", "expense")

# Leading decimal number, the part parseFloat() would accept
_NUMBER_PREFIX = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_PLAIN_NUMBER = re.compile(r"^\+?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


class InvalidAmountError(ValueError):
    """Raised in strict mode for ledger text that is not a non-negative number."""

    def __init__(self, field: str, text: str):
        super().__init__(f"{field}: '{text}' is not a valid amount")
        self.field = field
        self.text = text


class Ledger:
    """Income and expense per month. Keys are fixed to MONTHS."""

    def __init__(self, income: Optional[Mapping] = None, expense: Optional[Mapping] = None):
        self.income = {m: 0.0 for m in MONTHS}
        self.expense = {m: 0.0 for m in MONTHS}
        for month, amount in (income or {}).items():
            self.set("income", month, amount)
        for month, amount in (expense or {}).items():
            self.set("expense", month, amount)

    def set(self, kind: str, month: str, amount: float) -> None:
        if kind not in KINDS:
            raise KeyError(kind)
        if month not in MONTHS:
            raise KeyError(month)
        getattr(self, kind)[month] = float(amount)

    def series(self) -> tuple[list[float], list[float]]:
        """(income, expense) as two 12-item lists in calendar order."""
        return (
            [self.income.get(m, 0.0) for m in MONTHS],
            [self.expense.get(m, 0.0) for m in MONTHS],
        )

    def totals(self) -> dict:
        income, expense = self.series()
        return {
            "income": round(sum(income), 2),
            "expense": round(sum(expense), 2),
            "net": round(sum(income) - sum(expense), 2),
        }

    def to_frame(self) -> pd.DataFrame:
        income, expense = self.series()
        df = pd.DataFrame({"Month": MONTHS, "Income": income, "Expense": expense})
        df["Net"] = df["Income"] - df["Expense"]
        return df


def field_id(kind: str, index: int) -> str:
    return f"{kind}-{index}"


def parse_amount(text, strict: bool = False, field: str = "") -> float:
    """
    Parse one ledger input. Empty is 0.0.
    Coerce mode: anything unparseable, negative or non-finite becomes 0.0.
    Strict mode: raises InvalidAmountError instead.
    """
    if text is None:
        return 0.0
    s = str(text).strip()
    if not s:
        return 0.0

    if strict:
        if not _PLAIN_NUMBER.match(s):
            raise InvalidAmountError(field, s)
        value = float(s)
        if not math.isfinite(value):
            raise InvalidAmountError(field, s)
        return value

    m = _NUMBER_PREFIX.match(s)
    if not m:
        return 0.0
    try:
        value = float(m.group(0))
    except ValueError:
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def collect_ledger(form: Mapping, ledger: Ledger, strict: bool = False) -> Ledger:
    """Read every income-<i>/expense-<i> field into the ledger, overwriting it."""
    for index, month in enumerate(MONTHS):
        for kind in KINDS:
            fid = field_id(kind, index)
            ledger.set(kind, month, parse_amount(form.get(fid), strict=strict, field=fid))
    return ledger


def format_amount(value: float) -> str:
    """Input value for a month field: blank for zero, otherwise the plain number."""
    if not value:
        return ""
    return str(int(value)) if float(value).is_integer() else repr(float(value))
