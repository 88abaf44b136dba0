import pytest

from ledger import (
    MONTHS,
    InvalidAmountError,
    Ledger,
    collect_ledger,
    field_id,
    format_amount,
    parse_amount,
)


def test_months_are_fixed_calendar_order():
    assert len(MONTHS) == 12
    assert MONTHS[0] == "January" and MONTHS[-1] == "December"


def test_new_ledger_is_all_zero():
    income, expense = Ledger().series()
    assert income == [0.0] * 12
    assert expense == [0.0] * 12


def test_ledger_rejects_unknown_month():
    ledger = Ledger()
    with pytest.raises(KeyError):
        ledger.set("income", "Smarch", 10)
    with pytest.raises(KeyError):
        ledger.set("savings", "January", 10)
    with pytest.raises(KeyError):
        Ledger(income={"Jan": 5})


@pytest.mark.parametrize("text,expected", [
    ("1000.50", 1000.5),
    ("  42 ", 42.0),
    ("", 0.0),
    (None, 0.0),
    ("abc", 0.0),
    ("12abc", 12.0),
    (".5", 0.5),
    ("1e3", 1000.0),
    ("-5", 0.0),
    ("nan", 0.0),
    ("1e999", 0.0),
])
def test_parse_amount_coerces(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["abc", "12abc", "-5", "1e999", "1,000"])
def test_parse_amount_strict_rejects(text):
    with pytest.raises(InvalidAmountError) as exc:
        parse_amount(text, strict=True, field="income-0")
    assert exc.value.field == "income-0"


def test_parse_amount_strict_accepts_plain_numbers():
    assert parse_amount("1000.50", strict=True) == 1000.5
    assert parse_amount("", strict=True) == 0.0


def test_collect_january_income_only(blank_form):
    blank_form["income-0"] = "1000.50"
    ledger = collect_ledger(blank_form, Ledger())
    income, expense = ledger.series()
    assert income == [1000.5] + [0.0] * 11
    assert expense == [0.0] * 12


def test_collect_treats_missing_fields_as_zero():
    ledger = collect_ledger({"expense-11": "20"}, Ledger())
    assert ledger.expense["December"] == 20.0
    assert ledger.income["December"] == 0.0


def test_collect_overwrites_previous_values(blank_form):
    ledger = Ledger(income={"March": 300})
    collect_ledger(blank_form, ledger)
    assert ledger.income["March"] == 0.0


def test_collect_is_idempotent(blank_form):
    blank_form.update({"income-2": "5", "expense-2": "3.25", "income-7": "oops"})
    ledger = Ledger()
    first = collect_ledger(blank_form, ledger).series()
    second = collect_ledger(blank_form, ledger).series()
    assert first == second


def test_collect_strict_names_offending_field(blank_form):
    blank_form["expense-4"] = "ten"
    with pytest.raises(InvalidAmountError) as exc:
        collect_ledger(blank_form, Ledger(), strict=True)
    assert exc.value.field == "expense-4"


def test_field_ids():
    assert field_id("income", 0) == "income-0"
    assert field_id("expense", 11) == "expense-11"


def test_totals_and_frame():
    ledger = Ledger(income={"January": 100, "February": 50.5}, expense={"January": 30})
    assert ledger.totals() == {"income": 150.5, "expense": 30.0, "net": 120.5}
    df = ledger.to_frame()
    assert list(df.columns) == ["Month", "Income", "Expense", "Net"]
    assert list(df["Month"]) == MONTHS
    assert df.loc[0, "Net"] == 70.0


@pytest.mark.parametrize("value,expected", [(0, ""), (0.0, ""), (1000.0, "1000"), (1000.5, "1000.5")])
def test_format_amount(value, expected):
    assert format_amount(value) == expected
