from datetime import date

import pytest

from charts import (
    CHART_TITLE,
    ChartRenderer,
    build_chart_config,
    export_filename,
    export_png,
    mpl_color,
)
from dashboard import DashboardController
from ledger import MONTHS, Ledger


def test_chart_config_shape():
    ledger = Ledger(income={"January": 1000.5}, expense={"June": 20})
    config = build_chart_config(ledger)
    assert config["type"] == "bar"
    assert config["data"]["labels"] == MONTHS
    income, expense = config["data"]["datasets"]
    assert income["label"] == "Income"
    assert expense["label"] == "Expense"
    assert income["data"] == [1000.5] + [0.0] * 11
    assert expense["data"][5] == 20.0
    assert len(income["data"]) == len(expense["data"]) == 12
    assert income["backgroundColor"] == "rgba(102, 126, 234, 0.8)"
    assert expense["borderColor"] == "rgba(220, 38, 38, 1)"
    assert config["options"]["plugins"]["title"]["text"] == CHART_TITLE
    assert config["options"]["scales"]["y"]["beginAtZero"] is True


def test_mpl_color_matches_series_style():
    assert mpl_color("Expense", 0.5) == (220 / 255, 38 / 255, 38 / 255, 0.5)
    assert mpl_color("Income", 1.0)[3] == 1.0
    with pytest.raises(KeyError):
        mpl_color("Savings", 1.0)


def test_render_replaces_previous_chart():
    renderer = ChartRenderer()
    first = renderer.render(Ledger(income={"January": 10}))
    assert first.axes
    second = renderer.render(Ledger(income={"January": 20}))
    assert second is not first
    assert renderer.figure is second
    # previous figure was destroyed
    assert first.axes == []


def test_render_draws_two_series_of_twelve_bars():
    renderer = ChartRenderer()
    fig = renderer.render(Ledger(income={"March": 5}, expense={"March": 2}))
    ax = fig.axes[0]
    assert len(ax.patches) == 24
    assert [t.get_text() for t in ax.get_legend().get_texts()] == ["Income", "Expense"]
    assert ax.get_ylim()[0] == 0


def test_export_png_signature():
    renderer = ChartRenderer(width=4, height=3, dpi=50)
    renderer.render(Ledger())
    png = export_png(renderer)
    assert png[:8] == b"\x89PNG\r\n\x1a\n"


def test_export_without_chart_raises():
    with pytest.raises(RuntimeError):
        export_png(ChartRenderer())


def test_export_filename_uses_date():
    assert export_filename(date(2024, 3, 9)) == "income_expense_chart_2024-03-09.png"


def test_controller_update_returns_config_without_drawing(blank_form):
    controller = DashboardController()
    blank_form["income-0"] = "1000.50"
    config = controller.update(blank_form)
    assert config["data"]["datasets"][0]["data"][0] == 1000.5
    assert controller.renderer.figure is None


def test_controller_render_chart_replaces_figure(blank_form):
    controller = DashboardController()
    blank_form["expense-2"] = "40"
    first = controller.render_chart(blank_form)
    second = controller.render_chart(blank_form)
    assert second is not first
    assert controller.renderer.figure is second
    assert first.axes == []
    assert controller.ledger.expense["March"] == 40.0
