"""
Income vs expense bar chart: Chart.js config for the browser, matplotlib
figure for the PNG download. Each build starts from scratch.
"""

import io
from datetime import date
from typing import Optional

from matplotlib.figure import Figure

from ledger import MONTHS, Ledger

CHART_TITLE = "Monthly Income vs Expense"
Y_AXIS_TITLE = "Amount ($)"
X_AXIS_TITLE = "Month"

SERIES_STYLE = {
    "Income": {"rgb": (102, 126, 234)},
    "Expense": {"rgb": (220, 38, 38)},
}


def _rgba(rgb: tuple, alpha: float) -> str:
    r, g, b = rgb
    return f"rgba({r}, {g}, {b}, {alpha:g})"


def mpl_color(label: str, alpha: float) -> tuple:
    """Series colour as a matplotlib RGBA tuple (0-1 floats)."""
    r, g, b = SERIES_STYLE[label]["rgb"]
    return (r / 255, g / 255, b / 255, alpha)


def _dataset(label: str, data: list[float]) -> dict:
    rgb = SERIES_STYLE[label]["rgb"]
    return {
        "label": label,
        "data": data,
        "backgroundColor": _rgba(rgb, 0.8),
        "borderColor": _rgba(rgb, 1),
        "borderWidth": 2,
        "borderRadius": 8,
        "hoverBackgroundColor": _rgba(rgb, 1),
    }


def build_chart_config(ledger: Ledger) -> dict:
    """Chart.js bar chart config with Income and Expense series in calendar order."""
    income, expense = ledger.series()
    return {
        "type": "bar",
        "data": {
            "labels": list(MONTHS),
            "datasets": [_dataset("Income", income), _dataset("Expense", expense)],
        },
        "options": {
            "responsive": True,
            "maintainAspectRatio": False,
            "plugins": {
                "legend": {
                    "display": True,
                    "position": "top",
                    "labels": {"font": {"size": 14, "weight": "bold"}, "padding": 15, "usePointStyle": True},
                },
                "title": {
                    "display": True,
                    "text": CHART_TITLE,
                    "font": {"size": 16, "weight": "bold"},
                    "padding": 20,
                },
            },
            "scales": {
                "y": {"beginAtZero": True, "title": {"display": True, "text": Y_AXIS_TITLE}},
                "x": {"title": {"display": True, "text": X_AXIS_TITLE}},
            },
        },
    }


class ChartRenderer:
    """Holds the single live chart figure. render() always starts over."""

    def __init__(self, width: float = 12, height: float = 5, dpi: int = 100):
        self.size = (width, height)
        self.dpi = dpi
        self.figure: Optional[Figure] = None

    def destroy(self) -> None:
        if self.figure is not None:
            self.figure.clear()
            self.figure = None

    def render(self, ledger: Ledger) -> Figure:
        self.destroy()
        config = build_chart_config(ledger)
        fig = Figure(figsize=self.size, dpi=self.dpi)
        ax = fig.add_subplot(111)

        datasets = config["data"]["datasets"]
        width = 0.8 / len(datasets)
        positions = range(len(MONTHS))
        for i, ds in enumerate(datasets):
            offset = (i - (len(datasets) - 1) / 2) * width
            ax.bar(
                [p + offset for p in positions],
                ds["data"],
                width=width,
                label=ds["label"],
                color=mpl_color(ds["label"], 0.8),
                edgecolor=mpl_color(ds["label"], 1.0),
                linewidth=ds["borderWidth"] / 2,
            )

        ax.set_title(CHART_TITLE, fontsize=16, fontweight="bold", pad=20)
        ax.set_xlabel(X_AXIS_TITLE)
        ax.set_ylabel(Y_AXIS_TITLE)
        ax.set_xticks(list(positions))
        ax.set_xticklabels([m[:3] for m in MONTHS])
        peak = max((max(ds["data"]) for ds in datasets), default=0)
        ax.set_ylim(0, max(peak, 1) * 1.15)
        ax.legend(loc="upper center", bbox_to_anchor=(0.5, 1.0), ncol=len(datasets), frameon=False)
        ax.grid(axis="y", alpha=0.3)
        ax.set_axisbelow(True)
        fig.tight_layout()

        self.figure = fig
        return fig


def export_png(renderer: ChartRenderer) -> bytes:
    """Current chart as PNG bytes."""
    if renderer.figure is None:
        raise RuntimeError("No chart has been rendered")
    buf = io.BytesIO()
    renderer.figure.savefig(buf, format="png")
    return buf.getvalue()


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"income_expense_chart_{today.isoformat()}.png"
