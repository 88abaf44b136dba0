"""Dashboard rendering: ledger controller + full HTML template for the income/expense page."""

import html
import json

from charts import ChartRenderer, build_chart_config
from ledger import KINDS, MONTHS, Ledger, collect_ledger, field_id, format_amount


class DashboardController:
    """Owns the ledger and the chart for one page session."""

    def __init__(self, ledger: Ledger = None, strict: bool = False):
        self.ledger = ledger or Ledger()
        self.renderer = ChartRenderer()
        self.strict = strict

    def collect(self, form) -> Ledger:
        return collect_ledger(form, self.ledger, strict=self.strict)

    def chart_config(self) -> dict:
        return build_chart_config(self.ledger)

    def update(self, form) -> dict:
        """Re-collect every field and return a fresh Chart.js config."""
        self.collect(form)
        return self.chart_config()

    def render_chart(self, form):
        """Re-collect every field and redraw the matplotlib figure for export."""
        self.collect(form)
        return self.renderer.render(self.ledger)


def render_month_inputs(ledger: Ledger) -> str:
    """One income/expense pair per month, calendar order, pre-filled from the ledger."""
    blocks = []
    for index, month in enumerate(MONTHS):
        rows = ""
        for kind in KINDS:
            fid = field_id(kind, index)
            value = format_amount(getattr(ledger, kind)[month])
            rows += (
                f'<div class="input-group">'
                f'<label for="{fid}">{kind.capitalize()}:</label>'
                f'<input type="number" class="num" id="{fid}" name="{fid}" placeholder="0.00" min="0" step="0.01" value="{value}">'
                f'<span class="field-error" id="{fid}-error"></span>'
                f'</div>'
            )
        blocks.append(f'<div class="month-group"><h6>{month}</h6>{rows}</div>')
    return "\n".join(blocks)


def render_dashboard(ledger: Ledger, username: str = "", strict: bool = False) -> str:
    """Build the single-page dashboard: 24 month inputs, live bar chart, export buttons."""
    totals = ledger.totals()
    chart_json = json.dumps(build_chart_config(ledger))
    month_inputs = render_month_inputs(ledger)
    user_html = (
        f'<span class="hint">Signed in as <strong>{html.escape(username)}</strong></span> <a href="/logout">Log out</a>'
        if username else '<a href="/login">Log in</a>'
    )
    mode_hint = "Strict amounts: invalid numbers are rejected" if strict else "Blank or invalid amounts count as 0"
    net_color = "var(--success)" if totals["net"] >= 0 else "var(--danger)"

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Monthly Ledger</title>
<script src="https://cdn.jsdelivr.net/npm/chart.js@4.4.0/dist/chart.umd.min.js"></script>
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;600;700&display=swap" rel="stylesheet">
<style>
:root {{
  --bg-primary: #f5f7fb;
  --bg-card: #ffffff;
  --border-subtle: rgba(15,23,42,0.08);
  --accent-primary: #667eea;
  --text-primary: #0f172a;
  --text-muted: #64748b;
  --success: #16a34a;
  --danger: #dc2626;
}}
* {{ box-sizing: border-box; margin: 0; padding: 0; }}
body {{ font-family: 'Inter', sans-serif; background: var(--bg-primary); color: var(--text-primary); }}
header {{ display: flex; justify-content: space-between; align-items: center; padding: 16px 32px; background: var(--bg-card); border-bottom: 1px solid var(--border-subtle); }}
header h1 {{ font-size: 1.2rem; color: var(--accent-primary); }}
main {{ max-width: 1200px; margin: 24px auto; padding: 0 16px; display: grid; gap: 24px; }}
.card {{ background: var(--bg-card); border: 1px solid var(--border-subtle); border-radius: 12px; padding: 20px; }}
.totals {{ display: flex; gap: 32px; }}
.totals div span {{ display: block; font-size: 0.75rem; color: var(--text-muted); text-transform: uppercase; }}
.totals div strong {{ font-size: 1.3rem; }}
.months {{ display: grid; grid-template-columns: repeat(auto-fill, minmax(220px, 1fr)); gap: 16px; }}
.month-group h6 {{ font-size: 0.9rem; margin-bottom: 8px; }}
.input-group {{ display: flex; flex-wrap: wrap; align-items: center; gap: 8px; margin-bottom: 6px; }}
.input-group label {{ width: 70px; font-size: 0.8rem; color: var(--text-muted); }}
.input-group input {{ flex: 1; padding: 6px 8px; border: 1px solid var(--border-subtle); border-radius: 6px; }}
.field-error {{ width: 100%; color: var(--danger); font-size: 0.75rem; }}
.chart-wrap {{ position: relative; height: 380px; }}
.actions {{ display: flex; gap: 12px; margin-top: 16px; }}
.actions button {{ padding: 8px 16px; border: none; border-radius: 8px; background: var(--accent-primary); color: #fff; font-weight: 600; cursor: pointer; }}
.actions button.secondary {{ background: transparent; color: var(--accent-primary); border: 1px solid var(--accent-primary); }}
.hint {{ color: var(--text-muted); font-size: 0.8rem; }}
</style>
</head>
<body>
<header><h1>Monthly Ledger</h1><div>{user_html}</div></header>
<main>
  <section class="card">
    <div class="totals">
      <div><span>Total income</span><strong id="total-income">${totals["income"]:,.2f}</strong></div>
      <div><span>Total expense</span><strong id="total-expense">${totals["expense"]:,.2f}</strong></div>
      <div><span>Net</span><strong id="total-net" style="color:{net_color}">${totals["net"]:,.2f}</strong></div>
    </div>
  </section>
  <section class="card">
    <div class="chart-wrap"><canvas id="myChart"></canvas></div>
  </section>
  <form id="ledgerForm" class="card" method="post" action="/export/chart.png">
    <p class="hint" style="margin-bottom:12px">{mode_hint}</p>
    <div class="months" id="monthsContainer">
{month_inputs}
    </div>
    <div class="actions">
      <button type="submit" id="downloadBtn">Download chart (PNG)</button>
      <button type="submit" class="secondary" formaction="/export/ledger.xlsx">Export to Excel</button>
    </div>
  </form>
</main>
<script>
var chart = null;
var INITIAL_CHART = {chart_json};

function drawChart(config) {{
  var ctx = document.getElementById("myChart");
  if (!ctx || typeof Chart === "undefined") return;
  if (chart) {{
    chart.destroy();
  }}
  chart = new Chart(ctx.getContext("2d"), config);
}}

function money(v) {{
  return "$" + v.toLocaleString(undefined, {{minimumFractionDigits: 2, maximumFractionDigits: 2}});
}}

function clearFieldErrors() {{
  document.querySelectorAll(".field-error").forEach(function(el) {{ el.textContent = ""; }});
}}

// Only the newest request may draw; older ones are aborted or ignored
var chartRequestSeq = 0;
var chartRequestCtl = null;

function updateChart() {{
  var form = document.getElementById("ledgerForm");
  var seq = ++chartRequestSeq;
  if (chartRequestCtl) chartRequestCtl.abort();
  chartRequestCtl = typeof AbortController !== "undefined" ? new AbortController() : null;
  fetch("/api/chart", {{ method: "POST", body: new FormData(form), signal: chartRequestCtl ? chartRequestCtl.signal : undefined }})
    .then(function(r) {{ return r.json(); }})
    .then(function(d) {{
      if (seq !== chartRequestSeq) return;
      clearFieldErrors();
      if (!d.success) {{
        var el = document.getElementById(d.field + "-error");
        if (el) el.textContent = d.error;
        return;
      }}
      drawChart(d.chart);
      document.getElementById("total-income").textContent = money(d.totals.income);
      document.getElementById("total-expense").textContent = money(d.totals.expense);
      var net = document.getElementById("total-net");
      net.textContent = money(d.totals.net);
      net.style.color = d.totals.net >= 0 ? "var(--success)" : "var(--danger)";
    }})
    .catch(function(err) {{
      if (err && err.name === "AbortError") return;
      if (seq !== chartRequestSeq) return;
      // keep the last good chart; the next input retries
      console.warn("[Chart] update failed:", err);
    }});
}}

window.addEventListener("DOMContentLoaded", function() {{
  document.querySelectorAll("#monthsContainer input").forEach(function(input) {{
    input.addEventListener("input", updateChart);
  }});
  drawChart(INITIAL_CHART);
}});
</script>
</body>
</html>"""
