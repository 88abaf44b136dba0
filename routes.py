"""Flask route handlers for the Monthly Ledger app (Blueprint)."""

import html
from datetime import date
from io import BytesIO

from flask import Blueprint, request, redirect, jsonify, send_file, make_response

from charts import export_png, export_filename as chart_filename
from dashboard import DashboardController, render_dashboard
from excel_export import ledger_workbook_bytes, export_filename as workbook_filename
from ledger import InvalidAmountError
from login import (
    LoginError,
    authenticate,
    check_authentication,
    remembered_login,
    logout as clear_session_marker,
    StaticCredentialVerifier,
)
from storage import USERNAME_KEY, session_storage

bp = Blueprint("main", __name__)

# Module-level references, set by init_routes()
VERIFIER = StaticCredentialVerifier()
STRICT_AMOUNTS = False
REQUIRE_LOGIN = False


def init_routes(config):
    """Inject dependencies from create_app(). Call before registering blueprint."""
    global VERIFIER, STRICT_AMOUNTS, REQUIRE_LOGIN
    VERIFIER = config.get("verifier") or StaticCredentialVerifier()
    STRICT_AMOUNTS = config.get("strict_amounts", False)
    REQUIRE_LOGIN = config.get("require_login", False)


# Optional gate: dashboard and exports need a session marker
@bp.before_request
def check_auth():
    if not REQUIRE_LOGIN:
        return
    if request.path in ("/login", "/logout"):
        return
    if check_authentication(session_storage()) is None:
        if request.path.startswith("/api/"):
            return jsonify({"success": False, "error": "Not logged in"}), 401
        return redirect("/login")


@bp.route("/login", methods=["GET", "POST"])
def login():
    storage = session_storage()
    # Already signed in (including a pending redirect from a previous submit)
    target = check_authentication(storage)
    if target:
        return redirect(target)

    if request.method == "GET":
        prefill = remembered_login(storage)
        return render_login_page(username=prefill["username"], remember_me=prefill["remember_me"])

    username = request.form.get("username", "")
    password = request.form.get("password", "")
    remember_me = request.form.get("rememberMe", "") not in ("", "0", "false", "off")
    try:
        pending = authenticate(username, password, remember_me, storage, VERIFIER)
    except LoginError as e:
        errors = {e.field: e.message} if e.field else {}
        return render_login_page(
            username=username.strip(),
            remember_me=remember_me,
            field_errors=errors,
            error="" if e.field else e.message,
        )

    print(f"[Login] {pending['username']} signed in")
    delay_s = pending["delay_ms"] / 1000
    resp = make_response(render_login_page(
        username=pending["username"],
        remember_me=remember_me,
        success=pending["message"],
        redirect_to=pending["target"],
        redirect_delay=delay_s,
    ))
    resp.headers["Refresh"] = f"{delay_s:g}; url={pending['target']}"
    return resp


@bp.route("/logout")
def logout():
    clear_session_marker(session_storage())
    return redirect("/login")


def render_login_page(username="", remember_me=False, field_errors=None, error="",
                      success="", redirect_to="", redirect_delay=0):
    field_errors = field_errors or {}

    def field_error(name):
        msg = field_errors.get(name)
        return f'<p class="field-error" id="{name}Error">{html.escape(msg)}</p>' if msg else ""

    error_html = f'<p class="auth-error" id="errorMessage">&#10007; {html.escape(error)}</p>' if error else ""
    success_html = f'<p class="auth-success" id="successMessage">&#10003; {html.escape(success)}</p>' if success else ""
    meta_refresh = f'<meta http-equiv="refresh" content="{redirect_delay:g};url={redirect_to}">' if redirect_to else ""
    disabled = " disabled" if success else ""
    checked = " checked" if remember_me else ""
    return f"""<!DOCTYPE html><html lang="en"><head><meta charset="UTF-8"><meta name="viewport" content="width=device-width,initial-scale=1.0"><title>Sign in - Monthly Ledger</title>{meta_refresh}
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;600;700&display=swap" rel="stylesheet">
<style>:root{{--bg-primary:#f5f7fb;--bg-card:#ffffff;--border-subtle:rgba(15,23,42,0.08);--accent-primary:#667eea;--accent-glow:rgba(102,126,234,0.2);--text-primary:#0f172a;--text-muted:#64748b;--danger:#dc2626;--success:#16a34a;}}
*{{box-sizing:border-box;margin:0;padding:0;}} body{{font-family:'Inter',sans-serif;background:var(--bg-primary);color:var(--text-primary);}}
.auth-screen{{display:flex;align-items:center;justify-content:center;min-height:100vh;}}
.auth-box{{background:var(--bg-card);border:1px solid var(--border-subtle);border-radius:16px;padding:40px;max-width:380px;width:90%;}}
.auth-box h1{{font-size:1.4rem;margin-bottom:8px;color:var(--accent-primary);text-align:center;}}
.auth-box label{{display:block;font-size:0.8rem;color:var(--text-muted);margin-top:12px;}}
.auth-box input[type=text],.auth-box input[type=password]{{margin-top:4px;font-size:1rem;padding:10px;border:1px solid var(--border-subtle);border-radius:8px;width:100%;}}
.auth-box input:focus{{outline:none;border-color:var(--accent-primary);box-shadow:0 0 0 3px var(--accent-glow);}}
.auth-box .remember{{display:flex;align-items:center;gap:8px;margin:16px 0;}}
.auth-box button{{width:100%;padding:12px;background:var(--accent-primary);color:#fff;border:none;border-radius:8px;font-weight:600;font-size:1rem;cursor:pointer;}}
.auth-box button:disabled{{opacity:0.6;cursor:default;}}
.field-error,.auth-error{{color:var(--danger);font-size:0.8rem;margin-top:4px;}}
.auth-success{{color:var(--success);font-size:0.9rem;margin-top:12px;text-align:center;}}
</style></head><body><div class="auth-screen"><div class="auth-box">
<h1>Monthly Ledger</h1>
<form id="loginForm" method="post" action="/login"><fieldset style="border:none"{disabled}>
<label for="username">Username</label><input type="text" id="username" name="username" value="{html.escape(username)}" autofocus>{field_error("username")}
<label for="password">Password</label><input type="password" id="password" name="password">{field_error("password")}
<div class="remember"><input type="checkbox" id="rememberMe" name="rememberMe" value="1"{checked}><label for="rememberMe" style="margin:0">Remember me</label></div>
<button type="submit">Sign in</button></fieldset></form>{error_html}{success_html}
</div></div></body></html>"""


@bp.route("/")
def index():
    username = session_storage().get_item(USERNAME_KEY) or ""
    controller = DashboardController(strict=STRICT_AMOUNTS)
    return render_dashboard(controller.ledger, username=username, strict=STRICT_AMOUNTS)


def _controller_from_form():
    """Fresh controller with the posted ledger collected and the PNG figure drawn."""
    controller = DashboardController(strict=STRICT_AMOUNTS)
    controller.render_chart(request.form)
    return controller


@bp.route("/api/chart", methods=["POST"])
def api_chart():
    """Re-collect the whole ledger from the posted fields and return the new chart."""
    controller = DashboardController(strict=STRICT_AMOUNTS)
    try:
        config = controller.update(request.form)
    except InvalidAmountError as e:
        return jsonify({"success": False, "error": str(e), "field": e.field}), 400
    income, expense = controller.ledger.series()
    return jsonify({
        "success": True,
        "chart": config,
        "income": income,
        "expense": expense,
        "totals": controller.ledger.totals(),
    })


@bp.route("/export/chart.png", methods=["POST"])
def export_chart():
    """Download the current chart as a PNG named with today's date."""
    try:
        controller = _controller_from_form()
    except InvalidAmountError as e:
        return str(e), 400
    png = export_png(controller.renderer)
    return send_file(
        BytesIO(png),
        mimetype="image/png",
        as_attachment=True,
        download_name=chart_filename(date.today()),
    )


@bp.route("/export/ledger.xlsx", methods=["POST"])
def export_ledger():
    """Download the posted ledger as an Excel workbook."""
    controller = DashboardController(strict=STRICT_AMOUNTS)
    try:
        controller.collect(request.form)
    except InvalidAmountError as e:
        return str(e), 400
    return send_file(
        BytesIO(ledger_workbook_bytes(controller.ledger)),
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        as_attachment=True,
        download_name=workbook_filename(date.today()),
    )
