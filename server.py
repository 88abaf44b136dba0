"""
Local server for the Monthly Ledger app.
Run: python server.py
Then open http://localhost:5000/login to sign in, or http://localhost:5000 for the ledger.
Settings come from the environment (a .env next to this file is loaded first).
"""

import os
import sys
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

BASE = Path(__file__).resolve().parent
sys.path.insert(0, str(BASE))

load_dotenv(BASE / ".env")


def _flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def load_settings() -> dict:
    """Read app settings from environment variables."""
    users_file = os.environ.get("LEDGER_USERS_FILE", "")
    return {
        "secret_key": os.environ.get("FLASK_SECRET", "monthly-ledger-default-key-change-me"),
        "users_file": Path(users_file) if users_file else None,
        "strict_amounts": _flag("LEDGER_STRICT_AMOUNTS"),
        "require_login": _flag("LEDGER_REQUIRE_LOGIN"),
        "host": os.environ.get("HOST", "0.0.0.0"),
        "port": int(os.environ.get("PORT", 5000)),
    }


def build_verifier(settings: dict):
    """Static table from LEDGER_USERS_FILE, or the demo table when none is configured."""
    from login import StaticCredentialVerifier, load_users

    users_file = settings.get("users_file")
    if users_file:
        users = load_users(users_file)
        if users:
            return StaticCredentialVerifier(users)
        raise RuntimeError(f"LEDGER_USERS_FILE is set but no users could be read from {users_file}")
    return StaticCredentialVerifier()


def create_app(settings: dict = None):
    from flask import Flask, session
    from routes import bp, init_routes

    settings = settings or load_settings()
    app = Flask(__name__)
    app.secret_key = settings["secret_key"]
    # Session marker should outlive the browser window
    app.permanent_session_lifetime = timedelta(days=365)

    @app.before_request
    def make_session_permanent():
        session.permanent = True

    init_routes({
        "verifier": settings.get("verifier") or build_verifier(settings),
        "strict_amounts": settings.get("strict_amounts", False),
        "require_login": settings.get("require_login", False),
    })
    app.register_blueprint(bp)
    return app


def main():
    from login import DEMO_USERS

    settings = load_settings()
    try:
        app = create_app(settings)
    except RuntimeError as e:
        print(f"[Config] {e}")
        sys.exit(1)

    host, port = settings["host"], settings["port"]
    print(f"Monthly Ledger: http://{host}:{port}")
    if not settings["users_file"]:
        # Demo credentials hint (remove in production)
        print("Demo credentials:")
        for username, password in DEMO_USERS.items():
            print(f"  Username: {username} | Password: {password}")
    if settings["strict_amounts"]:
        print("Strict amounts: invalid ledger input is rejected instead of counted as 0")
    if settings["require_login"]:
        print("Login required for the dashboard")
    print("Ctrl+C to stop.")
    app.run(host=host, port=port, debug=False)


if __name__ == "__main__":
    main()
