"""Test configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from ledger import MONTHS
from server import create_app


def _settings(**overrides):
    settings = {
        "secret_key": "test-secret",
        "users_file": None,
        "strict_amounts": False,
        "require_login": False,
    }
    settings.update(overrides)
    return settings


@pytest.fixture
def make_app():
    """Factory so a test can flip settings (strict amounts, login gate)."""
    def _make(**overrides):
        app = create_app(_settings(**overrides))
        app.config["TESTING"] = True
        return app
    return _make


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def blank_form():
    """All 24 ledger fields, empty."""
    form = {}
    for i in range(len(MONTHS)):
        form[f"income-{i}"] = ""
        form[f"expense-{i}"] = ""
    return form
