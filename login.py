"""
Login flow: field validation, credential verification, session marker.

  validate_login()      length checks on the trimmed fields
  authenticate()        full submit: validate, verify, write the session marker
  check_authentication() startup short-circuit when a marker already exists

Credentials go through a verifier object so the static demo table can be
swapped for a real backend without touching the form handling.
"""

import base64
import json
import time
from pathlib import Path
from typing import Optional

from storage import AUTH_TOKEN_KEY, USERNAME_KEY, REMEMBERED_USERNAME_KEY

MAIN_PAGE = "/"
REDIRECT_DELAY_MS = 1500
MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6

USERNAME_TOO_SHORT = "Username must be at least 3 characters"
PASSWORD_TOO_SHORT = "Password must be at least 6 characters"
INVALID_CREDENTIALS = "Invalid username or password"
LOGIN_SUCCESSFUL = "Login successful! Redirecting..."

# Demo credentials (replace with a real verifier in production)
DEMO_USERS = {
    "admin": "password123",
    "user": "user1234",
    "demo": "demo123",
}


class LoginError(Exception):
    """Base for login failures. `field` is the form field the message belongs next to."""

    code = "login_failed"

    def __init__(self, message: str, field: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field
        if code:
            self.code = code


class ValidationError(LoginError):
    code = "validation"


class AuthenticationError(LoginError):
    code = "invalid_credentials"

    def __init__(self):
        super().__init__(INVALID_CREDENTIALS)


class CredentialVerifier:
    """Decides whether a username/password pair may sign in."""

    def verify(self, username: str, password: str) -> bool:
        raise NotImplementedError


class StaticCredentialVerifier(CredentialVerifier):
    """Exact, case-sensitive match against a fixed username -> password table."""

    def __init__(self, users: Optional[dict] = None):
        self.users = dict(DEMO_USERS if users is None else users)

    def verify(self, username: str, password: str) -> bool:
        stored = self.users.get(username)
        return stored is not None and stored == password


def load_users(path: Path) -> dict:
    """Read a {username: password} table from JSON. Returns {} if unreadable."""
    path = Path(path)
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError):
        return {}
    if not isinstance(data, dict):
        return {}
    # Entries without a string password are skipped
    return {str(k): v for k, v in data.items() if isinstance(v, str)}


def generate_token(username: str, now_ms: Optional[int] = None) -> str:
    """Opaque session token: base64("<username>:<epoch ms>"). Not signed."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    raw = f"{username}:{now_ms}".encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def validate_login(username: str, password: str) -> tuple[str, str]:
    """Trim both fields and enforce minimum lengths, username first."""
    username = (username or "").strip()
    password = (password or "").strip()
    if len(username) < MIN_USERNAME_LENGTH:
        raise ValidationError(USERNAME_TOO_SHORT, field="username", code="too_short_username")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(PASSWORD_TOO_SHORT, field="password", code="too_short_password")
    return username, password


def authenticate(username, password, remember_me, storage, verifier: CredentialVerifier) -> dict:
    """
    Handle one login submit. Raises ValidationError or AuthenticationError;
    on success writes the session marker and returns the pending redirect
    {"target", "delay_ms", "message", "username"}.
    """
    username, password = validate_login(username, password)
    if not verifier.verify(username, password):
        raise AuthenticationError()

    if remember_me:
        storage.set_item(REMEMBERED_USERNAME_KEY, username)
    else:
        storage.remove_item(REMEMBERED_USERNAME_KEY)

    storage.set_item(AUTH_TOKEN_KEY, generate_token(username))
    storage.set_item(USERNAME_KEY, username)

    return {
        "target": MAIN_PAGE,
        "delay_ms": REDIRECT_DELAY_MS,
        "message": LOGIN_SUCCESSFUL,
        "username": username,
    }


def check_authentication(storage) -> Optional[str]:
    """Navigation target if a session marker already exists, else None. The token is not verified."""
    if storage.get_item(AUTH_TOKEN_KEY):
        return MAIN_PAGE
    return None


def remembered_login(storage) -> dict:
    """Pre-fill values for the login form from the remember-me slot."""
    remembered = storage.get_item(REMEMBERED_USERNAME_KEY)
    return {"username": remembered or "", "remember_me": bool(remembered)}


def logout(storage) -> None:
    """Drop the session marker; the remember-me slot survives."""
    storage.remove_item(AUTH_TOKEN_KEY)
    storage.remove_item(USERNAME_KEY)
