"""
Per-client key-value storage for the login session marker.
Wraps any mutable mapping (flask.session in the app, a dict in tests)
behind the same four calls the browser's localStorage offers.
"""

from typing import MutableMapping, Optional

AUTH_TOKEN_KEY = "authToken"
USERNAME_KEY = "username"
REMEMBERED_USERNAME_KEY = "rememberedUsername"


class KeyValueStorage:
    def __init__(self, backing: MutableMapping):
        self._backing = backing

    def get_item(self, key: str) -> Optional[str]:
        return self._backing.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._backing[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._backing.pop(key, None)

    def clear(self) -> None:
        self._backing.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._backing


def session_storage() -> KeyValueStorage:
    """Storage bound to the current request's Flask session."""
    from flask import session
    return KeyValueStorage(session)
