"""
Client-side storage for auth session artifacts (token, refresh token, user).

Hooks receive an AuthStorage instead of reaching for a global medium, so they
run the same against memory in tests and a JSON file on a desktop client.
"""

import json
import logging
import os
import shutil
import tempfile
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

TOKEN_KEY = "cinesync_auth_token"
REFRESH_TOKEN_KEY = "cinesync_refresh_token"
USER_KEY = "cinesync_user"


class AuthStorage(ABC):
    """Key/value medium plus the session operations built on top of it."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        ...

    # Token management
    def get_token(self) -> Optional[str]:
        return self.get_item(TOKEN_KEY)

    def set_token(self, token: str) -> None:
        self.set_item(TOKEN_KEY, token)

    def remove_token(self) -> None:
        self.remove_item(TOKEN_KEY)

    # Refresh token management
    def get_refresh_token(self) -> Optional[str]:
        return self.get_item(REFRESH_TOKEN_KEY)

    def set_refresh_token(self, token: str) -> None:
        self.set_item(REFRESH_TOKEN_KEY, token)

    def remove_refresh_token(self) -> None:
        self.remove_item(REFRESH_TOKEN_KEY)

    # User management (stored serialized, like any other string value)
    def get_user(self) -> Optional[Dict[str, Any]]:
        raw = self.get_item(USER_KEY)
        return json.loads(raw) if raw else None

    def set_user(self, user: Optional[Dict[str, Any]]) -> None:
        self.set_item(USER_KEY, json.dumps(user))

    def remove_user(self) -> None:
        self.remove_item(USER_KEY)

    def clear_auth_data(self) -> None:
        self.remove_token()
        self.remove_refresh_token()
        self.remove_user()

    def is_authenticated(self) -> bool:
        return bool(self.get_token())

    def set_auth_data(
        self,
        token: str,
        refresh_token: Optional[str] = None,
        user: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Persist everything a successful login/registration hands back."""
        self.set_token(token)
        if refresh_token:
            self.set_refresh_token(refresh_token)
        self.set_user(user)


class InMemoryAuthStorage(AuthStorage):
    def __init__(self):
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileAuthStorage(AuthStorage):
    """Keeps all keys in one JSON object on disk; writes are atomic."""

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r") as f:
                content = f.read().strip()
                return json.loads(content) if content else {}
        except json.JSONDecodeError:
            logger.warning("Corrupted auth storage at %s. Resetting...", self.path)
            self._save({})
            return {}

    def _save(self, items: Dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        tmp_fd, tmp_path = tempfile.mkstemp(dir=directory)
        os.close(tmp_fd)
        try:
            with open(tmp_path, "w") as f:
                json.dump(items, f, indent=2)
            shutil.move(tmp_path, self.path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        self._save(items)

    def remove_item(self, key: str) -> None:
        items = self._load()
        if key in items:
            del items[key]
            self._save(items)
