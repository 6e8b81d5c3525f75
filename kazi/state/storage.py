"""
Durable Storage Backends

The web client kept its session and preferences in ``localStorage``:
a flat map of string keys to string values that survives restarts. This
module defines that contract as an interface so the store can run against
a JSON file per browser client (the Flask app) or an in-memory map
(tests), and a persistence adapter that knows which keys hold what.

Storage keys (unchanged from the web client):
- token: bearer token
- user: JSON-encoded user object
- userRole: employee | employer
- preferredLanguage: en | sw
- darkMode: "true" | "false"
- favoriteJobs: JSON array of job objects
"""

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from kazi.models import Session

logger = logging.getLogger(__name__)


class StorageKeys:
    """Names of the durable storage entries."""
    TOKEN = "token"
    USER = "user"
    USER_ROLE = "userRole"
    LANGUAGE = "preferredLanguage"
    DARK_MODE = "darkMode"
    FAVORITES = "favoriteJobs"


# Cleared on logout; language and theme survive
SESSION_KEYS = (
    StorageKeys.TOKEN,
    StorageKeys.USER,
    StorageKeys.USER_ROLE,
    StorageKeys.FAVORITES,
)


class StorageBackend(ABC):
    """
    Abstract key/value storage with string values.

    Implementations:
    - MemoryStorage: process memory (tests, throwaway sessions)
    - JsonFileStorage: one JSON file on disk per client
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value or None."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete ``key`` if present."""
        pass


class MemoryStorage(StorageBackend):
    """Dictionary-backed storage."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def items(self) -> Dict[str, str]:
        return dict(self._items)


class JsonFileStorage(StorageBackend):
    """
    Storage persisted as a single JSON object on disk.

    The file is re-read on every access so several processes see each
    other's writes; writes go through a temp file and an atomic rename.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read storage file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Storage file {self.path} does not hold an object, ignoring it")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            items = self._read()
            items[key] = str(value)
            self._write(items)

    def remove_item(self, key: str) -> None:
        with self._lock:
            items = self._read()
            if key in items:
                del items[key]
                self._write(items)


class StatePersistence:
    """
    Typed access to the durable entries the store synchronizes.

    ``load_*`` methods raise ValueError when a stored payload cannot be
    decoded; the store catches that per key so one corrupt entry does not
    block the rest of initialization.
    """

    def __init__(self, backend: StorageBackend):
        self.backend = backend

    # ===== Session =====

    def get_token(self) -> Optional[str]:
        return self.backend.get_item(StorageKeys.TOKEN) or None

    def load_session(self) -> Optional[Session]:
        """Return the persisted session, or None when not signed in."""
        token = self.backend.get_item(StorageKeys.TOKEN)
        raw_user = self.backend.get_item(StorageKeys.USER)
        if not token or not raw_user:
            return None
        user = json.loads(raw_user)
        if not isinstance(user, dict):
            raise ValueError("Persisted user is not an object")
        return {
            "user": user,
            "token": token,
            "userRole": self.backend.get_item(StorageKeys.USER_ROLE) or user.get("role"),
        }

    def save_session(self, session: Session) -> None:
        self.backend.set_item(StorageKeys.TOKEN, session["token"])
        self.save_user(session["user"])
        role = session.get("userRole")
        if role:
            self.backend.set_item(StorageKeys.USER_ROLE, role)
        else:
            self.backend.remove_item(StorageKeys.USER_ROLE)

    def save_user(self, user: Dict[str, Any]) -> None:
        self.backend.set_item(StorageKeys.USER, json.dumps(user))

    def clear_session(self) -> None:
        for key in SESSION_KEYS:
            self.backend.remove_item(key)

    # ===== Preferences =====

    def load_language(self) -> Optional[str]:
        return self.backend.get_item(StorageKeys.LANGUAGE)

    def save_language(self, language: str) -> None:
        self.backend.set_item(StorageKeys.LANGUAGE, language)

    def load_dark_mode(self) -> bool:
        return self.backend.get_item(StorageKeys.DARK_MODE) == "true"

    def save_dark_mode(self, enabled: bool) -> None:
        self.backend.set_item(StorageKeys.DARK_MODE, "true" if enabled else "false")

    # ===== Favorites =====

    def load_favorites(self) -> List[Dict[str, Any]]:
        raw = self.backend.get_item(StorageKeys.FAVORITES)
        if not raw:
            return []
        favorites = json.loads(raw)
        if not isinstance(favorites, list):
            raise ValueError("Persisted favorites are not a list")
        return favorites

    def save_favorites(self, favorites: List[Dict[str, Any]]) -> None:
        self.backend.set_item(StorageKeys.FAVORITES, json.dumps(list(favorites)))
