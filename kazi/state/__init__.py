"""
Client-side application state.

Public API:
- AppStore / app_reducer / AppState: the store and its pure reducer
- StorageBackend and implementations, StatePersistence adapter
- Scheduler: named cancellable timers run cooperatively
"""

from .scheduler import (
    TIMER_LOGOUT,
    TIMER_MESSAGE,
    TIMER_REDIRECT,
    TIMER_RESEND,
    Scheduler,
)
from .storage import (
    SESSION_KEYS,
    JsonFileStorage,
    MemoryStorage,
    StatePersistence,
    StorageBackend,
    StorageKeys,
)
from .store import Action, ActionType, AppState, AppStore, app_reducer

__all__ = [
    "Action",
    "ActionType",
    "AppState",
    "AppStore",
    "JsonFileStorage",
    "MemoryStorage",
    "SESSION_KEYS",
    "Scheduler",
    "StatePersistence",
    "StorageBackend",
    "StorageKeys",
    "TIMER_LOGOUT",
    "TIMER_MESSAGE",
    "TIMER_REDIRECT",
    "TIMER_RESEND",
    "app_reducer",
]
