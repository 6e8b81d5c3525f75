"""
Application State Store

Holds the session, interface preferences, cached collections and the
transient status message for one client.

Two layers:
- ``app_reducer``: pure ``(state, action) -> state`` transitions, testable
  without storage or timers.
- ``AppStore``: the mutable store. Its named actions dispatch to the
  reducer and, for the entries that must survive a restart, write through
  the StatePersistence adapter.
"""

import logging
import threading
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from kazi.models import DEFAULT_LOCALE, Locale, Route, Session, Severity, parse_locale
from kazi.state.scheduler import (
    TIMER_LOGOUT,
    TIMER_MESSAGE,
    TIMER_REDIRECT,
    Scheduler,
)
from kazi.state.storage import StatePersistence, StorageBackend

logger = logging.getLogger(__name__)

DARK_MODE_CLASS = "dark-mode"


class ActionType(str, Enum):
    """Reducer actions."""
    SET_LOADING = "SET_LOADING"
    SET_USER = "SET_USER"
    UPDATE_USER = "UPDATE_USER"
    CLEAR_USER = "CLEAR_USER"
    SET_LANGUAGE = "SET_LANGUAGE"
    SET_DARK_MODE = "SET_DARK_MODE"
    TOGGLE_DARK_MODE = "TOGGLE_DARK_MODE"
    SET_JOBS = "SET_JOBS"
    SET_EMPLOYEES = "SET_EMPLOYEES"
    SET_USER_JOBS = "SET_USER_JOBS"
    SET_FAVORITES = "SET_FAVORITES"
    SET_MESSAGE = "SET_MESSAGE"
    CLEAR_MESSAGE = "CLEAR_MESSAGE"
    NAVIGATE = "NAVIGATE"


@dataclass(frozen=True)
class Action:
    type: ActionType
    payload: Any = None


@dataclass(frozen=True)
class AppState:
    """Snapshot of everything the pages render from."""
    user: Optional[Dict[str, Any]] = None
    token: Optional[str] = None
    user_role: Optional[str] = None
    language: str = DEFAULT_LOCALE.value
    dark_mode: bool = False
    jobs: Tuple[Dict[str, Any], ...] = ()
    employees: Tuple[Dict[str, Any], ...] = ()
    user_jobs: Tuple[Dict[str, Any], ...] = ()
    favorites: Tuple[Dict[str, Any], ...] = ()
    is_loading: bool = False
    message: Optional[str] = None
    message_type: Optional[str] = None
    route: str = Route.AUTH.value

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token and self.user)


def app_reducer(state: AppState, action: Action) -> AppState:
    """
    Pure state transition.

    Collections are replaced wholesale; unknown actions return ``state``.
    """
    kind = action.type
    payload = action.payload

    if kind == ActionType.SET_LOADING:
        return replace(state, is_loading=bool(payload))

    if kind == ActionType.SET_USER:
        return replace(
            state,
            user=dict(payload["user"]),
            token=payload["token"],
            user_role=payload.get("userRole"),
        )

    if kind == ActionType.UPDATE_USER:
        if state.user is None:
            return state
        return replace(state, user={**state.user, **payload})

    if kind == ActionType.CLEAR_USER:
        return replace(state, user=None, token=None, user_role=None)

    if kind == ActionType.SET_LANGUAGE:
        return replace(state, language=payload)

    if kind == ActionType.SET_DARK_MODE:
        return replace(state, dark_mode=bool(payload))

    if kind == ActionType.TOGGLE_DARK_MODE:
        return replace(state, dark_mode=not state.dark_mode)

    if kind == ActionType.SET_JOBS:
        return replace(state, jobs=tuple(payload or ()))

    if kind == ActionType.SET_EMPLOYEES:
        return replace(state, employees=tuple(payload or ()))

    if kind == ActionType.SET_USER_JOBS:
        return replace(state, user_jobs=tuple(payload or ()))

    if kind == ActionType.SET_FAVORITES:
        return replace(state, favorites=tuple(payload or ()))

    if kind == ActionType.SET_MESSAGE:
        return replace(state, message=payload["message"], message_type=payload["type"])

    if kind == ActionType.CLEAR_MESSAGE:
        return replace(state, message=None, message_type=None)

    if kind == ActionType.NAVIGATE:
        return replace(state, route=payload)

    return state


Listener = Callable[[AppState, Action], None]


class AppStore:
    """
    Mutable store for one client.

    Args:
        storage: Durable storage backend (or a ready StatePersistence)
        scheduler: Timer scheduler shared with the controllers
        message_timeout: Seconds a status message stays visible
    """

    def __init__(
        self,
        storage: Union[StorageBackend, StatePersistence],
        scheduler: Optional[Scheduler] = None,
        message_timeout: float = 5.0,
    ):
        self.persistence = (
            storage if isinstance(storage, StatePersistence) else StatePersistence(storage)
        )
        self.scheduler = scheduler or Scheduler()
        self.message_timeout = message_timeout
        self._state = AppState()
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()
        self._initialized = False

    # ===== Core =====

    @property
    def state(self) -> AppState:
        return self._state

    def dispatch(self, action: Action) -> AppState:
        """Apply ``action`` through the reducer and notify listeners."""
        with self._lock:
            self._state = app_reducer(self._state, action)
            new_state = self._state
            listeners = list(self._listeners)
        for listener in listeners:
            listener(new_state, action)
        return new_state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def initialize(self) -> AppState:
        """
        Rehydrate from durable storage (runs once per store).

        Session, language, theme and favorites are read independently;
        a corrupt entry is logged and skipped without affecting the others.
        """
        with self._lock:
            if self._initialized:
                return self._state
            self._initialized = True

        try:
            session = self.persistence.load_session()
            if session:
                self.dispatch(Action(ActionType.SET_USER, session))
        except (ValueError, TypeError) as e:
            logger.error(f"Error parsing persisted user: {e}")

        stored_language = self.persistence.load_language()
        locale = parse_locale(stored_language)
        if stored_language and locale is None:
            logger.warning(f"Ignoring unsupported persisted language '{stored_language}'")
        self.dispatch(Action(ActionType.SET_LANGUAGE, (locale or DEFAULT_LOCALE).value))

        self.dispatch(Action(ActionType.SET_DARK_MODE, self.persistence.load_dark_mode()))

        try:
            favorites = self.persistence.load_favorites()
            self.dispatch(Action(ActionType.SET_FAVORITES, favorites))
        except (ValueError, TypeError) as e:
            logger.error(f"Error parsing favorites: {e}")

        route = Route.DASHBOARD if self._state.is_authenticated else Route.AUTH
        return self.dispatch(Action(ActionType.NAVIGATE, route.value))

    # ===== Session =====

    def set_loading(self, loading: bool) -> None:
        self.dispatch(Action(ActionType.SET_LOADING, loading))

    def set_user(self, session: Session) -> None:
        """Persist the session and make it current."""
        user = session["user"]
        session = {
            "user": user,
            "token": session["token"],
            "userRole": session.get("userRole") or user.get("role"),
        }
        self.persistence.save_session(session)
        self.dispatch(Action(ActionType.SET_USER, session))

    def update_user(self, fields: Dict[str, Any]) -> None:
        """Merge ``fields`` into the cached user and persist it."""
        if self._state.user is None:
            return
        self.dispatch(Action(ActionType.UPDATE_USER, dict(fields)))
        self.persistence.save_user(self._state.user)

    def logout(self) -> None:
        """Forget the session and send the client to the auth screen."""
        self.scheduler.cancel(TIMER_REDIRECT)
        self.scheduler.cancel(TIMER_LOGOUT)
        self.persistence.clear_session()
        self.dispatch(Action(ActionType.CLEAR_USER))
        self.dispatch(Action(ActionType.SET_FAVORITES, ()))
        self.dispatch(Action(ActionType.SET_USER_JOBS, ()))
        self.navigate(Route.AUTH)
        logger.info("Signed out")

    def navigate(self, route: Union[Route, str]) -> None:
        self.dispatch(Action(ActionType.NAVIGATE, Route(route).value))

    # ===== Preferences =====

    def set_language(self, language: Union[Locale, str]) -> None:
        locale = Locale(language)
        self.persistence.save_language(locale.value)
        self.dispatch(Action(ActionType.SET_LANGUAGE, locale.value))

    def toggle_language(self) -> None:
        self.set_language(Locale.SW if self.locale == Locale.EN else Locale.EN)

    def toggle_dark_mode(self) -> None:
        """Flip the theme; listeners see the new ``body_class`` immediately."""
        self.dispatch(Action(ActionType.TOGGLE_DARK_MODE))
        self.persistence.save_dark_mode(self._state.dark_mode)

    @property
    def locale(self) -> Locale:
        return Locale(self._state.language)

    @property
    def body_class(self) -> str:
        return DARK_MODE_CLASS if self._state.dark_mode else ""

    # ===== Collections =====

    def set_jobs(self, jobs: Iterable[Dict[str, Any]]) -> None:
        self.dispatch(Action(ActionType.SET_JOBS, list(jobs)))

    def set_employees(self, employees: Iterable[Dict[str, Any]]) -> None:
        self.dispatch(Action(ActionType.SET_EMPLOYEES, list(employees)))

    def set_user_jobs(self, jobs: Iterable[Dict[str, Any]]) -> None:
        self.dispatch(Action(ActionType.SET_USER_JOBS, list(jobs)))

    def set_favorites(self, favorites: Iterable[Dict[str, Any]]) -> None:
        """Replace favorites and persist the whole list."""
        favorites = list(favorites)
        self.persistence.save_favorites(favorites)
        self.dispatch(Action(ActionType.SET_FAVORITES, favorites))

    # ===== Messages =====

    def show_message(self, message: str, message_type: Union[Severity, str] = Severity.SUCCESS) -> None:
        """Show a status message for ``message_timeout`` seconds."""
        severity = Severity(message_type)
        self.dispatch(Action(ActionType.SET_MESSAGE, {"message": message, "type": severity.value}))
        self.scheduler.schedule(TIMER_MESSAGE, self.message_timeout, self.clear_message)

    def clear_message(self) -> None:
        self.scheduler.cancel(TIMER_MESSAGE)
        self.dispatch(Action(ActionType.CLEAR_MESSAGE))

    # ===== Rendering =====

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view of the state (token omitted)."""
        data = asdict(self._state)
        data.pop("token", None)
        data["is_authenticated"] = self._state.is_authenticated
        data["body_class"] = self.body_class
        for key in ("jobs", "employees", "user_jobs", "favorites"):
            data[key] = list(data[key])
        return data
