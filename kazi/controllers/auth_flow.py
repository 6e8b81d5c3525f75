"""
Authentication Flow Controller

Drives the five-step sign-in screen: login, register, forgot password,
code verification and password reset.

Steps change only on explicit user actions, with two exceptions: a
successful reset-code request moves to verification, and a complete
verification code moves to reset. Each step owns its fields; switching
steps never clears another step's input.

Every network call sets ``is_loading`` for its duration so the page can
disable the form and show an "in progress" label.
"""

import logging
import math
from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from kazi.api import ApiError, AuthAPI, ErrorKind
from kazi.common.config import KaziSettings, get_settings
from kazi.i18n import translate
from kazi.models import Role, Route, Severity
from kazi.state import TIMER_REDIRECT, TIMER_RESEND, AppStore
from kazi.utils import as_text, format_phone_to_standard

logger = logging.getLogger(__name__)

CODE_LENGTH = 6
MIN_PASSWORD_LENGTH = 6


class AuthStep(str, Enum):
    """Steps of the authentication screen."""
    LOGIN = "login"
    REGISTER = "register"
    FORGOT = "forgot"
    VERIFICATION = "verification"
    RESET = "reset"


# Steps reachable through the tab bar
TAB_STEPS = (AuthStep.LOGIN, AuthStep.REGISTER)

DEFAULT_FIELDS: Dict[str, str] = {
    "login_phone": "",
    "login_password": "",
    "register_name": "",
    "register_phone": "",
    "register_location": "",
    "register_password": "",
    "register_role": Role.EMPLOYEE.value,
    "forgot_phone": "",
    "reset_code": "",
    "new_password": "",
    "confirm_password": "",
}

PASSWORD_FIELDS = {"login_password", "register_password", "new_password", "confirm_password"}

# action -> (idle label, busy label)
BUTTON_LABELS = {
    "login": ("login", "logging_in"),
    "register": ("register", "registering"),
    "forgot": ("send_reset_code", "sending"),
    "reset": ("reset_password", "resetting"),
}


class AuthFlowController:
    """
    State machine behind the authentication page.

    Args:
        store: Client store (session, language, messages, navigation)
        auth_api: Backend authentication endpoints
        settings: Timer configuration; defaults to the global settings
    """

    def __init__(
        self,
        store: AppStore,
        auth_api: AuthAPI,
        settings: Optional[KaziSettings] = None,
    ):
        self.store = store
        self.auth_api = auth_api
        self.settings = settings or get_settings()
        self.scheduler = store.scheduler
        self.step = AuthStep.LOGIN
        self.fields: Dict[str, str] = dict(DEFAULT_FIELDS)
        self.code: List[str] = [""] * CODE_LENGTH
        self.is_loading = False

    # ===== Helpers =====

    def _t(self, key: str, **params) -> str:
        return translate(key, self.store.locale, **params)

    def _error(self, key: str, **params) -> None:
        self.store.show_message(self._t(key, **params), Severity.ERROR)

    def _success(self, key: str) -> None:
        self.store.show_message(self._t(key), Severity.SUCCESS)

    @contextmanager
    def _busy(self) -> Iterator[None]:
        self.is_loading = True
        try:
            yield
        finally:
            self.is_loading = False

    def _start_session(self, data: Dict[str, Any], fallback_error: str) -> None:
        if not data.get("success"):
            raise ApiError(data.get("error") or data.get("message") or fallback_error)
        user = data.get("user")
        token = data.get("token")
        if not isinstance(user, dict) or not token:
            raise ApiError(fallback_error)
        self.store.set_user({"user": user, "token": token, "userRole": user.get("role")})

    def _schedule_redirect(self) -> None:
        self.scheduler.schedule(
            TIMER_REDIRECT,
            self.settings.redirect_delay_seconds,
            lambda: self.store.navigate(Route.DASHBOARD),
        )

    # ===== Navigation =====

    def _go(self, step: AuthStep) -> None:
        logger.debug(f"Auth step {self.step.value} -> {step.value}")
        self.step = step

    def switch_tab(self, tab: str) -> None:
        """Tab bar: login or register. Also clears a stuck busy flag."""
        step = AuthStep(tab)
        if step not in TAB_STEPS:
            raise ValueError(f"'{tab}' is not a tab")
        self._go(step)
        self.is_loading = False

    def show_forgot_password(self) -> None:
        self._go(AuthStep.FORGOT)

    def show_login(self) -> None:
        self._go(AuthStep.LOGIN)

    def back_to_forgot(self) -> None:
        """Back link on the reset form."""
        self._go(AuthStep.FORGOT)

    def toggle_language(self) -> None:
        self.store.toggle_language()

    # ===== Input =====

    def update_field(self, name: str, value: str) -> None:
        if name not in self.fields:
            raise KeyError(f"Unknown field '{name}'")
        value = as_text(value)
        if name == "register_role":
            value = Role(value).value
        self.fields[name] = value

    def set_code_digit(self, index: int, value: str) -> Optional[int]:
        """
        Set one verification cell.

        Only an empty string or a single digit is accepted; anything else
        leaves the cell unchanged.

        Returns:
            Index of the cell to focus next, or None to keep focus.
        """
        if not 0 <= index < CODE_LENGTH:
            raise IndexError(f"Code cell {index} out of range")
        value = value or ""
        if len(value) > 1 or (value and not value.isdigit()):
            return None
        self.code[index] = value
        if value and index < CODE_LENGTH - 1:
            return index + 1
        return None

    @property
    def verification_code(self) -> str:
        return "".join(self.code)

    # ===== Countdown =====

    @property
    def countdown(self) -> int:
        """Whole seconds left before the code can be resent."""
        return int(math.ceil(self.scheduler.remaining(TIMER_RESEND)))

    @property
    def is_resend_disabled(self) -> bool:
        return self.countdown > 0

    def _start_countdown(self) -> None:
        self.scheduler.schedule(
            TIMER_RESEND,
            self.settings.resend_countdown_seconds,
            lambda: logger.debug("Verification code resend available"),
        )

    # ===== Actions =====

    def login(self) -> bool:
        phone = self.fields["login_phone"].strip()
        password = self.fields["login_password"]
        if not phone or not password:
            self._error("login_fields_required")
            return False

        with self._busy():
            try:
                formatted = format_phone_to_standard(phone)
                logger.info(f"Attempting login for {formatted[:6]}******")
                data = self.auth_api.login(formatted, password)
                self._start_session(data, "Login failed")
            except ApiError as e:
                logger.warning(f"Login failed ({e.kind.value}): {e.message}")
                self.store.show_message(self._login_error_message(e), Severity.ERROR)
                return False

        self._success("login_success")
        self._schedule_redirect()
        return True

    def _login_error_message(self, error: ApiError) -> str:
        if error.kind in (ErrorKind.VALIDATION, ErrorKind.UNAUTHORIZED):
            return self._t("invalid_credentials")
        if error.kind == ErrorKind.NOT_FOUND:
            return self._t("user_not_found")
        if error.kind == ErrorKind.NETWORK:
            return self._t("network_error")
        return error.message or self._t("login_failed")

    def register(self) -> bool:
        name = self.fields["register_name"].strip()
        phone = self.fields["register_phone"].strip()
        location = self.fields["register_location"].strip()
        password = self.fields["register_password"]
        if not name or not phone or not password or not location:
            self._error("register_fields_required")
            return False
        if len(password) < MIN_PASSWORD_LENGTH:
            self._error("password_too_short")
            return False

        user_data = {
            "name": name,
            "phone": format_phone_to_standard(phone),
            "password": password,
            "role": self.fields["register_role"],
            "location": location,
        }

        with self._busy():
            try:
                logger.info(f"Attempting registration as {user_data['role']}")
                data = self.auth_api.register(user_data)
                self._start_session(data, "Registration failed")
            except ApiError as e:
                logger.warning(f"Registration failed ({e.kind.value}): {e.message}")
                self.store.show_message(self._register_error_message(e), Severity.ERROR)
                return False

        self._success("register_success")
        self._schedule_redirect()
        return True

    def _register_error_message(self, error: ApiError) -> str:
        if error.kind in (ErrorKind.VALIDATION, ErrorKind.CONFLICT):
            return self._t("user_exists")
        if error.kind == ErrorKind.NETWORK:
            return self._t("network_error")
        return error.message or self._t("register_failed")

    def _send_reset_code(self, phone: str) -> bool:
        with self._busy():
            try:
                self.auth_api.forgot_password(format_phone_to_standard(phone))
            except ApiError as e:
                logger.warning(f"Reset code request failed ({e.kind.value}): {e.message}")
                if e.kind == ErrorKind.NETWORK:
                    self._error("network_error")
                else:
                    self.store.show_message(e.message or self._t("reset_code_failed"), Severity.ERROR)
                return False
        return True

    def request_reset_code(self) -> bool:
        """Forgot-password form: send a code, then move to verification."""
        phone = self.fields["forgot_phone"].strip()
        if not phone:
            self._error("phone_required")
            return False
        if not self._send_reset_code(phone):
            return False

        self._success("reset_code_sent")
        self.code = [""] * CODE_LENGTH
        self.fields["reset_code"] = ""
        self._go(AuthStep.VERIFICATION)
        self._start_countdown()
        return True

    def resend_code(self) -> bool:
        """Resend the code once the countdown has run out."""
        if self.is_resend_disabled:
            logger.debug(f"Resend refused, {self.countdown}s remaining")
            self._error("resend_wait", seconds=self.countdown)
            return False
        phone = self.fields["forgot_phone"].strip()
        if not phone:
            self._error("phone_required")
            return False
        if not self._send_reset_code(phone):
            return False
        self._start_countdown()
        self._success("code_resent")
        return True

    def verify_code(self) -> bool:
        """Advance to reset once all six cells hold a digit (checked locally)."""
        code = self.verification_code
        if len(code) != CODE_LENGTH or not code.isdigit():
            self._error("code_incomplete")
            return False
        self.fields["reset_code"] = code
        self._go(AuthStep.RESET)
        return True

    def reset_password(self) -> bool:
        code = self.fields["reset_code"].strip()
        new_password = self.fields["new_password"]
        confirm_password = self.fields["confirm_password"]
        if not code or not new_password or not confirm_password:
            self._error("reset_fields_required")
            return False
        if len(new_password) < MIN_PASSWORD_LENGTH:
            self._error("password_too_short")
            return False
        if new_password != confirm_password:
            self._error("passwords_mismatch")
            return False

        with self._busy():
            try:
                self.auth_api.reset_password({"code": code, "newPassword": new_password})
            except ApiError as e:
                logger.warning(f"Password reset failed ({e.kind.value}): {e.message}")
                if e.kind == ErrorKind.NETWORK:
                    self._error("network_error")
                else:
                    self.store.show_message(e.message or self._t("password_reset_failed"), Severity.ERROR)
                return False

        self._success("password_reset_success")
        self.fields["new_password"] = ""
        self.fields["confirm_password"] = ""
        self.code = [""] * CODE_LENGTH
        self.scheduler.cancel(TIMER_RESEND)
        self._go(AuthStep.LOGIN)
        return True

    # ===== Rendering =====

    def button_label(self, action: str) -> str:
        idle, busy = BUTTON_LABELS[action]
        return self._t(busy if self.is_loading else idle)

    def snapshot(self) -> Dict[str, Any]:
        """Page state; password values are never echoed back."""
        return {
            "step": self.step.value,
            "fields": {
                name: ("" if name in PASSWORD_FIELDS else value)
                for name, value in self.fields.items()
            },
            "code": list(self.code),
            "countdown": self.countdown,
            "resend_disabled": self.is_resend_disabled,
            "is_loading": self.is_loading,
            "labels": {action: self.button_label(action) for action in BUTTON_LABELS},
        }
