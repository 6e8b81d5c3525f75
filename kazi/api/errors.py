"""
Error types raised by the API layer.

Every failure talking to the backend (transport, HTTP status, bad JSON)
surfaces as a single ApiError carrying a coarse ErrorKind, so controllers
pick user-facing messages from the kind rather than from server wording.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Structured classification of request failures."""
    VALIDATION = "validation"      # 400 / 422 - bad input
    UNAUTHORIZED = "unauthorized"  # 401 / 403 - wrong credentials or token
    NOT_FOUND = "not_found"        # 404
    CONFLICT = "conflict"          # 409 - e.g. phone already registered
    NETWORK = "network"            # transport failure or timeout
    UNKNOWN = "unknown"


_STATUS_KINDS = {
    400: ErrorKind.VALIDATION,
    401: ErrorKind.UNAUTHORIZED,
    403: ErrorKind.UNAUTHORIZED,
    404: ErrorKind.NOT_FOUND,
    409: ErrorKind.CONFLICT,
    422: ErrorKind.VALIDATION,
}

# Server wording that pins down a kind the status alone does not
# (the backend answers most failures with a bare 400).
_MESSAGE_HINTS = (
    ("invalid credentials", ErrorKind.UNAUTHORIZED),
    ("user not found", ErrorKind.NOT_FOUND),
    ("not found", ErrorKind.NOT_FOUND),
    ("already exists", ErrorKind.CONFLICT),
    ("failed to fetch", ErrorKind.NETWORK),
    ("network", ErrorKind.NETWORK),
)


def classify_error(status: Optional[int], message: str = "") -> ErrorKind:
    """
    Derive the ErrorKind for a failed request.

    The HTTP status decides when it is specific (401, 403, 404, 409).
    For ambiguous statuses (400, 422, 5xx, none) the server message is
    checked for known phrases before falling back to the status mapping.
    """
    kind = _STATUS_KINDS.get(status) if status is not None else None
    if kind in (ErrorKind.UNAUTHORIZED, ErrorKind.NOT_FOUND, ErrorKind.CONFLICT):
        return kind

    lowered = (message or "").lower()
    for phrase, hinted in _MESSAGE_HINTS:
        if phrase in lowered:
            return hinted

    return kind or ErrorKind.UNKNOWN


class ApiError(Exception):
    """Raised for any failed backend request."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        kind: Optional[ErrorKind] = None,
    ):
        self.message = message
        self.status = status
        self.kind = kind if kind is not None else classify_error(status, message)
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.message,
            "status": self.status,
            "kind": self.kind.value,
        }
