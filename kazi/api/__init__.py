"""
REST client for the Kazi Mashinani backend.

Public API:
- build_api(): Factory wiring the resource APIs to one HttpClient
- ApiBundle: auth / jobs / users facades
- ApiError, ErrorKind: the single error type raised by this package
"""

from dataclasses import dataclass
from typing import Optional

from .auth import AuthAPI
from .client import HttpClient, TokenProvider
from .errors import ApiError, ErrorKind, classify_error
from .jobs import JobsAPI
from .users import UsersAPI


@dataclass
class ApiBundle:
    """The three resource facades sharing one client."""
    auth: AuthAPI
    jobs: JobsAPI
    users: UsersAPI


def build_api(
    base_url: str,
    token_provider: Optional[TokenProvider] = None,
    timeout: float = 30.0,
) -> ApiBundle:
    """Create the resource APIs for ``base_url``."""
    client = HttpClient(base_url, token_provider=token_provider, timeout=timeout)
    return ApiBundle(auth=AuthAPI(client), jobs=JobsAPI(client), users=UsersAPI(client))


__all__ = [
    "ApiBundle",
    "ApiError",
    "AuthAPI",
    "ErrorKind",
    "HttpClient",
    "JobsAPI",
    "UsersAPI",
    "build_api",
    "classify_error",
]
