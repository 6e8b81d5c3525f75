"""
HTTP client for the Kazi Mashinani backend.

Builds JSON requests, attaches the bearer token of the signed-in user and
normalizes every failure into ApiError. No retries and no backoff: the
dashboard surfaces failures to the user immediately.
"""

import json
import logging
from typing import Any, Callable, Dict, Optional

import requests

from .errors import ApiError, ErrorKind

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]


def _is_json(response: requests.Response) -> bool:
    content_type = response.headers.get("Content-Type") or ""
    return "application/json" in content_type.lower()


class HttpClient:
    """
    Thin JSON client bound to one backend base URL.

    The token is looked up through ``token_provider`` on every request so a
    login or logout takes effect without rebuilding the client.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[TokenProvider] = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self.timeout = timeout

    def get_headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Get headers for backend requests including Bearer token."""
        headers = {"Content-Type": "application/json"}
        token = self.token_provider() if self.token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if extra:
            headers.update(extra)
        return headers

    def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Send a request and return the decoded JSON body.

        Args:
            endpoint: Path relative to the base URL (e.g. "/jobs")
            method: HTTP verb
            body: Optional payload, serialized to a JSON string
            headers: Extra headers merged over the defaults

        Returns:
            Decoded JSON object, or ``{"success": True}`` for a successful
            response that is not JSON.

        Raises:
            ApiError: transport failure, non-2xx status or undecodable JSON
        """
        url = f"{self.base_url}{endpoint}"
        data = json.dumps(body) if body is not None else None

        try:
            response = requests.request(
                method,
                url,
                data=data,
                headers=self.get_headers(headers),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(f"{method} {endpoint} timed out: {e}")
            raise ApiError("Network error: request timed out", kind=ErrorKind.NETWORK) from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"{method} {endpoint} failed: {e}")
            raise ApiError(f"Network error: {e}", kind=ErrorKind.NETWORK) from e

        status = response.status_code
        ok = 200 <= status < 300

        if not _is_json(response):
            if ok:
                return {"success": True}
            logger.warning(f"{method} {endpoint} returned HTTP {status} (non-JSON)")
            raise ApiError(f"HTTP error! status: {status}", status=status)

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"{method} {endpoint} returned malformed JSON: {e}")
            raise ApiError(f"Invalid JSON response (status {status})", status=status) from e

        if not ok:
            message = None
            if isinstance(payload, dict):
                message = payload.get("error") or payload.get("message")
            message = message or f"HTTP error! status: {status}"
            logger.warning(f"{method} {endpoint} returned HTTP {status}: {message}")
            raise ApiError(str(message), status=status)

        if not isinstance(payload, dict):
            return {"success": True, "data": payload}
        return payload
