"""
Auth API Proxy Blueprint.

Server-side mirror of the backend's authentication endpoints, dispatched
on the ``action`` query parameter:

    POST /api/auth?action=login            -> /auth/signin
    POST /api/auth?action=register         -> /auth/register
    POST /api/auth?action=forgot-password  -> /auth/forgot-password
    POST /api/auth?action=reset-password   -> /auth/reset-password
    POST /api/auth?action=<other>          -> /auth/<other> (passthrough)

Every response carries the same CORS headers. The upstream status code is
mirrored and ``success`` is merged into the upstream JSON body.
"""

import logging
import re
from typing import Any, Dict, Optional, Tuple

import requests
from flask import Blueprint, current_app, jsonify, request

from kazi.common.config import KaziSettings, get_settings

logger = logging.getLogger(__name__)

# Create blueprint
auth_proxy_bp = Blueprint("auth_proxy", __name__, url_prefix="/api")

ALLOWED_METHODS = "GET,OPTIONS,PATCH,DELETE,POST,PUT"
ALLOWED_HEADERS = (
    "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, "
    "Content-MD5, Content-Type, Date, X-Api-Version, Authorization"
)

# action -> (backend path, required fields, validation error, failure message)
AUTH_ACTIONS: Dict[str, Tuple[str, Tuple[str, ...], str, str]] = {
    "login": (
        "/auth/signin",
        ("phone", "password"),
        "Phone and password are required",
        "Login failed",
    ),
    "register": (
        "/auth/register",
        ("name", "phone", "password", "role", "location"),
        "All fields are required",
        "Registration failed",
    ),
    "forgot-password": (
        "/auth/forgot-password",
        ("phone",),
        "Phone number is required",
        "Failed to send reset code",
    ),
    "reset-password": (
        "/auth/reset-password",
        ("code", "newPassword"),
        "Code and new password are required",
        "Failed to reset password",
    ),
}

PASSTHROUGH_FAILURE = "Authentication service unavailable"
ACTION_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*$")


def _settings() -> KaziSettings:
    return current_app.config.get("KAZI_SETTINGS") or get_settings()


def get_headers(authorization: Optional[str] = None) -> Dict[str, str]:
    """Headers for backend requests, forwarding the caller's bearer token if given."""
    headers = {"Content-Type": "application/json"}
    if authorization:
        headers["Authorization"] = authorization
    return headers


@auth_proxy_bp.after_request
def add_cors_headers(response):
    """Attach the CORS header set to every proxy response."""
    response.headers["Access-Control-Allow-Credentials"] = "true"
    response.headers["Access-Control-Allow-Origin"] = _settings().cors_allow_origin
    response.headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
    response.headers["Access-Control-Allow-Headers"] = ALLOWED_HEADERS
    return response


def _forward(path: str, payload: Dict[str, Any], headers: Dict[str, str], failure_message: str):
    """POST ``payload`` to the backend and mirror its answer."""
    settings = _settings()
    url = f"{settings.api_base_url}{path}"
    try:
        response = requests.request(
            "POST",
            url,
            json=payload,
            headers=headers,
            timeout=settings.request_timeout,
        )
    except requests.exceptions.Timeout:
        logger.warning(f"Auth proxy timeout calling {path}")
        return jsonify({"success": False, "error": "Authentication service timeout"}), 504
    except requests.exceptions.ConnectionError:
        logger.warning(f"Auth proxy cannot connect to backend for {path}")
        return jsonify({"success": False, "error": "Cannot connect to authentication service"}), 503
    except requests.exceptions.RequestException as e:
        logger.error(f"Auth proxy error calling {path}: {e}")
        return jsonify({"success": False, "error": failure_message}), 500

    try:
        data = response.json()
    except ValueError:
        logger.error(f"Backend returned non-JSON for {path} (status {response.status_code})")
        return jsonify({"success": False, "error": failure_message}), 500

    if not isinstance(data, dict):
        data = {"data": data}
    return jsonify({"success": response.ok, **data}), response.status_code


@auth_proxy_bp.route("/auth", methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
def auth_handler():
    """
    Dispatch an authentication action.

    Query Parameters:
        action: login | register | forgot-password | reset-password | other

    Returns:
        Upstream JSON with ``success``; 400 on missing fields, 405 for
        non-POST methods, 5xx when the backend cannot be reached
    """
    if request.method == "OPTIONS":
        return "", 200
    if request.method != "POST":
        return jsonify({"success": False, "error": "Method not allowed"}), 405

    action = request.args.get("action", "")
    body = request.get_json(silent=True) or {}
    if not isinstance(body, dict):
        return jsonify({"success": False, "error": "Request body must be a JSON object"}), 400

    if action in AUTH_ACTIONS:
        path, required, validation_error, failure_message = AUTH_ACTIONS[action]
        if any(not body.get(name) for name in required):
            return jsonify({"success": False, "error": validation_error}), 400
        payload = {name: body[name] for name in required}
        return _forward(path, payload, get_headers(), failure_message)

    if not ACTION_PATTERN.match(action):
        return jsonify({"success": False, "error": "action is required"}), 400

    logger.info(f"Auth proxy passthrough: {action}")
    return _forward(
        f"/auth/{action}",
        body,
        get_headers(request.headers.get("Authorization")),
        PASSTHROUGH_FAILURE,
    )
