"""
Tests for the auth proxy blueprint (frontend/auth_proxy.py).

Covers action dispatch, field validation, status mirroring, CORS headers
and the mapping of transport failures to 5xx responses.
"""

import pytest
import requests
from unittest.mock import MagicMock


def _upstream(status=200, payload=None):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.json.return_value = payload if payload is not None else {}
    return response


@pytest.fixture
def mock_upstream(mocker):
    return mocker.patch("frontend.auth_proxy.requests.request")


class TestDispatch:
    """Tests for action routing."""

    def test_login_forwards_only_credentials(self, client, mock_upstream):
        # Arrange
        mock_upstream.return_value = _upstream(200, {"token": "tok", "user": {"_id": "u1"}})

        # Act
        response = client.post(
            "/api/auth?action=login",
            json={"phone": "254712345678", "password": "secret", "extra": "dropped"},
        )

        # Assert
        assert response.status_code == 200
        assert response.get_json() == {"success": True, "token": "tok", "user": {"_id": "u1"}}
        mock_upstream.assert_called_once_with(
            "POST",
            "https://api.test/auth/signin",
            json={"phone": "254712345678", "password": "secret"},
            headers={"Content-Type": "application/json"},
            timeout=10,
        )

    @pytest.mark.parametrize(
        "action,body,path",
        [
            ("register", {"name": "A", "phone": "2547", "password": "p", "role": "employee",
                          "location": "Nakuru"}, "/auth/register"),
            ("forgot-password", {"phone": "2547"}, "/auth/forgot-password"),
            ("reset-password", {"code": "123456", "newPassword": "p"}, "/auth/reset-password"),
        ],
    )
    def test_named_actions(self, client, mock_upstream, action, body, path):
        mock_upstream.return_value = _upstream(200, {"message": "ok"})

        response = client.post(f"/api/auth?action={action}", json=body)

        assert response.status_code == 200
        assert mock_upstream.call_args.args[1] == f"https://api.test{path}"
        assert mock_upstream.call_args.kwargs["json"] == body

    @pytest.mark.parametrize(
        "action,body,error",
        [
            ("login", {"phone": "2547"}, "Phone and password are required"),
            ("register", {"name": "A"}, "All fields are required"),
            ("forgot-password", {}, "Phone number is required"),
            ("reset-password", {"code": "123456"}, "Code and new password are required"),
        ],
    )
    def test_missing_fields_rejected_without_upstream_call(self, client, mock_upstream, action, body, error):
        response = client.post(f"/api/auth?action={action}", json=body)

        assert response.status_code == 400
        assert response.get_json() == {"success": False, "error": error}
        mock_upstream.assert_not_called()

    def test_passthrough_forwards_authorization(self, client, mock_upstream):
        mock_upstream.return_value = _upstream(200, {"valid": True})

        response = client.post(
            "/api/auth?action=verify-token",
            json={"token": "abc"},
            headers={"Authorization": "Bearer abc"},
        )

        assert response.status_code == 200
        assert mock_upstream.call_args.args[1] == "https://api.test/auth/verify-token"
        assert mock_upstream.call_args.kwargs["headers"]["Authorization"] == "Bearer abc"
        assert mock_upstream.call_args.kwargs["json"] == {"token": "abc"}

    @pytest.mark.parametrize("query", ["", "?action=", "?action=../users"])
    def test_missing_or_invalid_action(self, client, mock_upstream, query):
        response = client.post(f"/api/auth{query}", json={})

        assert response.status_code == 400
        mock_upstream.assert_not_called()


class TestResponses:
    """Tests for status mirroring and failure mapping."""

    def test_upstream_error_status_mirrored(self, client, mock_upstream):
        mock_upstream.return_value = _upstream(401, {"error": "Invalid credentials"})

        response = client.post("/api/auth?action=login", json={"phone": "1", "password": "2"})

        assert response.status_code == 401
        assert response.get_json() == {"success": False, "error": "Invalid credentials"}

    def test_upstream_success_flag_wins(self, client, mock_upstream):
        mock_upstream.return_value = _upstream(200, {"success": False, "error": "odd"})

        response = client.post("/api/auth?action=login", json={"phone": "1", "password": "2"})

        assert response.get_json()["success"] is False

    def test_timeout_returns_504(self, client, mock_upstream):
        mock_upstream.side_effect = requests.exceptions.Timeout()

        response = client.post("/api/auth?action=login", json={"phone": "1", "password": "2"})

        assert response.status_code == 504
        assert response.get_json()["success"] is False

    def test_connection_error_returns_503(self, client, mock_upstream):
        mock_upstream.side_effect = requests.exceptions.ConnectionError()

        response = client.post("/api/auth?action=login", json={"phone": "1", "password": "2"})

        assert response.status_code == 503

    @pytest.mark.parametrize(
        "action,body,message",
        [
            ("login", {"phone": "1", "password": "2"}, "Login failed"),
            ("forgot-password", {"phone": "1"}, "Failed to send reset code"),
            ("something-else", {}, "Authentication service unavailable"),
        ],
    )
    def test_other_failures_return_500_with_action_message(self, client, mock_upstream, action, body, message):
        mock_upstream.side_effect = requests.exceptions.RequestException("boom")

        response = client.post(f"/api/auth?action={action}", json=body)

        assert response.status_code == 500
        assert response.get_json() == {"success": False, "error": message}

    def test_non_json_upstream_is_500(self, client, mock_upstream):
        upstream = _upstream(502)
        upstream.json.side_effect = ValueError("not json")
        mock_upstream.return_value = upstream

        response = client.post("/api/auth?action=register", json={
            "name": "A", "phone": "1", "password": "p", "role": "employee", "location": "X",
        })

        assert response.status_code == 500
        assert response.get_json()["error"] == "Registration failed"


class TestMethodsAndCors:
    """Tests for preflight, method filtering and CORS headers."""

    def test_options_preflight(self, client, mock_upstream):
        response = client.options("/api/auth?action=login")

        assert response.status_code == 200
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert "POST" in response.headers["Access-Control-Allow-Methods"]
        assert "Authorization" in response.headers["Access-Control-Allow-Headers"]
        mock_upstream.assert_not_called()

    @pytest.mark.parametrize("method", ["get", "put", "delete", "patch"])
    def test_non_post_methods_rejected(self, client, mock_upstream, method):
        response = getattr(client, method)("/api/auth?action=login")

        assert response.status_code == 405
        assert response.get_json() == {"success": False, "error": "Method not allowed"}
        assert response.headers["Access-Control-Allow-Credentials"] == "true"

    def test_cors_headers_on_errors(self, client, mock_upstream):
        response = client.post("/api/auth?action=login", json={})

        assert response.status_code == 400
        assert response.headers["Access-Control-Allow-Origin"] == "*"
