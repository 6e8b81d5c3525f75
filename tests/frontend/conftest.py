"""
Pytest fixtures for frontend/Flask tests.

The app is built per test with mocked backend APIs and a manual clock, so
timers (message clear, redirect, logout) advance only when a test says so.
"""

import pytest


@pytest.fixture
def app(settings, mock_api, clock):
    """Flask app fixture with test configuration."""
    from frontend.app import create_app

    flask_app = create_app(settings, api_factory=lambda store: mock_api, clock=clock)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def login(client, mock_api):
    """Sign the test client in as ``user`` through the auth flow routes."""
    def _login(user):
        mock_api.auth.login.return_value = {"success": True, "token": "tok", "user": user}
        response = client.post("/api/auth-flow/login", json={
            "fields": {"login_phone": user["phone"], "login_password": "secret"},
        })
        assert response.status_code == 200
        assert response.get_json()["result"] is True
        return client
    return _login


@pytest.fixture
def authenticated_client(login, employee):
    """Flask test client signed in as an employee."""
    return login(employee)


@pytest.fixture
def employer_client(login, employer):
    """Flask test client signed in as an employer."""
    return login(employer)
