"""Authentication endpoints."""

from typing import Any, Dict

from .client import HttpClient


class AuthAPI:
    """Sign-in, registration and password reset."""

    def __init__(self, client: HttpClient):
        self.client = client

    def login(self, phone: str, password: str) -> Dict[str, Any]:
        return self.client.request(
            "/auth/signin", method="POST", body={"phone": phone, "password": password}
        )

    def register(self, user_data: Dict[str, Any]) -> Dict[str, Any]:
        """Create an account; ``user_data`` holds name, phone, password, role, location."""
        return self.client.request("/auth/register", method="POST", body=user_data)

    def forgot_password(self, phone: str) -> Dict[str, Any]:
        return self.client.request(
            "/auth/forgot-password", method="POST", body={"phone": phone}
        )

    def reset_password(self, reset_data: Dict[str, Any]) -> Dict[str, Any]:
        """Set a new password; ``reset_data`` holds code and newPassword."""
        return self.client.request("/auth/reset-password", method="POST", body=reset_data)
