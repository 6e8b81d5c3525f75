"""Profile and worker listing endpoints."""

from typing import Any, Dict

from .client import HttpClient


class UsersAPI:
    """Signed-in user's profile plus the public employee directory."""

    def __init__(self, client: HttpClient):
        self.client = client

    def get_profile(self) -> Dict[str, Any]:
        return self.client.request("/users/profile")

    def update_profile(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.request("/users/profile", method="PUT", body=data)

    def delete_profile(self) -> Dict[str, Any]:
        return self.client.request("/users/profile", method="DELETE")

    def get_employees(self) -> Dict[str, Any]:
        return self.client.request("/employees")
