"""Job posting endpoints."""

from typing import Any, Dict

from .client import HttpClient


class JobsAPI:
    """CRUD over /jobs."""

    def __init__(self, client: HttpClient):
        self.client = client

    def get_all(self) -> Dict[str, Any]:
        return self.client.request("/jobs")

    def get_by_employer(self, employer_id: str) -> Dict[str, Any]:
        return self.client.request(f"/jobs/employer/{employer_id}")

    def create(self, job: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.request("/jobs", method="POST", body=job)

    def update(self, job_id: str, job: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.request(f"/jobs/{job_id}", method="PUT", body=job)

    def delete(self, job_id: str) -> Dict[str, Any]:
        return self.client.request(f"/jobs/{job_id}", method="DELETE")
