"""
Shared fixtures for the Kazi dashboard test suite.

- Environment isolation (no real backend URL or secrets leak into tests)
- Manual clock so timers advance only when a test says so
- In-memory storage, store and mocked backend APIs
"""

import pytest
from unittest.mock import MagicMock

from kazi.api import ApiBundle, AuthAPI, JobsAPI, UsersAPI
from kazi.common.config import KaziSettings, get_settings
from kazi.state import AppStore, MemoryStorage, Scheduler


class ManualClock:
    """Monotonic clock that only moves when advanced."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Keep tests independent of the developer's .env and shell."""
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("KAZI_API_BASE_URL", "https://api.test")
    monkeypatch.setenv("FLASK_SECRET_KEY", "test-secret-key")
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path):
    """Settings with the default timer values, a fake backend and temp storage."""
    return KaziSettings(
        api_base_url="https://api.test",
        storage_dir=str(tmp_path / "clients"),
        request_timeout=10,
        flask_secret_key="test-secret-key",
        message_timeout_seconds=5,
        resend_countdown_seconds=60,
        redirect_delay_seconds=1.5,
        logout_delay_seconds=2,
    )


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return Scheduler(clock)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage, scheduler):
    """Initialized store over empty in-memory storage."""
    app_store = AppStore(storage, scheduler=scheduler, message_timeout=5.0)
    app_store.initialize()
    return app_store


@pytest.fixture
def mock_api():
    """Backend APIs with every endpoint mocked."""
    return ApiBundle(
        auth=MagicMock(spec=AuthAPI),
        jobs=MagicMock(spec=JobsAPI),
        users=MagicMock(spec=UsersAPI),
    )


@pytest.fixture
def employee():
    return {
        "_id": "u-employee",
        "name": "Amina Wanjiku",
        "phone": "254712345678",
        "role": "employee",
        "location": "Nakuru",
        "specialization": "Farming",
    }


@pytest.fixture
def employer():
    return {
        "_id": "u-employer",
        "name": "Baraka Farms",
        "phone": "254722000111",
        "role": "employer",
        "location": "Eldoret",
        "jobType": "Agriculture",
    }


@pytest.fixture
def sample_jobs():
    return [
        {
            "_id": "j1",
            "title": "Farm Hand",
            "description": "Help with the maize harvest",
            "location": "Nakuru",
            "category": "agriculture",
            "phone": "254700000001",
            "employerId": "u-employer",
            "employerName": "Baraka Farms",
            "createdAt": "2026-10-16T08:00:00Z",
        },
        {
            "_id": "j2",
            "title": "Driver",
            "description": "Deliver produce to the market",
            "location": "Nairobi",
            "category": "driving",
            "phone": "254700000002",
            "employerId": "u-other",
            "employerName": "Soko Traders",
            "createdAt": "2026-09-01T08:00:00Z",
        },
        {
            "_id": "j3",
            "title": "Farm Manager",
            "description": "Run a dairy farm",
            "location": "Eldoret",
            "category": "agriculture",
            "phone": "254700000003",
            "employerId": "u-employer",
            "employerName": "Baraka Farms",
        },
    ]
