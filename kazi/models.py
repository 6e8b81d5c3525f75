"""
Data contracts for the Kazi dashboard.

Every entity is owned by the remote backend; the client only holds cached
copies, so the shapes below describe the JSON the backend sends rather than
anything enforced locally.
"""

from enum import Enum
from typing import Any, Dict, Optional, TypedDict


class Role(str, Enum):
    """Account roles."""
    EMPLOYEE = "employee"  # Job seeker
    EMPLOYER = "employer"


class Locale(str, Enum):
    """Supported interface languages."""
    EN = "en"
    SW = "sw"


DEFAULT_LOCALE = Locale.SW


class Severity(str, Enum):
    """Transient message severities."""
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class Route(str, Enum):
    """Top-level screens."""
    AUTH = "auth"
    DASHBOARD = "dashboard"


class User(TypedDict, total=False):
    """Account as returned by /auth/signin and /users/profile."""
    _id: str
    name: str
    phone: str
    role: str
    location: str
    specialization: str  # employees
    jobType: str         # employers
    createdAt: str


class Job(TypedDict, total=False):
    """Job posting."""
    _id: str
    title: str
    description: str
    location: str
    category: str
    phone: str
    businessType: str
    employerId: str
    employerName: str
    language: str
    createdAt: str


class Employee(TypedDict, total=False):
    """Worker listing shown to employers."""
    _id: str
    name: str
    role: str
    specialization: str
    location: str
    phone: str
    joinDate: str


class Session(TypedDict):
    """Signed-in session."""
    user: Dict[str, Any]
    token: str
    userRole: Optional[str]


def job_key(job: Dict[str, Any]) -> Optional[str]:
    """Identifier of a job (backend uses Mongo ``_id``)."""
    value = job.get("_id", job.get("id"))
    return str(value) if value is not None else None


def user_key(user: Optional[Dict[str, Any]]) -> Optional[str]:
    """Identifier of a user, or None when unknown."""
    if not user:
        return None
    value = user.get("_id", user.get("id"))
    return str(value) if value is not None else None


def parse_locale(value: Optional[str]) -> Optional[Locale]:
    """Return the Locale for ``value`` or None if unsupported."""
    try:
        return Locale(value)
    except ValueError:
        return None
