"""
Page controllers.

Public API:
- AuthFlowController: login / register / forgot / verification / reset
- DashboardController: role-gated dashboard actions
- filter_jobs, build_share_url: pure helpers used by the dashboard
"""

from .auth_flow import AuthFlowController, AuthStep
from .dashboard import (
    DashboardController,
    DateFilter,
    Section,
    build_share_url,
    filter_jobs,
)
from .guards import ActionBusyError, ActionGuard

__all__ = [
    "ActionBusyError",
    "ActionGuard",
    "AuthFlowController",
    "AuthStep",
    "DashboardController",
    "DateFilter",
    "Section",
    "build_share_url",
    "filter_jobs",
]
