"""Runtime service layer for MS Dashboard."""

from msdashboard.runtime.service import DashboardService

__all__ = ["DashboardService"]
