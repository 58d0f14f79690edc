"""HTTP surface of MS Dashboard: the management API."""

from msdashboard.server.app import create_app

__all__ = ["create_app"]
