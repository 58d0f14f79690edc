"""Starlette ASGI application factory."""

import logging

from starlette.applications import Starlette
from starlette.routing import Mount

from msdashboard.constants import MANAGEMENT_API_PREFIX, SERVER_NAME
from msdashboard.runtime.service import DashboardService
from msdashboard.server.lifespan import app_lifespan
from msdashboard.server.management import management_routes

logger = logging.getLogger(__name__)


def create_app(service: DashboardService) -> Starlette:
    """Create the ASGI application serving the management API for *service*."""
    application = Starlette(
        lifespan=app_lifespan,
        routes=[
            Mount(MANAGEMENT_API_PREFIX, routes=management_routes.routes),
        ],
    )
    application.state.dashboard_service = service
    logger.info("Starlette ASGI app '%s' created. Manage on %s", SERVER_NAME, MANAGEMENT_API_PREFIX)
    return application
