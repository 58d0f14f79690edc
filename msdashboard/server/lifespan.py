"""Application lifespan management - startup and shutdown sequences.

The Starlette ``lifespan`` context manager delegates to the
:class:`~msdashboard.runtime.DashboardService` stored on ``app.state``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from starlette.applications import Starlette

from msdashboard.constants import SERVER_NAME, SERVER_VERSION
from msdashboard.runtime.service import DashboardService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: Starlette) -> AsyncIterator[None]:
    service: DashboardService = app.state.dashboard_service
    logger.info("---- %s v%s lifespan startup ----", SERVER_NAME, SERVER_VERSION)
    await service.start()
    try:
        yield
    finally:
        logger.info("%s lifespan shutdown", SERVER_NAME)
        await service.stop()
