"""Management API routes.

All routes are mounted under ``/manage/v1/`` by ``server/app.py``.
"""

import logging
from collections import Counter
from typing import Any, Dict, Optional

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route, Router

from msdashboard.constants import SERVER_VERSION
from msdashboard.errors import InstanceNotFoundError
from msdashboard.instances.models import HealthStatus
from msdashboard.runtime.service import DashboardService

logger = logging.getLogger(__name__)


# ── Helpers ──────────────────────────────────────────────────────────────


def _get_service(request: Request) -> DashboardService:
    """Retrieve the DashboardService instance from app state."""
    service: Optional[DashboardService] = getattr(request.app.state, "dashboard_service", None)
    if service is None:
        raise RuntimeError("DashboardService not found on app.state")
    return service


def _error_json(error: str, message: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse({"error": error, "message": message}, status_code=status_code)


# ── GET /manage/v1/health ────────────────────────────────────────────────


async def handle_health(request: Request) -> JSONResponse:
    """Liveness probe with a per-status count of known instances."""
    service = _get_service(request)
    instances = service.directory.list_all()
    counts = Counter(inst.health_status.value for inst in instances)
    body: Dict[str, Any] = {
        "status": "running" if service.is_running else "stopped",
        "version": SERVER_VERSION,
        "instances": {
            "total": len(instances),
            **{status.value: counts.get(status.value, 0) for status in HealthStatus},
        },
    }
    return JSONResponse(body)


# ── GET /manage/v1/instances ─────────────────────────────────────────────


async def handle_instances(request: Request) -> JSONResponse:
    service = _get_service(request)
    instances = sorted(service.directory.list_all(), key=lambda inst: inst.id)
    return JSONResponse({"instances": [inst.to_dict() for inst in instances]})


async def handle_instance(request: Request) -> JSONResponse:
    service = _get_service(request)
    instance_id = request.path_params["instance_id"]
    try:
        instance = service.directory.get(instance_id)
    except InstanceNotFoundError as exc:
        return _error_json("not_found", str(exc), status_code=404)
    return JSONResponse(instance.to_dict())


# ── POST /manage/v1/instances/poll ───────────────────────────────────────


async def handle_poll(request: Request) -> JSONResponse:
    """Trigger a sweep outside the regular schedule."""
    service = _get_service(request)
    tasks = service.watcher.poll_all()
    logger.info("Manual health sweep requested: %d poll(s) issued", len(tasks))
    return JSONResponse({"polls_issued": len(tasks)}, status_code=202)


# ── GET /manage/v1/events ────────────────────────────────────────────────


async def handle_events(request: Request) -> JSONResponse:
    service = _get_service(request)
    try:
        limit = int(request.query_params.get("limit", "100"))
    except ValueError:
        return _error_json("bad_request", "limit must be an integer", status_code=400)
    instance_id = request.query_params.get("instance_id")
    events = service.get_events(limit=max(limit, 0), instance_id=instance_id)
    return JSONResponse({"events": events})


# ── Router ───────────────────────────────────────────────────────────────


management_routes = Router(
    routes=[
        Route("/health", endpoint=handle_health, methods=["GET"]),
        Route("/instances", endpoint=handle_instances, methods=["GET"]),
        Route("/instances/poll", endpoint=handle_poll, methods=["POST"]),
        Route("/instances/{instance_id}", endpoint=handle_instance, methods=["GET"]),
        Route("/events", endpoint=handle_events, methods=["GET"]),
    ]
)
