"""Tests for the management API and the runtime service behind it."""

from __future__ import annotations

import asyncio
import time
from typing import Any, Dict, List

import httpx
import pytest
from starlette.testclient import TestClient

from msdashboard.config.schema import DashboardConfig
from msdashboard.runtime.service import DashboardService
from msdashboard.server.app import create_app

_PREFIX = "/manage/v1"


def _config() -> DashboardConfig:
    return DashboardConfig.model_validate(
        {
            "health": {"interval": 3600},
            "instances": [
                {"id": "a-1", "uri": "http://a1"},
                {
                    "id": "a-2",
                    "uri": "http://a2",
                    "endpoints": {"health": "http://a2/actuator/health"},
                },
                {
                    "id": "a-3",
                    "uri": "http://a3",
                    "endpoints": {"health": "http://a3/actuator/health"},
                },
            ],
        }
    )


def _respond(request: httpx.Request) -> httpx.Response:
    if request.url.host == "a3":
        return httpx.Response(500)
    return httpx.Response(200, json={"status": "UP"})


class _CountingTransport:
    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return _respond(request)


@pytest.fixture()
def transport() -> _CountingTransport:
    return _CountingTransport()


@pytest.fixture()
def client(transport: _CountingTransport):
    http = httpx.AsyncClient(transport=httpx.MockTransport(transport))
    service = DashboardService(_config(), client=http)
    with TestClient(create_app(service)) as test_client:
        yield test_client
    asyncio.run(http.aclose())


def _wait_for(predicate: Any, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.02)
    return False


def _instances(client: TestClient) -> Dict[str, Dict[str, Any]]:
    resp = client.get(f"{_PREFIX}/instances")
    assert resp.status_code == 200
    return {inst["id"]: inst for inst in resp.json()["instances"]}


class TestManagementApi:
    def test_lists_registered_instances(self, client: TestClient) -> None:
        instances = _instances(client)
        assert sorted(instances) == ["a-1", "a-2", "a-3"]
        assert instances["a-1"]["endpoints"] == {}
        assert instances["a-2"]["endpoints"] == {"health": "http://a2/actuator/health"}

    def test_health_is_applied_from_polls(self, client: TestClient) -> None:
        assert _wait_for(lambda: _instances(client)["a-2"]["health_status"] == "UP")
        instances = _instances(client)
        assert instances["a-1"]["health_status"] == "UNKNOWN"
        assert instances["a-3"]["health_status"] == "UNKNOWN"

    def test_get_single_instance(self, client: TestClient) -> None:
        resp = client.get(f"{_PREFIX}/instances/a-1")
        assert resp.status_code == 200
        assert resp.json()["uri"] == "http://a1"

    def test_unknown_instance_is_404(self, client: TestClient) -> None:
        resp = client.get(f"{_PREFIX}/instances/ghost")
        assert resp.status_code == 404
        assert resp.json()["error"] == "not_found"

    def test_manual_poll(self, client: TestClient, transport: _CountingTransport) -> None:
        before = len(transport.requests)
        resp = client.post(f"{_PREFIX}/instances/poll")
        assert resp.status_code == 202
        assert resp.json() == {"polls_issued": 2}
        assert _wait_for(lambda: len(transport.requests) >= before + 2)

    def test_health_summary(self, client: TestClient) -> None:
        assert _wait_for(
            lambda: client.get(f"{_PREFIX}/health").json()["instances"]["UP"] == 1
        )
        body = client.get(f"{_PREFIX}/health").json()
        assert body["status"] == "running"
        assert body["instances"]["total"] == 3
        assert body["instances"]["UNKNOWN"] == 2

    def test_events_record_outcomes(self, client: TestClient) -> None:
        def failed_a3() -> bool:
            events = client.get(f"{_PREFIX}/events", params={"instance_id": "a-3"}).json()
            return any(e["type"] == "health_retrieval_failed" for e in events["events"])

        assert _wait_for(failed_a3)
        events = client.get(f"{_PREFIX}/events").json()["events"]
        types = {e["type"] for e in events}
        assert {"instance_created", "health_retrieved", "health_retrieval_failed"} <= types
        failure = next(e for e in events if e["type"] == "health_retrieval_failed")
        assert failure["details"]["endpoint"] == "http://a3/actuator/health"

    def test_events_bad_limit(self, client: TestClient) -> None:
        resp = client.get(f"{_PREFIX}/events", params={"limit": "lots"})
        assert resp.status_code == 400
