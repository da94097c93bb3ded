"""Shared test fixtures."""

import json
from datetime import datetime, timezone

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from accessdash.config import Settings
from accessdash.services.report_relay import ReportRelay
from accessdash.upstream.client import ReportAPIClient

FIXED_NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


class FakeUpstream:
    """Scripted media API behind an httpx.MockTransport.

    Routes are keyed by ``(method, path)``; each value is either a single
    ``(status, body)`` reply or a list consumed one reply per call.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], object] = {}
        self.calls: list[httpx.Request] = []
        self.failure: Exception | None = None

    def add(self, method: str, path: str, status: int, body) -> None:
        self.routes[(method, path)] = (status, body)

    def add_sequence(self, method: str, path: str, replies: list[tuple[int, object]]) -> None:
        self.routes[(method, path)] = list(replies)

    def calls_to(self, path: str) -> list[httpx.Request]:
        return [c for c in self.calls if c.url.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.failure is not None:
            raise self.failure
        reply = self.routes.get((request.method, request.url.path))
        if reply is None:
            return httpx.Response(404, json={"error": {"message": "no route"}})
        if isinstance(reply, list):
            reply = reply.pop(0)
        status, body = reply
        if isinstance(body, bytes):
            return httpx.Response(status, content=body, headers={"content-type": "application/json"})
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, content=json.dumps(body).encode(), headers={"content-type": "application/json"})


@pytest.fixture
def settings() -> Settings:
    return Settings(
        cloud_name="demo",
        api_key="key123",
        api_secret="secret456",
        upstream_base_url="https://api.example.test/v1_1",
        _env_file=None,
    )


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def upstream_client(settings, upstream) -> ReportAPIClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))
    return ReportAPIClient(settings, http=http)


@pytest.fixture
def relay(upstream_client, settings) -> ReportRelay:
    return ReportRelay(upstream_client, settings, clock=lambda: FIXED_NOW)


@pytest.fixture
def app(relay):
    """Create a test application wired to the fake upstream."""
    from accessdash.main import create_app

    _app = create_app()
    _app.state.relay = relay
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
