"""Shared pytest fixtures for todo-server tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request

from todo_server.app import create_app
from todo_server.asgi import PipelineApp
from todo_server.config import Settings
from todo_server.context import RequestContext
from todo_server.store import Store


class RecordingReporter:
    """ErrorReporter double that records spans and captured exceptions."""

    def __init__(self) -> None:
        self.spans: list[dict[str, Any]] = []
        self.finished: list[tuple[dict[str, Any], int]] = []
        self.captured: list[Exception] = []

    def start_span(self, ctx: RequestContext) -> dict[str, Any]:
        span = {"name": f"{ctx.request.method} {ctx.request.url.path}"}
        self.spans.append(span)
        return span

    def finish_span(self, span: Any, status_code: int) -> None:
        self.finished.append((span, status_code))

    def capture_exception(self, exc: Exception, ctx: RequestContext) -> str | None:
        self.captured.append(exc)
        return f"event-{len(self.captured)}"


@pytest.fixture
def make_request() -> Any:
    """Factory for creating Starlette Request objects with an optional body."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
        body: bytes = b"",
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
            "scheme": "http",
            "server": ("test", 80),
        }
        sent = False

        async def receive() -> dict[str, Any]:
            nonlocal sent
            if sent:
                return {"type": "http.disconnect"}
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return _make


@pytest.fixture
def make_ctx(make_request: Any) -> Any:
    def _make(**kwargs: Any) -> RequestContext:
        return RequestContext(request=make_request(**kwargs))

    return _make


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, BCRYPT_ROUNDS=4)  # type: ignore[call-arg]


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def store() -> Store:
    return Store()


@pytest.fixture
def app(settings: Settings, store: Store, reporter: RecordingReporter) -> PipelineApp:
    return create_app(settings, store=store, reporter=reporter)


@pytest.fixture
async def client(app: PipelineApp) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def token(client: AsyncClient) -> str:
    """Register and log in a user, returning its bearer token."""
    credentials = {"username": "alice", "password": "secret-pass"}
    resp = await client.post("/api/auth/register", json=credentials)
    assert resp.status_code == 201
    resp = await client.post("/api/auth/login", json=credentials)
    assert resp.status_code == 200
    return resp.json()["token"]


@pytest.fixture
def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
