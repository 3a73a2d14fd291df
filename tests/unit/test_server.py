"""Tests for socket binding and ApplicationServer."""

from __future__ import annotations

import asyncio
import logging
import socket
from collections.abc import Iterator

import httpx
import pytest

from todo_server.app import create_app
from todo_server.config import Settings
from todo_server.exceptions import ServerStartupError
from todo_server.server import ApplicationServer, bind_socket


@pytest.fixture
def occupied_port() -> Iterator[int]:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen()
    try:
        yield sock.getsockname()[1]
    finally:
        sock.close()


class TestBindSocket:
    def test_ephemeral_port(self) -> None:
        sock = bind_socket("127.0.0.1", 0)
        try:
            assert sock.getsockname()[1] > 0
        finally:
            sock.close()

    def test_port_in_use(self, occupied_port: int) -> None:
        with pytest.raises(ServerStartupError, match=str(occupied_port)):
            bind_socket("127.0.0.1", occupied_port)

    @pytest.mark.parametrize("port", [70000, -1])
    def test_port_out_of_range(self, port: int) -> None:
        with pytest.raises(ServerStartupError, match=str(port)):
            bind_socket("127.0.0.1", port)


class TestApplicationServer:
    async def test_serves_and_reports_ready(
        self, settings: Settings, caplog: pytest.LogCaptureFixture
    ) -> None:
        server = ApplicationServer(create_app(settings), host="127.0.0.1", port=0)
        with caplog.at_level(logging.INFO, logger="todo_server.server"):
            task = asyncio.create_task(server.serve())
            for _ in range(500):
                if server.started or task.done():
                    break
                await asyncio.sleep(0.01)
            assert server.started

            url = f"http://127.0.0.1:{server.bound_port}"
            async with httpx.AsyncClient(base_url=url) as client:
                resp = await client.get("/nowhere")
            assert resp.status_code == 404
            assert resp.json() == {"message": "Маршрут не найден"}

            server.shutdown()
            await asyncio.wait_for(task, timeout=10)

        messages = [r.getMessage() for r in caplog.records]
        assert f"🚀 Сервер запущен на http://localhost:{server.bound_port}" in messages

    async def test_bind_failure_never_reports_ready(
        self,
        settings: Settings,
        occupied_port: int,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        server = ApplicationServer(
            create_app(settings), host="127.0.0.1", port=occupied_port
        )
        with caplog.at_level(logging.INFO, logger="todo_server.server"):
            with pytest.raises(ServerStartupError):
                await server.serve()
        assert not server.started
        assert not any("🚀" in r.getMessage() for r in caplog.records)
