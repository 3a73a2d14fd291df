"""Process start — binds the listening socket and runs uvicorn."""

from __future__ import annotations

import asyncio
import logging
import socket

import uvicorn
from starlette.types import ASGIApp

from todo_server.exceptions import ServerStartupError

logger = logging.getLogger(__name__)

READY_MESSAGE = "🚀 Сервер запущен на http://localhost:%d"


def bind_socket(host: str, port: int) -> socket.socket:
    """Bind a TCP socket, raising ServerStartupError when the port is unavailable."""
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except (OSError, OverflowError) as exc:
        sock.close()
        reason = getattr(exc, "strerror", None) or exc
        raise ServerStartupError(f"Cannot bind {host}:{port}: {reason}") from exc
    sock.set_inheritable(True)
    return sock


class ApplicationServer:
    """Runs an ASGI app under uvicorn on a pre-bound socket.

    The readiness message is logged only once uvicorn reports that it is
    serving, so a failed bind never reports readiness.
    """

    def __init__(self, app: ASGIApp, *, host: str, port: int) -> None:
        self._app = app
        self._host = host
        self._port = port
        self._server: uvicorn.Server | None = None
        self.bound_port: int | None = None

    @property
    def started(self) -> bool:
        return self._server is not None and self._server.started

    async def serve(self) -> None:
        sock = bind_socket(self._host, self._port)
        self.bound_port = sock.getsockname()[1]
        config = uvicorn.Config(self._app, lifespan="on", log_config=None)
        self._server = uvicorn.Server(config)

        task = asyncio.create_task(self._server.serve(sockets=[sock]))
        try:
            while not self._server.started and not task.done():
                await asyncio.sleep(0.01)
            if self._server.started:
                logger.info(READY_MESSAGE, self.bound_port)
            await task
        finally:
            sock.close()

        if not self._server.started:
            raise ServerStartupError("Server stopped before it was ready")

    def shutdown(self) -> None:
        if self._server is not None:
            self._server.should_exit = True
