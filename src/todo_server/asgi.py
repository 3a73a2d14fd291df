"""PipelineApp — ASGI entry point running each HTTP request through a pipeline."""

from __future__ import annotations

import logging

from starlette.requests import ClientDisconnect, Request
from starlette.types import Receive, Scope, Send

from todo_server.context import RequestContext
from todo_server.pipeline import Pipeline

logger = logging.getLogger(__name__)


class PipelineApp:
    """ASGI application: one RequestContext and one pipeline run per request."""

    def __init__(self, pipeline: Pipeline) -> None:
        self.pipeline = pipeline
        # Sort stages once at startup rather than on the first request.
        self.pipeline.resolve()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return
        if scope["type"] != "http":
            await receive()
            await send({"type": "websocket.close", "code": 1000})
            return

        ctx = RequestContext(request=Request(scope, receive))
        response = await self.pipeline.run(ctx)

        # Only JSON and form bodies are read, so the stream may still hold
        # a disconnect that arrived while the handler ran.
        if ctx.disconnected or await ctx.request.is_disconnected():
            logger.debug(
                "Client went away before %s %s was answered",
                ctx.request.method,
                ctx.url,
            )
            return
        try:
            await response(scope, receive, send)
        except (ClientDisconnect, OSError):
            logger.debug("Client disconnected while sending response to %s", ctx.url)

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                logger.info("Application startup complete")
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                logger.info("Application shutdown complete")
                await send({"type": "lifespan.shutdown.complete"})
                return
