"""Request logging stage and the response timing hooks."""

from __future__ import annotations

import logging
import time

from starlette.responses import Response

from todo_server.context import RequestContext
from todo_server.hooks import AfterPipeline, BeforePipeline, PipelineHook
from todo_server.stage import PipelineStage, StageCategory

REQUEST_LOGGER = "todo_server.requests"

_STARTED_AT = "started_at"


class RequestLogging(PipelineStage):
    """Logs method and url of every request."""

    category = StageCategory.LOGGING

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(REQUEST_LOGGER)

    async def resolve(self, ctx: RequestContext) -> Response | None:
        self._logger.info("%s %s", ctx.request.method, ctx.url)
        return None


def response_timing(logger: logging.Logger | None = None) -> list[PipelineHook]:
    """Hooks logging ``METHOD url -> status (duration)`` for every response."""
    logger = logger or logging.getLogger(REQUEST_LOGGER)

    async def start(ctx: RequestContext) -> None:
        ctx.state[_STARTED_AT] = time.perf_counter()

    async def finish(ctx: RequestContext) -> None:
        started = ctx.state.get(_STARTED_AT)
        if started is None or ctx.response is None:
            return
        logger.info(
            "%s %s -> %d (%.2fms)",
            ctx.request.method,
            ctx.url,
            ctx.response.status_code,
            (time.perf_counter() - started) * 1000,
        )

    return [BeforePipeline(start), AfterPipeline(finish)]
