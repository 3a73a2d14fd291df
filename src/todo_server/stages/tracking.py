"""Tracking stages — TrackingStage, ErrorTrackingStage, SpanFinisher."""

from __future__ import annotations

import logging

from starlette.exceptions import HTTPException
from starlette.responses import Response

from todo_server.context import RequestContext
from todo_server.exceptions import ApiError
from todo_server.hooks import PipelineHook
from todo_server.stage import ErrorStage, PipelineStage, StageCategory
from todo_server.tracking import ErrorReporter

logger = logging.getLogger(__name__)


def is_client_error(exc: Exception) -> bool:
    """True for errors raised on purpose to answer with a 4xx status."""
    if isinstance(exc, (ApiError, HTTPException)):
        return exc.status_code < 500
    return False


class TrackingStage(PipelineStage):
    """Begins a tracking span for the request."""

    category = StageCategory.TRACKING

    def __init__(self, reporter: ErrorReporter) -> None:
        self._reporter = reporter

    async def resolve(self, ctx: RequestContext) -> Response | None:
        ctx.span = self._reporter.start_span(ctx)
        return None


class ErrorTrackingStage(ErrorStage):
    """Reports unexpected errors to the tracking service, then passes on."""

    category = StageCategory.ERROR_TRACKING

    def __init__(self, reporter: ErrorReporter) -> None:
        self._reporter = reporter

    async def handle_error(
        self, ctx: RequestContext, exc: Exception
    ) -> Response | None:
        if is_client_error(exc):
            return None
        event_id = self._reporter.capture_exception(exc, ctx)
        if event_id is not None:
            ctx.state["event_id"] = event_id
            logger.info("Reported %s as event %s", type(exc).__name__, event_id)
        return None


class SpanFinisher(PipelineHook):
    """Closes the request span with the final response status."""

    def __init__(self, reporter: ErrorReporter) -> None:
        self._reporter = reporter

    async def on_pipeline_end(self, ctx: RequestContext) -> None:
        if ctx.span is None or ctx.response is None:
            return
        self._reporter.finish_span(ctx.span, ctx.response.status_code)
