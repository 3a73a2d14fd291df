"""Central error handler stage — formats every error as a JSON response."""

from __future__ import annotations

import logging
from typing import Any

from starlette.exceptions import HTTPException
from starlette.responses import JSONResponse, Response

from todo_server.context import RequestContext
from todo_server.exceptions import ApiError
from todo_server.pipeline import FALLBACK_ERROR_MESSAGE
from todo_server.stage import ErrorStage, StageCategory

logger = logging.getLogger(__name__)


def error_payload(
    exc: Exception, *, expose: bool = False
) -> tuple[int, dict[str, Any], dict[str, str] | None]:
    """Map an exception to (status code, JSON body, extra headers).

    The body is always ``{"message": ...}``, with ``details`` for errors
    that carry them and ``error`` for unexpected errors when ``expose``
    is set.
    """
    if isinstance(exc, ApiError):
        body: dict[str, Any] = {"message": exc.detail}
        if exc.details is not None:
            body["details"] = exc.details
        return exc.status_code, body, exc.headers

    if isinstance(exc, HTTPException):
        return exc.status_code, {"message": str(exc.detail)}, exc.headers

    body = {"message": FALLBACK_ERROR_MESSAGE}
    if expose:
        body["error"] = f"{type(exc).__name__}: {exc}"
    return 500, body, None


class ErrorHandlerStage(ErrorStage):
    """Terminal stage: converts the raised error into a JSON error response."""

    category = StageCategory.ERROR_HANDLING

    def __init__(self, *, expose_errors: bool = False) -> None:
        self._expose_errors = expose_errors

    async def handle_error(
        self, ctx: RequestContext, exc: Exception
    ) -> Response | None:
        status_code, body, headers = error_payload(exc, expose=self._expose_errors)
        if status_code >= 500:
            logger.error(
                "Unhandled error on %s %s", ctx.request.method, ctx.url, exc_info=exc
            )
        else:
            logger.info(
                "%s %s -> %d %s",
                ctx.request.method,
                ctx.url,
                status_code,
                body["message"],
            )

        event_id = ctx.state.get("event_id")
        if event_id is not None:
            headers = {**(headers or {}), "X-Event-Id": event_id}
        return JSONResponse(body, status_code=status_code, headers=headers)
