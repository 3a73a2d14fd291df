"""Diagnostic routes."""

from __future__ import annotations

from todo_server.context import RequestContext
from todo_server.routing import RouteGroup

ERROR_TEST_MESSAGE = "Тестовая ошибка!"


def diagnostic_routes() -> RouteGroup:
    router = RouteGroup(tag="Diagnostics")

    @router.get("/error-test")
    async def error_test(ctx: RequestContext) -> None:
        """Always fails; used to check error tracking and the error handler."""
        raise RuntimeError(ERROR_TEST_MESSAGE)

    return router
