"""Fallback stage for unmatched paths."""

from __future__ import annotations

from starlette.responses import JSONResponse, Response

from todo_server.context import RequestContext
from todo_server.stage import PipelineStage, StageCategory

NOT_FOUND_MESSAGE = "Маршрут не найден"


class NotFoundStage(PipelineStage):
    category = StageCategory.NOT_FOUND

    def __init__(self, message: str = NOT_FOUND_MESSAGE) -> None:
        self._message = message

    async def resolve(self, ctx: RequestContext) -> Response | None:
        return JSONResponse({"message": self._message}, status_code=404)
