"""Documentation stage — serves Swagger UI and the OpenAPI document."""

from __future__ import annotations

from typing import Any

from fastapi.openapi.docs import get_swagger_ui_html
from starlette.responses import JSONResponse, Response

from todo_server.context import RequestContext
from todo_server.openapi import build_openapi
from todo_server.routing import RoutingTable
from todo_server.stage import PipelineStage, StageCategory


class DocumentationStage(PipelineStage):
    """Short-circuits GET requests for the interactive API documentation."""

    category = StageCategory.DOCUMENTATION

    def __init__(
        self,
        table: RoutingTable,
        *,
        title: str,
        version: str,
        path: str = "/api-docs",
    ) -> None:
        self._table = table
        self._title = title
        self._version = version
        self._path = path.rstrip("/")
        self._schema_path = f"{self._path}/openapi.json"
        self._schema: dict[str, Any] | None = None

    @property
    def schema(self) -> dict[str, Any]:
        if self._schema is None:
            self._schema = build_openapi(
                self._table, title=self._title, version=self._version
            )
        return self._schema

    async def resolve(self, ctx: RequestContext) -> Response | None:
        if ctx.request.method not in ("GET", "HEAD"):
            return None

        path = ctx.request.url.path
        if path in (self._path, self._path + "/"):
            return get_swagger_ui_html(
                openapi_url=self._schema_path, title=f"{self._title} - документация"
            )
        if path == self._schema_path:
            return JSONResponse(self.schema)
        return None
