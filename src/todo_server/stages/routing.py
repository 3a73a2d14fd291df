"""Route dispatch stage."""

from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder
from starlette.responses import JSONResponse, Response

from todo_server._types import Authenticator
from todo_server.context import PipelineState, RequestContext
from todo_server.exceptions import PipelineInternalError
from todo_server.routing import RoutingTable
from todo_server.stage import PipelineStage, StageCategory
from todo_server.validation import validate_payload


def render(result: Any, status_code: int) -> Response:
    """Turn an endpoint return value into a response."""
    if isinstance(result, Response):
        return result
    if result is None and status_code == 204:
        return Response(status_code=204)
    return JSONResponse(jsonable_encoder(result), status_code=status_code)


class RouteDispatch(PipelineStage):
    """Dispatches to the route group whose prefix and route match the request."""

    category = StageCategory.ROUTING

    def __init__(
        self, table: RoutingTable, *, authenticate: Authenticator | None = None
    ) -> None:
        self._table = table
        self._authenticate = authenticate

    async def resolve(self, ctx: RequestContext) -> Response | None:
        match = self._table.resolve(ctx.request.method, ctx.request.url.path)
        if match is None:
            return None

        route = match.route
        ctx.path_params = match.path_params
        ctx.transition(PipelineState.HANDLING)

        if route.auth_required:
            if self._authenticate is None:
                raise PipelineInternalError(
                    f"{route!r} requires authentication but none is configured"
                )
            ctx.user = await self._authenticate(ctx)

        if route.body is not None:
            ctx.payload = validate_payload(route.body, ctx.body)

        result = await route.endpoint(ctx)
        return render(result, route.status_code)
