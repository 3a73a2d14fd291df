"""Todo routes — CRUD and filtering over the caller's todos."""

from __future__ import annotations

from todo_server.context import RequestContext
from todo_server.exceptions import BadRequest
from todo_server.models import TodoCreate, TodoUpdate
from todo_server.routing import RouteGroup
from todo_server.store import Store, Todo

_BOOLEANS = {"true": True, "1": True, "false": False, "0": False}

# Fields that may be omitted from an update but never cleared
_REQUIRED_FIELDS = ("title", "completed")


def _completed_filter(ctx: RequestContext) -> bool | None:
    raw = ctx.request.query_params.get("completed")
    if raw is None:
        return None
    try:
        return _BOOLEANS[raw.lower()]
    except KeyError:
        raise BadRequest("Параметр completed должен быть true или false") from None


def _category_filter(ctx: RequestContext) -> int | None:
    raw = ctx.request.query_params.get("category_id")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        raise BadRequest("Параметр category_id должен быть числом") from None


def todo_routes(store: Store) -> RouteGroup:
    router = RouteGroup("/api/todos", tag="Todos", auth_required=True)

    @router.get("/")
    async def list_todos(ctx: RequestContext) -> list[Todo]:
        """List the caller's todos, optionally filtered by completed / category_id."""
        return store.todos_for(
            ctx.user.id,
            completed=_completed_filter(ctx),
            category_id=_category_filter(ctx),
        )

    @router.post("/", status_code=201, body=TodoCreate)
    async def create_todo(ctx: RequestContext) -> Todo:
        """Create a todo."""
        payload: TodoCreate = ctx.payload
        return store.add_todo(ctx.user.id, **payload.model_dump())

    @router.get("/{todo_id:int}", responses={404: "Todo not found"})
    async def get_todo(ctx: RequestContext) -> Todo:
        """Fetch one todo."""
        return store.todo(ctx.user.id, ctx.path_params["todo_id"])

    @router.put("/{todo_id:int}", body=TodoUpdate, responses={404: "Todo not found"})
    async def update_todo(ctx: RequestContext) -> Todo:
        """Update the fields present in the body."""
        payload: TodoUpdate = ctx.payload
        changes = payload.model_dump(exclude_unset=True)
        for name in _REQUIRED_FIELDS:
            if name in changes and changes[name] is None:
                del changes[name]
        return store.update_todo(ctx.user.id, ctx.path_params["todo_id"], **changes)

    @router.delete("/{todo_id:int}", status_code=204, responses={404: "Todo not found"})
    async def delete_todo(ctx: RequestContext) -> None:
        """Delete a todo."""
        store.delete_todo(ctx.user.id, ctx.path_params["todo_id"])

    return router
