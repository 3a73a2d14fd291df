"""Category routes — CRUD over the caller's categories."""

from __future__ import annotations

from todo_server.context import RequestContext
from todo_server.models import CategoryIn
from todo_server.routing import RouteGroup
from todo_server.store import Category, Store


def category_routes(store: Store) -> RouteGroup:
    router = RouteGroup("/api/categories", tag="Categories", auth_required=True)

    @router.get("/")
    async def list_categories(ctx: RequestContext) -> list[Category]:
        """List the caller's categories."""
        return store.categories_for(ctx.user.id)

    @router.post(
        "/", status_code=201, body=CategoryIn, responses={409: "Duplicate name"}
    )
    async def create_category(ctx: RequestContext) -> Category:
        """Create a category."""
        return store.add_category(ctx.user.id, ctx.payload.name)

    @router.get("/{category_id:int}", responses={404: "Category not found"})
    async def get_category(ctx: RequestContext) -> Category:
        """Fetch one category."""
        return store.category(ctx.user.id, ctx.path_params["category_id"])

    @router.put(
        "/{category_id:int}",
        body=CategoryIn,
        responses={404: "Category not found", 409: "Duplicate name"},
    )
    async def rename_category(ctx: RequestContext) -> Category:
        """Rename a category."""
        return store.rename_category(
            ctx.user.id, ctx.path_params["category_id"], ctx.payload.name
        )

    @router.delete(
        "/{category_id:int}", status_code=204, responses={404: "Category not found"}
    )
    async def delete_category(ctx: RequestContext) -> None:
        """Delete a category; its todos become uncategorised."""
        store.delete_category(ctx.user.id, ctx.path_params["category_id"])

    return router
