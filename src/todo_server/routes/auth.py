"""Auth routes — registration, login, logout, current user."""

from __future__ import annotations

import logging
from typing import Any

from todo_server.auth import PasswordHasher
from todo_server.context import RequestContext
from todo_server.exceptions import AuthenticationFailed
from todo_server.models import Credentials
from todo_server.routing import RouteGroup
from todo_server.store import Store

logger = logging.getLogger(__name__)


def auth_routes(store: Store, hasher: PasswordHasher) -> RouteGroup:
    router = RouteGroup("/api/auth", tag="Auth")

    @router.post(
        "/register",
        status_code=201,
        body=Credentials,
        responses={409: "Username already taken"},
    )
    async def register(ctx: RequestContext) -> dict[str, Any]:
        """Register a new user."""
        payload: Credentials = ctx.payload
        password_hash = await hasher.hash(payload.password)
        user = store.add_user(payload.username, password_hash)
        logger.info("Registered user %d", user.id)
        return user.public()

    @router.post("/login", body=Credentials, responses={401: "Invalid credentials"})
    async def login(ctx: RequestContext) -> dict[str, Any]:
        """Exchange username and password for a bearer token."""
        payload: Credentials = ctx.payload
        user = store.user_by_username(payload.username)
        password_hash = user.password_hash if user is not None else hasher.dummy_hash
        valid = await hasher.verify(payload.password, password_hash)
        if user is None or not valid:
            raise AuthenticationFailed("Неверное имя пользователя или пароль")
        return {
            "token": store.issue_token(user),
            "token_type": "bearer",
            "user": user.public(),
        }

    @router.post("/logout", status_code=204, auth_required=True)
    async def logout(ctx: RequestContext) -> None:
        """Revoke the token used for this request."""
        store.revoke_token(ctx.state["token"])

    @router.get("/me", auth_required=True)
    async def me(ctx: RequestContext) -> dict[str, Any]:
        """Return the authenticated user."""
        return ctx.user.public()

    return router
