"""Password hashing and bearer token authentication."""

from __future__ import annotations

import secrets
from typing import Any

import bcrypt
from starlette.concurrency import run_in_threadpool

from todo_server._types import TokenLookup
from todo_server.context import RequestContext
from todo_server.exceptions import AuthenticationFailed

# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """bcrypt hashing, run in a worker thread to keep the event loop free."""

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds
        # Checked instead of a real hash when a login names an unknown user
        self.dummy_hash = bcrypt.hashpw(
            secrets.token_urlsafe(16).encode("ascii"), bcrypt.gensalt(rounds=rounds)
        ).decode("ascii")

    async def hash(self, password: str) -> str:
        hashed = await run_in_threadpool(
            bcrypt.hashpw, _encode(password), bcrypt.gensalt(rounds=self._rounds)
        )
        return hashed.decode("ascii")

    async def verify(self, password: str, hashed: str) -> bool:
        try:
            return await run_in_threadpool(
                bcrypt.checkpw, _encode(password), hashed.encode("ascii")
            )
        except ValueError:
            return False


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class BearerAuthentication:
    """Extracts a bearer token from the Authorization header and looks up its user."""

    def __init__(
        self,
        lookup: TokenLookup,
        *,
        scheme: str = "Bearer",
        header: str = "Authorization",
    ) -> None:
        self._lookup = lookup
        self._scheme = scheme
        self._header = header

    async def __call__(self, ctx: RequestContext) -> Any:
        auth_value = ctx.request.headers.get(self._header)
        if not auth_value:
            raise AuthenticationFailed()

        parts = auth_value.split(" ", 1)
        if len(parts) != 2 or parts[0].lower() != self._scheme.lower():
            raise AuthenticationFailed("Неверный формат заголовка авторизации")

        token = parts[1].strip()
        user = await self._lookup(token)
        if user is None:
            raise AuthenticationFailed("Недействительный токен")

        ctx.state["token"] = token
        return user
