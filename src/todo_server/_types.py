"""Shared type aliases."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from todo_server.context import RequestContext

# Route endpoints and the bearer authentication hook used by route dispatch
Endpoint = Callable[[RequestContext], Awaitable[Any]]
Authenticator = Callable[[RequestContext], Awaitable[Any]]
TokenLookup = Callable[[str], Awaitable[Any]]
