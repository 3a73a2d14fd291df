"""Static routing table: route groups mounted under path prefixes."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel
from starlette.routing import compile_path

from todo_server._types import Endpoint


class Route:
    """Single endpoint registered on a route group."""

    def __init__(
        self,
        method: str,
        path: str,
        endpoint: Endpoint,
        *,
        status_code: int = 200,
        summary: str | None = None,
        auth_required: bool = False,
        body: type[BaseModel] | None = None,
        responses: Mapping[int, str] | None = None,
    ) -> None:
        self.method = method.upper()
        self.path = path
        self.endpoint = endpoint
        self.status_code = status_code
        self.summary = summary or _first_line(endpoint.__doc__) or endpoint.__name__
        self.auth_required = auth_required
        self.body = body
        self.responses = dict(responses or {})
        self._regex, self.path_format, self.param_convertors = compile_path(path)

    @property
    def methods(self) -> frozenset[str]:
        if self.method == "GET":
            return frozenset({"GET", "HEAD"})
        return frozenset({self.method})

    def match(self, method: str, path: str) -> dict[str, Any] | None:
        if method.upper() not in self.methods:
            return None
        found = self._regex.match(path)
        if found is None:
            return None
        return {
            key: self.param_convertors[key].convert(value)
            for key, value in found.groupdict().items()
        }

    def __repr__(self) -> str:
        return f"Route({self.method} {self.path!r})"


@dataclass(frozen=True)
class RouteMatch:
    """Result of resolving a request against the routing table."""

    group: RouteGroup
    route: Route
    path_params: dict[str, Any]


class RouteGroup:
    """Handlers mounted under a common path prefix."""

    def __init__(
        self, prefix: str = "", *, tag: str | None = None, auth_required: bool = False
    ) -> None:
        if prefix and (not prefix.startswith("/") or prefix.endswith("/")):
            raise ValueError(
                f"Prefix must start with '/' and not end with '/': {prefix!r}"
            )
        self.prefix = prefix
        self.tag = tag
        self.auth_required = auth_required
        self.routes: list[Route] = []

    def add_route(
        self, method: str, path: str, endpoint: Endpoint, **options: Any
    ) -> Route:
        options.setdefault("auth_required", self.auth_required)
        route = Route(method, path, endpoint, **options)
        self.routes.append(route)
        return route

    def route(
        self, method: str, path: str, **options: Any
    ) -> Callable[[Endpoint], Endpoint]:
        def decorator(endpoint: Endpoint) -> Endpoint:
            self.add_route(method, path, endpoint, **options)
            return endpoint

        return decorator

    def get(self, path: str, **options: Any) -> Callable[[Endpoint], Endpoint]:
        return self.route("GET", path, **options)

    def post(self, path: str, **options: Any) -> Callable[[Endpoint], Endpoint]:
        return self.route("POST", path, **options)

    def put(self, path: str, **options: Any) -> Callable[[Endpoint], Endpoint]:
        return self.route("PUT", path, **options)

    def patch(self, path: str, **options: Any) -> Callable[[Endpoint], Endpoint]:
        return self.route("PATCH", path, **options)

    def delete(self, path: str, **options: Any) -> Callable[[Endpoint], Endpoint]:
        return self.route("DELETE", path, **options)

    def matches_prefix(self, path: str) -> bool:
        if not self.prefix:
            return True
        return path == self.prefix or path.startswith(self.prefix + "/")

    def match(self, method: str, path: str) -> RouteMatch | None:
        if not self.matches_prefix(path):
            return None
        subpath = path[len(self.prefix) :] or "/"
        if len(subpath) > 1 and subpath.endswith("/"):
            subpath = subpath.rstrip("/") or "/"
        for route in self.routes:
            params = route.match(method, subpath)
            if params is not None:
                return RouteMatch(group=self, route=route, path_params=params)
        return None

    def __repr__(self) -> str:
        return f"RouteGroup({self.prefix!r}, routes={len(self.routes)})"


class RoutingTable:
    """Immutable set of route groups, resolved longest prefix first."""

    def __init__(self, *groups: RouteGroup) -> None:
        self._groups = tuple(sorted(groups, key=lambda g: len(g.prefix), reverse=True))

    @property
    def groups(self) -> tuple[RouteGroup, ...]:
        return self._groups

    def resolve(self, method: str, path: str) -> RouteMatch | None:
        for group in self._groups:
            match = group.match(method, path)
            if match is not None:
                return match
        return None


def _first_line(doc: str | None) -> str | None:
    if not doc:
        return None
    return doc.strip().splitlines()[0].strip() or None
