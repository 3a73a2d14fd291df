"""RequestContext — per-request state container."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from starlette.requests import Request
from starlette.responses import Response

if TYPE_CHECKING:
    from todo_server.trace import PipelineTrace


class PipelineState(Enum):
    """States a request passes through while the pipeline runs."""

    TRACKING = "tracking"
    LOGGING = "logging"
    PARSING = "parsing"
    ROUTING = "routing"
    HANDLING = "handling"
    NOT_FOUND = "not_found"
    ERROR_TRACKING = "error_tracking"
    ERROR_HANDLING = "error_handling"
    DONE = "done"


@dataclass
class RequestContext:
    """Per-request state container mutated by pipeline stages."""

    request: Request
    body: Any | None = None
    payload: Any | None = None
    path_params: dict[str, Any] = field(default_factory=dict)
    user: Any | None = None
    span: Any | None = None
    state: dict[str, Any] = field(default_factory=dict)
    error: Exception | None = None
    response: Response | None = None
    history: list[PipelineState] = field(default_factory=list)
    trace: PipelineTrace | None = None
    disconnected: bool = False

    @property
    def current_state(self) -> PipelineState | None:
        return self.history[-1] if self.history else None

    def transition(self, state: PipelineState) -> None:
        if self.current_state is PipelineState.DONE:
            raise RuntimeError("Request processing already finished")
        if self.current_state is not state:
            self.history.append(state)

    @property
    def url(self) -> str:
        """Path plus query string, as logged for the request."""
        query = self.request.url.query
        path = self.request.url.path
        return f"{path}?{query}" if query else path
