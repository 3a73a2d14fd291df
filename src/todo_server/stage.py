"""PipelineStage and ErrorStage base classes, StageCategory enum."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import ClassVar

from starlette.responses import Response

from todo_server.context import PipelineState, RequestContext


class StageCategory(Enum):
    """Stage categories, defining strict execution order."""

    TRACKING = "tracking"
    LOGGING = "logging"
    PARSING = "parsing"
    DOCUMENTATION = "documentation"
    ROUTING = "routing"
    NOT_FOUND = "not_found"
    ERROR_TRACKING = "error_tracking"
    ERROR_HANDLING = "error_handling"

    @property
    def order(self) -> int:
        _ORDER = {
            "tracking": 1,
            "logging": 2,
            "parsing": 3,
            "documentation": 4,
            "routing": 5,
            "not_found": 6,
            "error_tracking": 7,
            "error_handling": 8,
        }
        return _ORDER[self.value]

    @property
    def state(self) -> PipelineState:
        """Pipeline state a request is in while a stage of this category runs."""
        if self is StageCategory.DOCUMENTATION:
            return PipelineState.ROUTING
        return PipelineState(self.value)


class PipelineStage(ABC):
    """Normal stage: passes control (None) or short-circuits with a response."""

    category: ClassVar[StageCategory]

    @abstractmethod
    async def resolve(self, ctx: RequestContext) -> Response | None: ...

    @property
    def name(self) -> str:
        return type(self).__name__


class ErrorStage(ABC):
    """Error-aware stage, run only after a normal stage raised."""

    category: ClassVar[StageCategory]

    @abstractmethod
    async def handle_error(
        self, ctx: RequestContext, exc: Exception
    ) -> Response | None: ...

    @property
    def name(self) -> str:
        return type(self).__name__
