"""Built-in pipeline stages."""

from todo_server.stages.docs import DocumentationStage
from todo_server.stages.errors import ErrorHandlerStage, error_payload
from todo_server.stages.not_found import NOT_FOUND_MESSAGE, NotFoundStage
from todo_server.stages.parsing import BodyParsing
from todo_server.stages.request_log import RequestLogging, response_timing
from todo_server.stages.routing import RouteDispatch, render
from todo_server.stages.tracking import (
    ErrorTrackingStage,
    SpanFinisher,
    TrackingStage,
    is_client_error,
)

__all__ = [
    "NOT_FOUND_MESSAGE",
    "BodyParsing",
    "DocumentationStage",
    "ErrorHandlerStage",
    "ErrorTrackingStage",
    "NotFoundStage",
    "RequestLogging",
    "RouteDispatch",
    "SpanFinisher",
    "TrackingStage",
    "error_payload",
    "is_client_error",
    "render",
    "response_timing",
]
