"""Todo Server - a todo API built on an explicit request pipeline."""

from todo_server.app import build_pipeline, create_app
from todo_server.asgi import PipelineApp
from todo_server.auth import BearerAuthentication, PasswordHasher
from todo_server.config import Settings, load_settings
from todo_server.context import PipelineState, RequestContext
from todo_server.exceptions import (
    ApiError,
    AuthenticationFailed,
    BadRequest,
    Conflict,
    NotFound,
    PayloadTooLarge,
    PipelineException,
    PipelineInternalError,
    ServerStartupError,
    ValidationFailed,
)
from todo_server.hooks import AfterPipeline, BeforePipeline, PipelineHook
from todo_server.pipeline import Pipeline
from todo_server.routing import Route, RouteGroup, RoutingTable
from todo_server.stage import ErrorStage, PipelineStage, StageCategory
from todo_server.store import Store
from todo_server.trace import PipelineTrace, TraceEntry
from todo_server.tracking import ErrorReporter, NullReporter, SentryReporter

__all__ = [
    "AfterPipeline",
    "ApiError",
    "AuthenticationFailed",
    "BadRequest",
    "BearerAuthentication",
    "BeforePipeline",
    "Conflict",
    "ErrorReporter",
    "ErrorStage",
    "NotFound",
    "NullReporter",
    "PasswordHasher",
    "PayloadTooLarge",
    "Pipeline",
    "PipelineApp",
    "PipelineException",
    "PipelineHook",
    "PipelineInternalError",
    "PipelineStage",
    "PipelineState",
    "PipelineTrace",
    "RequestContext",
    "Route",
    "RouteGroup",
    "RoutingTable",
    "SentryReporter",
    "ServerStartupError",
    "Settings",
    "StageCategory",
    "Store",
    "TraceEntry",
    "ValidationFailed",
    "build_pipeline",
    "create_app",
    "load_settings",
]
