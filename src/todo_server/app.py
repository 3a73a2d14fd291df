"""Application factory — assembles the pipeline and its route groups."""

from __future__ import annotations

from collections.abc import Sequence

from todo_server._types import Authenticator
from todo_server.asgi import PipelineApp
from todo_server.auth import BearerAuthentication, PasswordHasher
from todo_server.config import Settings, load_settings
from todo_server.log import setup_logging
from todo_server.pipeline import Pipeline
from todo_server.routes import (
    auth_routes,
    category_routes,
    diagnostic_routes,
    todo_routes,
)
from todo_server.routing import RouteGroup, RoutingTable
from todo_server.stages import (
    BodyParsing,
    DocumentationStage,
    ErrorHandlerStage,
    ErrorTrackingStage,
    NotFoundStage,
    RequestLogging,
    RouteDispatch,
    SpanFinisher,
    TrackingStage,
    response_timing,
)
from todo_server.store import Store, User
from todo_server.tracking import ErrorReporter, build_reporter


def build_pipeline(
    settings: Settings,
    table: RoutingTable,
    reporter: ErrorReporter,
    *,
    authenticate: Authenticator | None = None,
) -> Pipeline:
    """Assemble the request pipeline in its fixed stage order."""
    pipeline = Pipeline(
        TrackingStage(reporter),
        RequestLogging(),
        BodyParsing(max_bytes=settings.MAX_BODY_BYTES),
        DocumentationStage(
            table, title=settings.APP_TITLE, version=settings.APP_VERSION
        ),
        RouteDispatch(table, authenticate=authenticate),
        NotFoundStage(),
        ErrorTrackingStage(reporter),
        ErrorHandlerStage(expose_errors=settings.DEBUG),
        debug=settings.DEBUG,
    )
    for hook in response_timing():
        pipeline.add_hook(hook)
    pipeline.add_hook(SpanFinisher(reporter))
    return pipeline


def create_app(
    settings: Settings,
    *,
    store: Store | None = None,
    reporter: ErrorReporter | None = None,
    extra_groups: Sequence[RouteGroup] = (),
) -> PipelineApp:
    """Build the ASGI application for the given settings."""
    if reporter is None:
        reporter = build_reporter(
            settings.SENTRY_DSN,
            traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
            environment=settings.ENVIRONMENT,
        )
    if store is None:
        store = Store()
    hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)

    table = RoutingTable(
        auth_routes(store, hasher),
        category_routes(store),
        todo_routes(store),
        diagnostic_routes(),
        *extra_groups,
    )

    async def lookup(token: str) -> User | None:
        return store.user_for_token(token)

    pipeline = build_pipeline(
        settings, table, reporter, authenticate=BearerAuthentication(lookup)
    )
    return PipelineApp(pipeline)


def app_from_env() -> PipelineApp:
    """Factory for ``uvicorn --factory todo_server.app:app_from_env``."""
    settings = load_settings()
    setup_logging(settings.LOG_LEVEL)
    return create_app(settings)
