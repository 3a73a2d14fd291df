"""Error tracking — ErrorReporter protocol, NullReporter, SentryReporter."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import sentry_sdk
from sentry_sdk.integrations.logging import ignore_logger
from sentry_sdk.scope import use_scope

from todo_server.context import RequestContext

logger = logging.getLogger(__name__)

# Loggers whose errors are already sent through capture_exception
_HANDLED_ERROR_LOGGERS = ("todo_server.stages.errors",)


@runtime_checkable
class ErrorReporter(Protocol):
    """Pluggable interface to an error tracking service."""

    def start_span(self, ctx: RequestContext) -> Any | None: ...
    def finish_span(self, span: Any, status_code: int) -> None: ...
    def capture_exception(self, exc: Exception, ctx: RequestContext) -> str | None: ...


class NullReporter:
    """Reporter used when no tracking DSN is configured."""

    def start_span(self, ctx: RequestContext) -> Any | None:
        return None

    def finish_span(self, span: Any, status_code: int) -> None:
        pass

    def capture_exception(self, exc: Exception, ctx: RequestContext) -> str | None:
        return None


@dataclass
class SentrySpan:
    """Per-request Sentry scope together with the transaction bound to it."""

    scope: Any
    transaction: Any


class SentryReporter:
    """Reports traces and unexpected errors to Sentry.

    Each request gets its own scope forked from the current one, with the
    request transaction as its span, so errors captured for the request
    carry the transaction's trace id.
    """

    def __init__(
        self,
        dsn: str,
        *,
        traces_sample_rate: float = 1.0,
        environment: str | None = None,
        **options: Any,
    ) -> None:
        sentry_sdk.init(
            dsn=dsn,
            traces_sample_rate=traces_sample_rate,
            environment=environment,
            auto_enabling_integrations=False,
            **options,
        )
        for name in _HANDLED_ERROR_LOGGERS:
            ignore_logger(name)
        logger.info("Sentry error tracking enabled (environment=%s)", environment)

    def start_span(self, ctx: RequestContext) -> SentrySpan:
        scope = sentry_sdk.get_current_scope().fork()
        scope.set_tag("http.method", ctx.request.method)
        scope.set_tag("http.path", ctx.request.url.path)
        transaction = scope.start_transaction(
            op="http.server",
            name=f"{ctx.request.method} {ctx.request.url.path}",
            source="url",
        )
        scope.span = transaction
        return SentrySpan(scope=scope, transaction=transaction)

    def finish_span(self, span: SentrySpan, status_code: int) -> None:
        span.transaction.set_http_status(status_code)
        with use_scope(span.scope):
            span.transaction.finish()

    def capture_exception(self, exc: Exception, ctx: RequestContext) -> str | None:
        if isinstance(ctx.span, SentrySpan):
            scope = ctx.span.scope
        else:
            scope = sentry_sdk.get_current_scope().fork()
            scope.set_tag("http.method", ctx.request.method)
            scope.set_tag("http.path", ctx.request.url.path)
        if ctx.user is not None:
            scope.set_user({"id": str(getattr(ctx.user, "id", ctx.user))})
        with use_scope(scope):
            return sentry_sdk.capture_exception(exc)


def build_reporter(
    dsn: str | None,
    *,
    traces_sample_rate: float = 1.0,
    environment: str | None = None,
) -> ErrorReporter:
    """Return a Sentry reporter when a DSN is configured, else a no-op one."""
    if not dsn:
        logger.info("SENTRY_DSN not set, error tracking disabled")
        return NullReporter()
    return SentryReporter(
        dsn, traces_sample_rate=traces_sample_rate, environment=environment
    )
