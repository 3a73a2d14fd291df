"""Pipeline class — ordered container and execution engine for stages."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Literal

from starlette.responses import JSONResponse, Response

from todo_server.context import PipelineState, RequestContext
from todo_server.exceptions import PipelineInternalError
from todo_server.hooks import PipelineHook
from todo_server.stage import ErrorStage, PipelineStage
from todo_server.trace import PipelineTrace, TraceEntry

logger = logging.getLogger(__name__)

FALLBACK_ERROR_MESSAGE = "Внутренняя ошибка сервера"


@dataclass(frozen=True)
class ResolvedPipeline:
    """Immutable, pre-computed execution plan."""

    stages: tuple[PipelineStage, ...]
    error_stages: tuple[ErrorStage, ...] = ()
    hooks: tuple[PipelineHook, ...] = ()
    debug: bool = False


class Pipeline:
    """Ordered container of stages with a single dispatcher loop.

    Normal stages run in category order until one returns a response.
    When a stage raises, the remaining normal stages are skipped and the
    error stages run in category order until one returns a response.
    ``run`` never raises: if error handling itself fails, a bare 500 is
    returned.
    """

    def __init__(
        self, *stages: PipelineStage | ErrorStage, debug: bool = False
    ) -> None:
        self._items: list[PipelineStage | ErrorStage] = []
        self._hooks: list[PipelineHook] = []
        self._debug = debug
        self._resolved: ResolvedPipeline | None = None
        self.add(*stages)

    def add(self, *stages: PipelineStage | ErrorStage) -> Pipeline:
        for stage in stages:
            if not isinstance(stage, (PipelineStage, ErrorStage)):
                raise TypeError(f"Not a pipeline stage: {stage!r}")
        self._items.extend(stages)
        self._resolved = None
        return self

    def add_hook(self, hook: PipelineHook) -> Pipeline:
        self._hooks.append(hook)
        self._resolved = None
        return self

    def resolve(self) -> ResolvedPipeline:
        if self._resolved is not None:
            return self._resolved

        stages = [s for s in self._items if isinstance(s, PipelineStage)]
        error_stages = [s for s in self._items if isinstance(s, ErrorStage)]

        self._resolved = ResolvedPipeline(
            stages=tuple(sorted(stages, key=lambda s: s.category.order)),
            error_stages=tuple(sorted(error_stages, key=lambda s: s.category.order)),
            hooks=tuple(self._hooks),
            debug=self._debug,
        )
        return self._resolved

    async def run(self, ctx: RequestContext) -> Response:
        resolved = self.resolve()
        trace = PipelineTrace() if resolved.debug else None
        ctx.trace = trace
        started = time.perf_counter()

        try:
            for hook in resolved.hooks:
                await hook.on_pipeline_start(ctx)
            response = await _run_stages(resolved, ctx, trace)
        except Exception as exc:
            if trace is not None:
                trace.outcome = "ERROR"
                trace.error = exc
            response = await _run_error_stages(resolved, ctx, exc)

        ctx.response = response
        ctx.transition(PipelineState.DONE)

        if trace is not None:
            trace.total_duration_ms = (time.perf_counter() - started) * 1000
            logger.debug(
                "Pipeline trace for %s %s: %s",
                ctx.request.method,
                ctx.url,
                trace.summary(),
            )

        for hook in resolved.hooks:
            try:
                await hook.on_pipeline_end(ctx)
            except Exception:
                logger.exception(
                    "Hook %s failed at pipeline end", type(hook).__name__
                )

        return response


async def _run_stages(
    resolved: ResolvedPipeline,
    ctx: RequestContext,
    trace: PipelineTrace | None,
) -> Response:
    for stage in resolved.stages:
        ctx.transition(stage.category.state)
        stage_started = time.perf_counter()
        try:
            response = await stage.resolve(ctx)
        except Exception as exc:
            _record(trace, stage, stage_started, "FAILED", str(exc))
            await _notify_stage(resolved, ctx, stage, exc)
            raise

        _record(
            trace, stage, stage_started, "OK" if response is None else "RESPONDED"
        )
        await _notify_stage(resolved, ctx, stage, None)

        if response is not None:
            if trace is not None and ctx.current_state is PipelineState.NOT_FOUND:
                trace.outcome = "NOT_FOUND"
            return response

    raise PipelineInternalError("No stage produced a response")


async def _notify_stage(
    resolved: ResolvedPipeline,
    ctx: RequestContext,
    stage: PipelineStage,
    error: Exception | None,
) -> None:
    for hook in resolved.hooks:
        try:
            await hook.on_stage(ctx, stage, error)
        except Exception:
            logger.exception(
                "Hook %s failed after stage %s", type(hook).__name__, stage.name
            )


async def _run_error_stages(
    resolved: ResolvedPipeline, ctx: RequestContext, exc: Exception
) -> Response:
    ctx.error = exc
    ctx.transition(PipelineState.ERROR_TRACKING)

    for stage in resolved.error_stages:
        ctx.transition(stage.category.state)
        try:
            response = await stage.handle_error(ctx, exc)
        except Exception:
            logger.exception(
                "Error stage %s failed while handling %r", stage.name, exc
            )
            continue
        if response is not None:
            return response

    logger.error(
        "No error stage produced a response for %s %s",
        ctx.request.method,
        ctx.url,
        exc_info=exc,
    )
    ctx.transition(PipelineState.ERROR_HANDLING)
    return JSONResponse({"message": FALLBACK_ERROR_MESSAGE}, status_code=500)


def _record(
    trace: PipelineTrace | None,
    stage: PipelineStage,
    started: float,
    outcome: Literal["OK", "RESPONDED", "FAILED"],
    reason: str | None = None,
) -> None:
    if trace is None:
        return
    trace.entries.append(
        TraceEntry(
            stage_name=stage.name,
            category=stage.category,
            duration_ms=(time.perf_counter() - started) * 1000,
            outcome=outcome,
            reason=reason,
        )
    )
