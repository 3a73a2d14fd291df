"""Pipeline lifecycle hooks."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from todo_server.context import RequestContext
from todo_server.stage import PipelineStage

ContextCallback = Callable[[RequestContext], Awaitable[None]]


class PipelineHook:
    """Observer notified as a request moves through the pipeline.

    ``on_pipeline_start`` runs before the first stage; an error raised
    there is handled like a stage error. ``on_stage`` runs after every
    normal stage with the error it raised, if any. ``on_pipeline_end``
    runs once ``ctx.response`` is set, on success and error paths alike.
    Failures in ``on_stage`` and ``on_pipeline_end`` are logged and never
    change the response.
    """

    async def on_pipeline_start(self, ctx: RequestContext) -> None:
        pass

    async def on_stage(
        self, ctx: RequestContext, stage: PipelineStage, error: Exception | None
    ) -> None:
        pass

    async def on_pipeline_end(self, ctx: RequestContext) -> None:
        pass


class BeforePipeline(PipelineHook):
    """Runs ``callback(ctx)`` before the first stage."""

    def __init__(self, callback: ContextCallback) -> None:
        self.callback = callback

    async def on_pipeline_start(self, ctx: RequestContext) -> None:
        await self.callback(ctx)


class AfterPipeline(PipelineHook):
    """Runs ``callback(ctx)`` once the response is known."""

    def __init__(self, callback: ContextCallback) -> None:
        self.callback = callback

    async def on_pipeline_end(self, ctx: RequestContext) -> None:
        await self.callback(ctx)
