"""Tests for RequestLogging, response_timing and NotFoundStage."""

from __future__ import annotations

import json
import logging
from typing import Any

import pytest

from todo_server.pipeline import Pipeline
from todo_server.stages.not_found import NOT_FOUND_MESSAGE, NotFoundStage
from todo_server.stages.request_log import RequestLogging, response_timing


class TestRequestLogging:
    async def test_logs_method_and_url(
        self, make_ctx: Any, caplog: pytest.LogCaptureFixture
    ) -> None:
        ctx = make_ctx(method="DELETE", path="/api/todos/3", query_string="force=1")
        with caplog.at_level(logging.INFO, logger="todo_server.requests"):
            assert await RequestLogging().resolve(ctx) is None
        assert caplog.records[-1].getMessage() == "DELETE /api/todos/3?force=1"

    async def test_custom_logger(self, make_ctx: Any) -> None:
        messages: list[str] = []

        class _Capture(logging.Handler):
            def emit(self, record: logging.LogRecord) -> None:
                messages.append(record.getMessage())

        logger = logging.getLogger("test.request_log")
        logger.setLevel(logging.INFO)
        logger.addHandler(_Capture())
        await RequestLogging(logger).resolve(make_ctx(path="/x"))
        assert messages == ["GET /x"]


class TestResponseTiming:
    async def test_logs_status_and_duration(
        self, make_ctx: Any, caplog: pytest.LogCaptureFixture
    ) -> None:
        pipeline = Pipeline(NotFoundStage())
        for hook in response_timing():
            pipeline.add_hook(hook)
        with caplog.at_level(logging.INFO, logger="todo_server.requests"):
            await pipeline.run(make_ctx(path="/missing"))
        message = caplog.records[-1].getMessage()
        assert message.startswith("GET /missing -> 404 (")
        assert message.endswith("ms)")

    async def test_silent_without_start(
        self, make_ctx: Any, caplog: pytest.LogCaptureFixture
    ) -> None:
        _, finish = response_timing()
        with caplog.at_level(logging.INFO, logger="todo_server.requests"):
            await finish.on_pipeline_end(make_ctx())
        assert caplog.records == []

class TestNotFoundStage:
    async def test_default_message(self, make_ctx: Any) -> None:
        response = await NotFoundStage().resolve(make_ctx(path="/missing"))
        assert response is not None
        assert response.status_code == 404
        assert json.loads(response.body) == {"message": "Маршрут не найден"}
        assert NOT_FOUND_MESSAGE == "Маршрут не найден"

    async def test_custom_message(self, make_ctx: Any) -> None:
        response = await NotFoundStage("gone").resolve(make_ctx())
        assert response is not None
        assert json.loads(response.body) == {"message": "gone"}
