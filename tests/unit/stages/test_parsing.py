"""Tests for the BodyParsing stage."""

from __future__ import annotations

import json
from typing import Any

import pytest

from todo_server.exceptions import BadRequest, PayloadTooLarge
from todo_server.stages.parsing import BodyParsing, is_json, parse_form


def _json_headers(body: bytes) -> dict[str, str]:
    return {"content-type": "application/json", "content-length": str(len(body))}


class TestHelpers:
    @pytest.mark.parametrize(
        "content_type",
        [
            "application/json",
            "application/json; charset=utf-8",
            "application/vnd.api+json",
        ],
    )
    def test_is_json(self, content_type: str) -> None:
        assert is_json(content_type)

    def test_text_is_not_json(self) -> None:
        assert not is_json("text/plain")

    def test_parse_form_repeated_keys_become_lists(self) -> None:
        assert parse_form("a=1&b=2&a=3&c=") == {"a": ["1", "3"], "b": "2", "c": ""}


class TestBodyParsing:
    async def test_parses_json(self, make_ctx: Any) -> None:
        body = json.dumps({"title": "Купить молоко"}).encode()
        ctx = make_ctx(method="POST", headers=_json_headers(body), body=body)
        assert await BodyParsing().resolve(ctx) is None
        assert ctx.body == {"title": "Купить молоко"}

    async def test_parses_urlencoded_form(self, make_ctx: Any) -> None:
        body = b"title=Milk&completed=true"
        ctx = make_ctx(
            method="POST",
            headers={"content-type": "application/x-www-form-urlencoded"},
            body=body,
        )
        await BodyParsing().resolve(ctx)
        assert ctx.body == {"title": "Milk", "completed": "true"}

    async def test_other_content_types_left_alone(self, make_ctx: Any) -> None:
        ctx = make_ctx(
            method="POST", headers={"content-type": "text/plain"}, body=b"hello"
        )
        await BodyParsing().resolve(ctx)
        assert ctx.body is None

    async def test_no_content_type(self, make_ctx: Any) -> None:
        ctx = make_ctx()
        await BodyParsing().resolve(ctx)
        assert ctx.body is None

    async def test_empty_json_body_is_none(self, make_ctx: Any) -> None:
        ctx = make_ctx(method="POST", headers=_json_headers(b""))
        await BodyParsing().resolve(ctx)
        assert ctx.body is None

    async def test_malformed_json_is_bad_request(self, make_ctx: Any) -> None:
        body = b"{not json"
        ctx = make_ctx(method="POST", headers=_json_headers(body), body=body)
        with pytest.raises(BadRequest):
            await BodyParsing().resolve(ctx)

    async def test_too_deeply_nested_json_is_bad_request(self, make_ctx: Any) -> None:
        body = b"[" * 50_000 + b"]" * 50_000
        ctx = make_ctx(method="POST", headers=_json_headers(body), body=body)
        with pytest.raises(BadRequest) as exc_info:
            await BodyParsing().resolve(ctx)
        assert exc_info.value.detail == "Некорректное тело запроса"

    async def test_invalid_utf8_is_bad_request(self, make_ctx: Any) -> None:
        body = b"\xff\xfe"
        ctx = make_ctx(method="POST", headers=_json_headers(body), body=body)
        with pytest.raises(BadRequest):
            await BodyParsing().resolve(ctx)

    async def test_declared_length_over_limit(self, make_ctx: Any) -> None:
        ctx = make_ctx(
            method="POST",
            headers={"content-type": "application/json", "content-length": "5000"},
        )
        with pytest.raises(PayloadTooLarge):
            await BodyParsing(max_bytes=100).resolve(ctx)

    async def test_streamed_body_over_limit(self, make_ctx: Any) -> None:
        body = json.dumps({"title": "x" * 200}).encode()
        ctx = make_ctx(
            method="POST", headers={"content-type": "application/json"}, body=body
        )
        with pytest.raises(PayloadTooLarge):
            await BodyParsing(max_bytes=100).resolve(ctx)

    async def test_bad_content_length(self, make_ctx: Any) -> None:
        ctx = make_ctx(
            method="POST",
            headers={"content-type": "application/json", "content-length": "abc"},
        )
        with pytest.raises(BadRequest):
            await BodyParsing().resolve(ctx)

    async def test_client_disconnect_marks_context(self, make_request: Any) -> None:
        from starlette.requests import Request

        from todo_server.context import RequestContext

        base = make_request(method="POST", headers={"content-type": "application/json"})

        async def receive() -> dict[str, Any]:
            return {"type": "http.disconnect"}

        ctx = RequestContext(request=Request(base.scope, receive))
        with pytest.raises(BadRequest):
            await BodyParsing().resolve(ctx)
        assert ctx.disconnected is True
