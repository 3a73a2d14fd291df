"""Body parsing stage — JSON and URL-encoded forms."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import parse_qsl

from starlette.requests import ClientDisconnect
from starlette.responses import Response

from todo_server.context import RequestContext
from todo_server.exceptions import BadRequest, PayloadTooLarge
from todo_server.stage import PipelineStage, StageCategory

DEFAULT_MAX_BODY_BYTES = 100 * 1024

FORM_MEDIA_TYPE = "application/x-www-form-urlencoded"


def media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


def is_json(content_type: str) -> bool:
    mt = media_type(content_type)
    return mt == "application/json" or mt.endswith("+json")


def parse_form(text: str) -> dict[str, Any]:
    """Decode a URL-encoded form; repeated keys collect into lists."""
    result: dict[str, Any] = {}
    for key, value in parse_qsl(text, keep_blank_values=True, strict_parsing=False):
        if key in result:
            existing = result[key]
            if isinstance(existing, list):
                existing.append(value)
            else:
                result[key] = [existing, value]
        else:
            result[key] = value
    return result


class BodyParsing(PipelineStage):
    """Deserializes JSON and URL-encoded bodies into ctx.body."""

    category = StageCategory.PARSING

    def __init__(self, *, max_bytes: int = DEFAULT_MAX_BODY_BYTES) -> None:
        self._max_bytes = max_bytes

    async def resolve(self, ctx: RequestContext) -> Response | None:
        content_type = ctx.request.headers.get("content-type", "")
        json_body = is_json(content_type)
        if not json_body and media_type(content_type) != FORM_MEDIA_TYPE:
            return None

        raw = await self._read(ctx)
        if not raw:
            return None

        try:
            text = raw.decode("utf-8")
            ctx.body = json.loads(text) if json_body else parse_form(text)
        except (UnicodeDecodeError, ValueError, RecursionError):
            raise BadRequest("Некорректное тело запроса") from None
        return None

    async def _read(self, ctx: RequestContext) -> bytes:
        declared = ctx.request.headers.get("content-length")
        if declared is not None:
            try:
                if int(declared) > self._max_bytes:
                    raise PayloadTooLarge()
            except ValueError:
                raise BadRequest("Некорректный заголовок Content-Length") from None

        chunks: list[bytes] = []
        size = 0
        try:
            async for chunk in ctx.request.stream():
                size += len(chunk)
                if size > self._max_bytes:
                    raise PayloadTooLarge()
                chunks.append(chunk)
        except ClientDisconnect:
            ctx.disconnected = True
            raise BadRequest("Клиент закрыл соединение") from None
        return b"".join(chunks)
