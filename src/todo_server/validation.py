"""Payload validation against pydantic models."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from todo_server.exceptions import ValidationFailed

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_payload(model: type[ModelT], data: Any) -> ModelT:
    """Validate a parsed request body, raising ValidationFailed (400) on errors."""
    try:
        return model.model_validate({} if data is None else data)
    except ValidationError as exc:
        raise ValidationFailed(
            [
                {
                    "field": ".".join(str(part) for part in err["loc"]) or "body",
                    "message": err["msg"],
                }
                for err in exc.errors()
            ]
        ) from None
