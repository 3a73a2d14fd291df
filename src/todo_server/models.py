"""Request payload models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class Credentials(_Payload):
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6, max_length=128)


class CategoryIn(_Payload):
    name: str = Field(min_length=1, max_length=100)


class TodoCreate(_Payload):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    completed: bool = False
    category_id: int | None = Field(default=None, ge=1)


class TodoUpdate(_Payload):
    """Partial update: only fields present in the request are changed."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    completed: bool | None = None
    category_id: int | None = Field(default=None, ge=1)
