"""Exception hierarchy for pipeline and route errors."""

from __future__ import annotations

from typing import Any


class PipelineException(Exception):
    """Base for all pipeline exceptions."""


class ApiError(PipelineException):
    """Client-facing error with HTTP status code and message."""

    def __init__(
        self,
        detail: str,
        *,
        status_code: int = 400,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail
        self.details = details
        self.headers = headers


class BadRequest(ApiError):
    """Malformed request (400)."""

    def __init__(self, detail: str = "Некорректный запрос") -> None:
        super().__init__(detail, status_code=400)


class ValidationFailed(ApiError):
    """Payload failed validation (400)."""

    def __init__(
        self, details: list[dict[str, Any]], detail: str = "Ошибка валидации"
    ) -> None:
        super().__init__(detail, status_code=400, details=details)


class AuthenticationFailed(ApiError):
    """Missing or invalid credentials (401)."""

    def __init__(self, detail: str = "Требуется авторизация") -> None:
        super().__init__(
            detail, status_code=401, headers={"WWW-Authenticate": "Bearer"}
        )


class NotFound(ApiError):
    """Requested resource does not exist (404)."""

    def __init__(self, detail: str = "Ресурс не найден") -> None:
        super().__init__(detail, status_code=404)


class Conflict(ApiError):
    """Resource already exists (409)."""

    def __init__(self, detail: str = "Конфликт") -> None:
        super().__init__(detail, status_code=409)


class PayloadTooLarge(ApiError):
    """Request body exceeds the configured limit (413)."""

    def __init__(self, detail: str = "Слишком большое тело запроса") -> None:
        super().__init__(detail, status_code=413)


class PipelineInternalError(PipelineException):
    """Engine-level failure, such as no stage producing a response."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ServerStartupError(PipelineException):
    """The server could not bind its listening socket."""
