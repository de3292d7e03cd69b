"""
Application exceptions.

Services raise these; the FastAPI exception handler in ``kickoffhub.api.main``
turns them into the standard ``APIResponse`` envelope with the matching status.
"""

from __future__ import annotations

from typing import Any, Optional


class AppException(Exception):
    status_code: int = 500
    default_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationException(AppException):
    status_code = 400
    default_code = "VALIDATION_ERROR"


class AuthException(AppException):
    status_code = 401
    default_code = "UNAUTHORIZED"


class NotFoundException(AppException):
    status_code = 404
    default_code = "NOT_FOUND"


class ConflictException(AppException):
    status_code = 409
    default_code = "CONFLICT"


class UpstreamError(AppException):
    """The external football-data provider answered with an error."""

    status_code = 502
    default_code = "UPSTREAM_ERROR"


class UpstreamTimeoutError(UpstreamError):
    status_code = 504
    default_code = "UPSTREAM_TIMEOUT"


__all__ = [
    "AppException",
    "ValidationException",
    "AuthException",
    "NotFoundException",
    "ConflictException",
    "UpstreamError",
    "UpstreamTimeoutError",
]
