"""
Application errors for the travel agency API.

Every error the request layer can surface belongs to one ``ErrorKind``;
each kind maps to exactly one HTTP status. Handlers raise the matching
``AppError`` subclass and the exception handler registered in
``travel_api.main`` renders the response envelope.

Usage:
    from travel_api.core.errors import NotFound

    raise NotFound("Trip not found")
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"
    CONFLICT = "CONFLICT"
    REPOSITORY_ERROR = "REPOSITORY_ERROR"


STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.REPOSITORY_ERROR: 500,
}

DEFAULT_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.UNAUTHENTICATED: "Authentication required",
    ErrorKind.FORBIDDEN: "Access denied",
    ErrorKind.NOT_FOUND: "Resource not found",
    ErrorKind.INVALID_INPUT: "Validation failed",
    ErrorKind.CONFLICT: "Resource already exists",
    ErrorKind.REPOSITORY_ERROR: "Internal server error",
}


class AppError(Exception):
    """Base exception carrying an error kind and a client-safe message."""

    kind: ErrorKind = ErrorKind.REPOSITORY_ERROR

    def __init__(self, message: str | None = None, *, detail: str | None = None) -> None:
        self.message = message or DEFAULT_MESSAGES[self.kind]
        self.detail = detail
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


class Unauthenticated(AppError):
    kind = ErrorKind.UNAUTHENTICATED


class InvalidToken(Unauthenticated):
    def __init__(self, message: str = "Invalid or expired token", *, detail: str | None = None) -> None:
        super().__init__(message, detail=detail)


class Forbidden(AppError):
    kind = ErrorKind.FORBIDDEN


class NotFound(AppError):
    kind = ErrorKind.NOT_FOUND


class InvalidInput(AppError):
    kind = ErrorKind.INVALID_INPUT


class Conflict(AppError):
    kind = ErrorKind.CONFLICT


class RepositoryError(AppError):
    """Storage failure. ``message`` names the operation that failed."""

    kind = ErrorKind.REPOSITORY_ERROR


class ConfigurationError(RuntimeError):
    """Fatal misconfiguration detected while the process is starting."""


def error_for_kind(kind: ErrorKind, message: str | None = None) -> AppError:
    for error_cls in (Unauthenticated, Forbidden, NotFound, InvalidInput, Conflict, RepositoryError):
        if error_cls.kind == kind:
            return error_cls(message)
    raise ValueError(f"Unknown error kind: {kind}")
