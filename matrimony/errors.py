"""Service-level errors rendered as JSON ``{"message": ...}`` responses."""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    default_message = "internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Missing or malformed field or identifier."""

    status_code = 400
    default_message = "invalid request"


class ConflictError(ValidationError):
    """Duplicate resource or a state transition that already happened."""

    status_code = 409
    default_message = "conflict"


class AuthError(ServiceError):
    """No bearer token was supplied."""

    status_code = 401
    default_message = "unauthorized access"


class ForbiddenError(AuthError):
    """Token is invalid/expired, or the caller lacks the required role."""

    status_code = 403
    default_message = "forbidden access"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "not found"


class DependencyError(ServiceError):
    """Storage or payment provider failure. Message never carries internals."""

    status_code = 500
    default_message = "dependency failure"


__all__ = [
    "AuthError",
    "ConflictError",
    "DependencyError",
    "ForbiddenError",
    "NotFoundError",
    "ServiceError",
    "ValidationError",
]
