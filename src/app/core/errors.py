"""Domain errors raised by services and mapped to HTTP responses by the API layer."""

from __future__ import annotations

from typing import Any


class ApiError(Exception):
    """Base class for errors that carry an HTTP status code."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ApiError):
    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(ApiError):
    status_code = 401
    default_message = "Authentication required"


class PermissionDeniedError(ApiError):
    status_code = 403
    default_message = "You do not have permission to perform this action"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(ApiError):
    status_code = 409
    default_message = "Resource already exists or violates a constraint"


class RateLimitExceededError(ApiError):
    status_code = 429
    default_message = "Too many requests, please try again later"


class PaymentGatewayError(ApiError):
    """A payment provider rejected the call or could not be reached."""

    status_code = 502
    default_message = "Payment provider request failed"
