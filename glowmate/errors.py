"""Application error taxonomy.

Every error carries an HTTP status, a stable machine-readable ``code`` and a
human-readable ``message``. Validation errors also carry ``details`` naming the
violated constraint. The exception handlers in ``glowmate.main`` turn these into
JSON responses.
"""

from typing import Any


class AppError(Exception):
    """Base class for errors that map onto an API response."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    message: str = "Internal server error"

    def __init__(
        self, message: str | None = None, details: str | None = None, code: str | None = None
    ):
        self.message = message or self.message
        self.details = details
        if code:
            self.code = code
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"
    message = "Invalid input data."


class DuplicateError(AppError):
    status_code = 409
    code = "EMAIL_EXISTS"
    message = "A user with this email already exists."


class InvalidCredentialsError(AppError):
    status_code = 401
    code = "INVALID_CREDENTIALS"
    message = "Invalid credentials."


class UnauthorizedError(AppError):
    status_code = 401
    code = "UNAUTHORIZED"
    message = "Authentication required"


class EmailNotVerifiedError(AppError):
    status_code = 403
    code = "EMAIL_NOT_VERIFIED"
    message = "Please verify your email address."


class InvalidTokenError(AppError):
    status_code = 400
    code = "INVALID_TOKEN"
    message = "Invalid or expired token."


class ExpiredTokenError(AppError):
    status_code = 400
    code = "EXPIRED_TOKEN"
    message = "Token has expired."


class ForbiddenError(AppError):
    status_code = 403
    code = "FORBIDDEN"
    message = "You do not have permission to perform this action."


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"
    message = "Resource not found"


class RateLimitExceededError(AppError):
    status_code = 429
    code = "TOO_MANY_REQUESTS"
    message = "Too many requests. Please try again later."


class InternalError(AppError):
    pass
