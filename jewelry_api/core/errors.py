"""Typed application errors. Mapped to HTTP responses by the handlers in main.py."""


class AppError(Exception):
    """Base error carrying an HTTP status, a machine-readable code and a safe message."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(message)


class Unauthenticated(AppError):
    """Missing, malformed, invalid or expired token, bad credentials, or vanished principal."""

    status_code = 401
    code = "unauthenticated"


class Forbidden(AppError):
    """Authenticated principal lacks a permitted role (or does not own the resource)."""

    status_code = 403
    code = "forbidden"


class ValidationError(AppError):
    status_code = 400
    code = "validation_failed"


class PayloadTooLarge(ValidationError):
    status_code = 413
    code = "payload_too_large"


class UnsupportedMediaType(ValidationError):
    status_code = 415
    code = "unsupported_media_type"


class NotFound(AppError):
    status_code = 404
    code = "not_found"


class Internal(AppError):
    """Store or hashing failure. The message is logged, never returned to the caller."""

    status_code = 500
    code = "internal_error"
