"""Service-level exceptions, rendered to JSON by the handlers registered in cms.main."""

from dataclasses import dataclass


class CMSError(Exception):
    """Base for errors that carry a client-safe message and an HTTP status."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


@dataclass(frozen=True)
class FieldError:
    """One failed rule on one request field."""

    field: str
    message: str


class FieldValidationError(CMSError):
    """Client input malformed or insufficient; carries field-level detail."""

    status_code = 400

    def __init__(self, errors: list[FieldError], status_code: int | None = None) -> None:
        self.errors = errors
        super().__init__("Invalid request.", status_code)


class AuthenticationFailure(CMSError):
    """Bad credentials or missing/invalid/expired token. Message stays generic."""

    status_code = 401


class AuthorizationFailure(CMSError):
    """Authenticated, but not allowed to perform the operation."""

    status_code = 401


class ConflictError(CMSError):
    status_code = 400


class NotFoundError(CMSError):
    status_code = 404


class InternalError(CMSError):
    """Store or hashing failure. The cause is logged; the client only sees the message."""

    status_code = 500

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)
