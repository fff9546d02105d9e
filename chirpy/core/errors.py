"""Typed failures raised by the store and services.

The app maps each family to an HTTP status through ``STATUS_CODES``.
"""

from __future__ import annotations


class ChirpyError(Exception):
    """Base class for every failure surfaced to the HTTP layer."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


class NotFoundError(ChirpyError):
    pass


class ConflictError(ChirpyError):
    pass


class UnauthorizedError(ChirpyError):
    pass


class ForbiddenError(ChirpyError):
    pass


class ValidationFailedError(ChirpyError):
    pass


class StorageFailureError(ChirpyError):
    """The backing file could not be read, decoded or written."""


# -------------------------- specific failures --------------------------
class ChirpNotFoundError(NotFoundError):
    pass


class UserNotFoundError(NotFoundError):
    pass


class TokenNotFoundError(NotFoundError):
    pass


class DuplicateEmailError(ConflictError):
    pass


class InvalidCredentialsError(UnauthorizedError):
    pass


class InvalidTokenError(UnauthorizedError):
    pass


class TokenExpiredError(UnauthorizedError):
    pass


class BodyTooLongError(ValidationFailedError):
    pass


STATUS_CODES: dict[type[ChirpyError], int] = {
    NotFoundError: 404,
    ConflictError: 409,
    UnauthorizedError: 401,
    ForbiddenError: 403,
    ValidationFailedError: 400,
    StorageFailureError: 500,
}


def status_code_for(exc: ChirpyError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return 500
