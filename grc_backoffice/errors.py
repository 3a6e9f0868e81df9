"""
Domain errors.

Services raise these instead of bare ValueError so that the
request layer can map a failure to an HTTP status by its kind,
never by matching on the message text.
"""

import enum

from fastapi import HTTPException


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    INTERNAL = "internal"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.INTERNAL: 500,
}


class GRCError(Exception):
    """Base class for every error a service raises on purpose."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class NotFoundError(GRCError):
    kind = ErrorKind.NOT_FOUND


class ValidationError(GRCError):
    kind = ErrorKind.VALIDATION


class ConflictError(GRCError):
    kind = ErrorKind.CONFLICT


class UnauthorizedError(GRCError):
    kind = ErrorKind.UNAUTHORIZED


class ForbiddenError(GRCError):
    kind = ErrorKind.FORBIDDEN


def to_http_exception(error: GRCError) -> HTTPException:
    """Translate a domain error into the HTTPException FastAPI returns."""
    return HTTPException(status_code=error.status_code, detail=error.message)
