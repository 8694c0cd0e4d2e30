"""Application errors shared by every layer of the FOCCACIA service."""

from enum import Enum
from typing import Any, Dict


class ErrorKind(Enum):
    """The five kinds of failure the service layer can report."""

    INVALID_DATA = "InvalidData"
    NOT_FOUND = "NotFound"
    NOT_AUTHORIZED = "NotAuthorized"
    CONFLICT = "Conflict"
    INTERNAL_ERROR = "InternalError"

    @property
    def http_status(self) -> int:
        """HTTP status a boundary adapter should answer with."""
        return _HTTP_STATUS[self]


_HTTP_STATUS = {
    ErrorKind.INVALID_DATA: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.NOT_AUTHORIZED: 403,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL_ERROR: 500,
}


class FoccaciaError(Exception):
    """Base exception for application errors."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Structured form handed to boundary adapters."""
        return {"kind": self.kind.value, "message": self.message}


class InvalidDataError(FoccaciaError):
    """Caller input is missing or malformed."""

    kind = ErrorKind.INVALID_DATA


class NotFoundError(FoccaciaError):
    """Referenced entity does not exist."""

    kind = ErrorKind.NOT_FOUND


class NotAuthorizedError(FoccaciaError):
    """Caller is known but not allowed to perform the operation."""

    kind = ErrorKind.NOT_AUTHORIZED


class ConflictError(FoccaciaError):
    """Uniqueness violation."""

    kind = ErrorKind.CONFLICT


class InternalError(FoccaciaError):
    """Storage or remote API failure."""

    kind = ErrorKind.INTERNAL_ERROR
