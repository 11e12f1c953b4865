# tenantboard/shared/exceptions.py
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Outcome categories reported to callers of the service layer."""

    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"


class TenantboardError(Exception):
    """
    Base exception for authorization and validation failures.

    Subclasses set `kind` and a default `message`. The HTTP layer maps
    `kind` to a status code; nothing here depends on a wire protocol.
    """

    kind: ErrorKind = ErrorKind.INVALID_INPUT
    message: str = "Request failed"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


# Authentication & Authorization Exceptions
class UnauthenticatedError(TenantboardError):
    kind = ErrorKind.UNAUTHENTICATED
    message = "Authentication required"


class ForbiddenError(TenantboardError):
    kind = ErrorKind.FORBIDDEN
    message = "Not authorized"


# Resource Not Found Exceptions
class NotFoundError(TenantboardError):
    """Raised for absent resources and for resources of another organization."""

    kind = ErrorKind.NOT_FOUND
    message = "Resource not found"


# Validation / Request Exceptions
class InvalidInputError(TenantboardError):
    kind = ErrorKind.INVALID_INPUT
    message = "Invalid request data"
