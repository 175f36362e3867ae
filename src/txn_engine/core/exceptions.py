"""Application-level exceptions."""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Closed set of failure categories shared by every remote call."""

    NETWORK = "NETWORK"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION = "VALIDATION"
    SERVER = "SERVER"
    UNKNOWN = "UNKNOWN"


class AppError(Exception):
    """Base exception for application errors."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(
        self,
        message: str,
        code: str = "APP_ERROR",
        details: Optional[Any] = None,
    ):
        self.message = message
        self.code = code
        self.details = details
        super().__init__(message)


class NetworkError(AppError):
    """Raised when the remote store cannot be reached."""

    kind = ErrorKind.NETWORK

    def __init__(self, message: str = "Network error. Please check your connection.", details: Optional[Any] = None):
        super().__init__(message, code="NETWORK_ERROR", details=details)


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str, identifier: str, details: Optional[Any] = None):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND", details=details)


class ValidationError(AppError):
    """Raised when the remote store rejects a payload."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class ServerError(AppError):
    """Raised on a remote fault (5xx)."""

    kind = ErrorKind.SERVER

    def __init__(self, message: str = "Server error. Please try again later.", details: Optional[Any] = None):
        super().__init__(message, code="SERVER_ERROR", details=details)


class UnknownError(AppError):
    """Raised for failures that fit no other category."""

    kind = ErrorKind.UNKNOWN

    def __init__(self, message: str = "Unexpected error", details: Optional[Any] = None):
        super().__init__(message, code="UNKNOWN", details=details)


def error_from_status(
    status: int,
    resource: str,
    identifier: str = "",
    details: Optional[Any] = None,
) -> AppError:
    """
    Map an HTTP status code onto the error taxonomy.

    404 -> NotFoundError, 400/422 -> ValidationError, 5xx -> ServerError,
    anything else -> UnknownError.
    """
    if status == 404:
        return NotFoundError(resource, identifier, details=details)
    if status in (400, 422):
        message = _detail_message(details) or f"{resource} rejected by remote store"
        return ValidationError(message, details=details)
    if status >= 500:
        return ServerError(details=details)
    message = _detail_message(details) or f"Unexpected status {status} for {resource}"
    return UnknownError(message, details=details)


def _detail_message(details: Optional[Any]) -> Optional[str]:
    if isinstance(details, dict):
        for field in ("message", "detail", "error"):
            value = details.get(field)
            if isinstance(value, str) and value:
                return value
    return None
