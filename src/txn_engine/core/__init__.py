"""Core utilities and shared functionality."""

from txn_engine.core.amounts import parse_amount
from txn_engine.core.timezone import (
    now_utc,
    to_utc,
    parse_timestamp,
    UTC,
)
from txn_engine.core.exceptions import (
    ErrorKind,
    AppError,
    NetworkError,
    NotFoundError,
    ValidationError,
    ServerError,
    UnknownError,
    error_from_status,
)

__all__ = [
    "parse_amount",
    "now_utc",
    "to_utc",
    "parse_timestamp",
    "UTC",
    "ErrorKind",
    "AppError",
    "NetworkError",
    "NotFoundError",
    "ValidationError",
    "ServerError",
    "UnknownError",
    "error_from_status",
]
