"""Error handling module with RFC 7807 Problem Details."""

from auditlog.core.errors.exceptions import (
    AppException,
    ConfigurationError,
    NotFoundError,
    PersistenceError,
    PolicyStateError,
    TypeNotFoundError,
)


__all__ = [
    "AppException",
    "ConfigurationError",
    "NotFoundError",
    "PersistenceError",
    "PolicyStateError",
    "TypeNotFoundError",
]
