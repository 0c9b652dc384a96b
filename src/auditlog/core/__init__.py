"""Core services and cross-cutting concerns."""

from auditlog.core.errors import (
    AppException,
    ConfigurationError,
    NotFoundError,
    PersistenceError,
    PolicyStateError,
    TypeNotFoundError,
)
from auditlog.core.loader import TypeLoader, name_of


__all__ = [
    # Errors
    "AppException",
    "ConfigurationError",
    "NotFoundError",
    "PersistenceError",
    "PolicyStateError",
    "TypeLoader",
    "TypeNotFoundError",
    "name_of",
]
