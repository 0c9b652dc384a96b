"""Database layer - base model, mixins and session management."""

from auditlog.core.database.base import Base, TimestampMixin
from auditlog.core.database.session import build_engine, build_session_registry


__all__ = [
    "Base",
    "TimestampMixin",
    "build_engine",
    "build_session_registry",
]
