"""Structured logging setup via structlog."""

from auditlog.core.logging.setup import configure_logging


__all__ = [
    "configure_logging",
]
