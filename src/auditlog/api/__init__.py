"""Admin HTTP API."""

from auditlog.api.router import api_router


__all__ = [
    "api_router",
]
