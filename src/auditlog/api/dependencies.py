"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from auditlog.core.loader import TypeLoader
from auditlog.policy import AuditPolicyEngine


def get_policy_engine(request: Request) -> AuditPolicyEngine:
    """Return the engine installed on the application."""
    return request.app.state.policy_engine


# Type alias for policy engine dependency
PolicyEngine = Annotated[AuditPolicyEngine, Depends(get_policy_engine)]


def get_type_loader(engine: PolicyEngine) -> TypeLoader:
    """Return a loader that only resolves the engine's mapped types."""
    return TypeLoader(engine.introspector, allow_import=False)


Loader = Annotated[TypeLoader, Depends(get_type_loader)]
