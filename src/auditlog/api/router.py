"""Admin endpoints for inspecting and changing the audit policy."""

from fastapi import APIRouter, status
from pydantic import BaseModel

from auditlog.api.dependencies import Loader, PolicyEngine
from auditlog.api.schemas import (
    AuditTypesRequest,
    ExceptionsResponse,
    StrategyResponse,
    TypeStatus,
)
from auditlog.core.loader import name_of, names_of
from auditlog.policy import AuditPolicyEngine


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str


# Create root API router
api_router = APIRouter()

# Health check endpoints (no /api/v1 prefix)
health_router = APIRouter(tags=["health"])

audit_router = APIRouter(prefix="/audit", tags=["audit"])


@health_router.get(
    "/health/live",
    response_model=HealthResponse,
    summary="Liveness check",
)
async def liveness() -> HealthResponse:
    """Report that the process is up."""
    return HealthResponse(status="alive")


def _status(engine: AuditPolicyEngine, cls: type) -> TypeStatus:
    return TypeStatus(
        type=name_of(cls),
        audited=engine.is_audited(cls),
        implicitly_audited=engine.is_implicitly_audited(cls),
    )


@audit_router.get("/strategy", response_model=StrategyResponse)
def get_strategy(engine: PolicyEngine) -> StrategyResponse:
    """Return the active auditing strategy."""
    return StrategyResponse(strategy=engine.get_strategy())


@audit_router.get("/types", response_model=list[TypeStatus])
def list_types(engine: PolicyEngine) -> list[TypeStatus]:
    """Return the audit status of every mapped type, sorted by name."""
    types = sorted(engine.introspector.types_with_metadata(), key=name_of)
    return [_status(engine, cls) for cls in types]


@audit_router.get("/types/{type_name}", response_model=TypeStatus)
def get_type(type_name: str, engine: PolicyEngine, loader: Loader) -> TypeStatus:
    """Return the audit status of one mapped type."""
    return _status(engine, loader.load_by_name(type_name))


@audit_router.get("/exceptions", response_model=ExceptionsResponse)
def get_exceptions(engine: PolicyEngine) -> ExceptionsResponse:
    """Return the exception list of the active strategy."""
    return ExceptionsResponse(
        strategy=engine.get_strategy(),
        types=names_of(engine.get_exceptions()),
    )


@audit_router.post("/start", status_code=status.HTTP_204_NO_CONTENT)
def start_auditing(
    body: AuditTypesRequest, engine: PolicyEngine, loader: Loader
) -> None:
    """Start auditing the named types."""
    engine.start_auditing([loader.load_by_name(name) for name in body.types])


@audit_router.post("/stop", status_code=status.HTTP_204_NO_CONTENT)
def stop_auditing(
    body: AuditTypesRequest, engine: PolicyEngine, loader: Loader
) -> None:
    """Stop auditing the named types."""
    engine.stop_auditing([loader.load_by_name(name) for name in body.types])


# Create versioned API router
v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(audit_router)

# Include routers in main api_router
api_router.include_router(health_router)
api_router.include_router(v1_router)
