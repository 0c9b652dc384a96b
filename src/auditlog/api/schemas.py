"""Request and response schemas for the audit admin API."""

from pydantic import BaseModel, Field

from auditlog.policy import AuditingStrategy


class StrategyResponse(BaseModel):
    """Active auditing strategy."""

    strategy: AuditingStrategy


class TypeStatus(BaseModel):
    """Audit status of one mapped type."""

    type: str
    audited: bool
    implicitly_audited: bool


class ExceptionsResponse(BaseModel):
    """Current exception list and what it means under the strategy."""

    strategy: AuditingStrategy
    types: list[str]


class AuditTypesRequest(BaseModel):
    """Fully-qualified names of the types to start or stop auditing."""

    types: list[str] = Field(min_length=1)
