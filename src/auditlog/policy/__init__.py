"""Audit policy: strategy, exceptions, implicit audit and caching."""

from auditlog.policy.cache import CacheSlot, PolicyCache
from auditlog.policy.closure import AssociationClosure
from auditlog.policy.engine import AuditPolicyEngine
from auditlog.policy.exception_set import ExceptionSetManager
from auditlog.policy.guard import ReentrancyGuard
from auditlog.policy.listeners import (
    AuditAction,
    AuditCandidate,
    register_audit_listeners,
)
from auditlog.policy.strategy import AuditingStrategy
from auditlog.policy.subclasses import SubclassResolver


__all__ = [
    "AssociationClosure",
    "AuditAction",
    "AuditCandidate",
    "AuditPolicyEngine",
    "AuditingStrategy",
    "CacheSlot",
    "ExceptionSetManager",
    "PolicyCache",
    "ReentrancyGuard",
    "SubclassResolver",
    "register_audit_listeners",
]
