"""Flush-time classification of audited instances.

Hooks a SQLAlchemy ``before_flush`` listener that asks the policy engine
which pending instances are audited and passes them to a handler. Writing
the audit records is left to the handler.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import structlog
from sqlalchemy import event
from sqlalchemy.orm import Session

from auditlog.policy.engine import AuditPolicyEngine


log = structlog.get_logger()


class AuditAction(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True)
class AuditCandidate:
    """A pending change the audit trail must record.

    Attributes:
        action: What is happening to the instance
        instance: The mapped instance
        implicit: True if audited only through an owning type
        store_last_state: For deletions, whether to snapshot the instance
    """

    action: AuditAction
    instance: Any
    implicit: bool
    store_last_state: bool = False


AuditHandler = Callable[[Session, list[AuditCandidate]], None]


def classify(
    engine: AuditPolicyEngine, action: AuditAction, instance: Any
) -> AuditCandidate | None:
    """Return a candidate if ``instance`` is audited, otherwise None.

    Args:
        engine: Policy engine to consult
        action: The pending action
        instance: SQLAlchemy model instance
    """
    cls = type(instance)
    if engine.is_audited(cls):
        implicit = False
    elif engine.is_implicitly_audited(cls):
        implicit = True
    else:
        return None

    store_last_state = (
        action is AuditAction.DELETED and engine.store_last_state_of_deleted_items()
    )
    return AuditCandidate(action, instance, implicit, store_last_state)


def collect_candidates(
    engine: AuditPolicyEngine, session: Session
) -> list[AuditCandidate]:
    """Classify every new, modified and deleted instance of ``session``."""
    pending: list[tuple[AuditAction, Any]] = []
    pending.extend((AuditAction.CREATED, obj) for obj in session.new)
    pending.extend(
        (AuditAction.UPDATED, obj)
        for obj in session.dirty
        if session.is_modified(obj)
    )
    pending.extend((AuditAction.DELETED, obj) for obj in session.deleted)

    candidates = []
    for action, obj in pending:
        candidate = classify(engine, action, obj)
        if candidate is not None:
            candidates.append(candidate)
    return candidates


def register_audit_listeners(
    engine: AuditPolicyEngine,
    handler: AuditHandler,
    target: Any = Session,
) -> Callable[..., None]:
    """Set up the ``before_flush`` listener.

    Call this during application startup.

    Args:
        engine: Policy engine to consult
        handler: Receives the session and the audited candidates of a flush
        target: Session class or instance to listen on

    Returns:
        The registered listener, for ``event.remove``
    """

    def before_flush(
        session: Session,
        _flush_context: Any,
        _instances: Any,
    ) -> None:
        candidates = collect_candidates(engine, session)
        if not candidates:
            return
        log.debug("audit_candidates_collected", count=len(candidates))
        handler(session, candidates)

    event.listen(target, "before_flush", before_flush)
    return before_flush
