"""Integration tests for the flush hook against a real SQLAlchemy session.

The engine reads its configuration from the ``global_settings`` table
through the same thread-scoped session the domain objects are flushed in.
"""

import pytest
from sqlalchemy import event, func, select

from auditlog.core.constants import (
    GP_AUDITING_STRATEGY,
    GP_EXCEPTIONS,
    GP_STORE_LAST_STATE_OF_DELETED_ITEMS,
)
from auditlog.main import create_policy_engine
from auditlog.policy import AuditAction, register_audit_listeners
from tests.factories.models import DomainBase, Patient, PatientProfile, Tag, Visit


pytestmark = pytest.mark.integration


def summarize(batch):
    return {
        (type(c.instance).__name__, c.action, c.implicit, c.store_last_state)
        for c in batch
    }


class TestAuditListeners:
    """Tests for register_audit_listeners."""

    @pytest.fixture
    def policy(self, sessions):
        """Engine over the domain models and the settings table."""
        return create_policy_engine(DomainBase.registry, sessions)

    @pytest.fixture
    def batches(self, policy, sessions):
        """Candidate batches handed to the handler, one per flush."""
        received = []
        session = sessions()
        listener = register_audit_listeners(
            policy,
            lambda _session, candidates: received.append(candidates),
            target=session,
        )
        yield received
        event.remove(session, "before_flush", listener)

    def test_explicit_and_implicit_candidates(self, policy, sessions, batches):
        """Owned children of an audited type are flagged implicit."""
        policy.store.set_value(GP_AUDITING_STRATEGY, "NONE_EXCEPT")
        policy.start_auditing([Patient])

        session = sessions()
        session.add(
            Patient(
                identifier="P-100",
                visits=[Visit(reason="checkup")],
                profile=PatientProfile(notes="allergic to penicillin"),
                tags=[Tag(name="vip")],
            )
        )
        session.flush()

        assert summarize(batches[-1]) == {
            ("Patient", AuditAction.CREATED, False, False),
            ("Visit", AuditAction.CREATED, True, False),
            ("PatientProfile", AuditAction.CREATED, True, False),
        }

    def test_exceptions_persisted_in_settings_table(self, policy, sessions):
        policy.store.set_value(GP_AUDITING_STRATEGY, "NONE_EXCEPT")
        policy.start_auditing([Visit])

        assert policy.store.get_value(GP_EXCEPTIONS) == (
            "tests.factories.models.Visit"
        )

    def test_nothing_audited_under_none(self, policy, sessions, batches):
        policy.store.set_value(GP_AUDITING_STRATEGY, "NONE")

        session = sessions()
        session.add(Tag(name="vip"))
        session.flush()

        assert batches == []

    def test_updates_and_deletes(self, policy, sessions, batches):
        policy.store.set_value(GP_AUDITING_STRATEGY, "ALL")
        policy.store.set_value(GP_STORE_LAST_STATE_OF_DELETED_ITEMS, "true")

        session = sessions()
        tag = Tag(name="vip")
        session.add(tag)
        session.flush()

        tag.name = "very important"
        session.flush()
        assert summarize(batches[-1]) == {("Tag", AuditAction.UPDATED, False, False)}

        session.delete(tag)
        session.flush()
        assert summarize(batches[-1]) == {("Tag", AuditAction.DELETED, False, True)}

    def test_strategy_change_takes_effect_on_next_flush(
        self, policy, sessions, batches
    ):
        policy.store.set_value(GP_AUDITING_STRATEGY, "ALL")
        session = sessions()
        session.add(Tag(name="first"))
        session.flush()
        assert len(batches) == 1
        session.commit()

        policy.store.set_value(GP_AUDITING_STRATEGY, "ALL_EXCEPT")
        policy.stop_auditing([Tag])
        session.add(Tag(name="second"))
        session.flush()

        assert len(batches) == 1

    def test_configuration_change_leaves_caller_work_pending(
        self, policy, sessions, db_engine
    ):
        """Starting auditing neither commits nor discards the caller's session."""
        policy.store.set_value(GP_AUDITING_STRATEGY, "NONE_EXCEPT")
        session = sessions()
        tag = Tag(name="vip")
        session.add(tag)

        policy.start_auditing([Tag])
        assert tag in session.new
        session.rollback()

        with db_engine.connect() as connection:
            assert connection.scalar(select(func.count()).select_from(Tag)) == 0
        assert policy.is_audited(Tag)
