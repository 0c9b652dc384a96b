"""Pytest configuration and shared fixtures."""

from collections.abc import Callable

import pytest

from auditlog.config import Settings
from auditlog.core.constants import (
    GP_AUDITING_STRATEGY,
    GP_EXCEPTIONS,
    GP_STORE_LAST_STATE_OF_DELETED_ITEMS,
)
from auditlog.core.database import Base, build_engine, build_session_registry
from auditlog.core.loader import names_of
from auditlog.core.schema import InMemorySchemaIntrospector
from auditlog.core.settings_store import InMemoryConfigurationStore
from auditlog.policy import AuditingStrategy, AuditPolicyEngine
from tests.factories.domain import build_schema
from tests.factories.models import DomainBase


@pytest.fixture
def schema() -> InMemorySchemaIntrospector:
    """Fresh in-memory clinical schema."""
    return build_schema()


@pytest.fixture
def store() -> InMemoryConfigurationStore:
    """Empty in-memory configuration store."""
    return InMemoryConfigurationStore()


@pytest.fixture
def make_engine(
    schema: InMemorySchemaIntrospector, store: InMemoryConfigurationStore
) -> Callable[..., AuditPolicyEngine]:
    """Build an engine over ``schema`` with the given configuration.

    Values are written before the engine subscribes, and the store's
    read and write logs are cleared afterwards.
    """

    def factory(
        strategy: AuditingStrategy | str | None = None,
        exceptions: list[type] | None = None,
        store_last_state: str | None = None,
    ) -> AuditPolicyEngine:
        if strategy is not None:
            store.set_value(GP_AUDITING_STRATEGY, str(strategy))
        if exceptions is not None:
            store.set_value(GP_EXCEPTIONS, ",".join(names_of(exceptions)))
        if store_last_state is not None:
            store.set_value(GP_STORE_LAST_STATE_OF_DELETED_ITEMS, store_last_state)
        store.reads.clear()
        store.writes.clear()
        return AuditPolicyEngine(schema, store)

    return factory


@pytest.fixture
def db_engine(tmp_path):
    """File-backed SQLite engine with the settings and domain tables.

    A file rather than an in-memory database, so every session gets its own
    connection and transaction.
    """
    url = f"sqlite:///{tmp_path / 'audit.db'}"
    engine = build_engine(Settings(database_url=url))
    Base.metadata.create_all(engine)
    DomainBase.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sessions(db_engine):
    """Thread-scoped session registry over ``db_engine``."""
    registry = build_session_registry(db_engine)
    yield registry
    registry.remove()
