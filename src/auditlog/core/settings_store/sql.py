"""Configuration store backed by the ``global_settings`` table."""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, scoped_session

from auditlog.core.errors import PersistenceError
from auditlog.core.settings_store.base import NotifyingStore
from auditlog.core.settings_store.models import GlobalSetting


logger = structlog.get_logger()


class SqlConfigurationStore(NotifyingStore):
    """Reads configuration through the current session, writes on its own.

    Reads share the caller's thread-scoped session, so a read may autoflush
    pending changes of that session; ``suspended()`` switches autoflush off
    and defers notifications for its duration. Writes run in a separate
    session from the same factory and commit their own transaction, leaving
    the caller's pending work untouched whatever the outcome.

    Args:
        sessions: Thread-scoped session registry
    """

    def __init__(self, sessions: scoped_session[Session]) -> None:
        super().__init__()
        self.sessions = sessions

    def get_value(self, key: str) -> str | None:
        # Column select, so rows cached in the caller's identity map never
        # shadow a value committed by a write session
        return self.sessions().scalar(
            select(GlobalSetting.value).where(GlobalSetting.name == key)
        )

    def set_value(self, key: str, value: str, description: str | None = None) -> None:
        try:
            with self.sessions.session_factory() as session, session.begin():
                setting = session.get(GlobalSetting, key)
                if setting is None:
                    setting = GlobalSetting(name=key, description=description)
                    session.add(setting)
                setting.value = value
        except SQLAlchemyError as exc:
            logger.error("configuration_write_failed", key=key, error=str(exc))
            raise PersistenceError(
                f"Failed to save {key}", details={"property": key}
            ) from exc

        self._notify(key, value)

    def delete_value(self, key: str) -> None:
        try:
            with self.sessions.session_factory() as session, session.begin():
                setting = session.get(GlobalSetting, key)
                if setting is None:
                    return
                session.delete(setting)
        except SQLAlchemyError as exc:
            logger.error("configuration_delete_failed", key=key, error=str(exc))
            raise PersistenceError(
                f"Failed to delete {key}", details={"property": key}
            ) from exc

        self._notify(key, None)

    @contextmanager
    def suspended(self) -> Iterator[None]:
        with self.notifications_suspended(), self.sessions().no_autoflush:
            yield
