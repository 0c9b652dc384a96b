"""Engine and session management.

The audit policy is consulted from inside flush hooks, which run
synchronously, so the module works with a synchronous engine and a
thread-scoped session registry.
"""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import scoped_session, sessionmaker

from auditlog.config import Settings, settings as default_settings


def build_engine(settings: Settings | None = None) -> Engine:
    """Create the SQLAlchemy engine from settings.

    Args:
        settings: Settings providing database_url and database_echo

    Returns:
        A new Engine
    """
    settings = settings or default_settings
    return create_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
    )


def build_session_registry(engine: Engine) -> scoped_session:
    """Create a thread-scoped session registry bound to ``engine``.

    Calling the registry returns the current thread's session, which is
    what the configuration store and the flush hooks share.
    """
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    return scoped_session(factory)
