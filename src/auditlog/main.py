"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from sqlalchemy.orm import Session, registry as Registry, scoped_session

from auditlog.api import api_router
from auditlog.config import Settings, settings
from auditlog.core.errors.handlers import register_exception_handlers
from auditlog.core.logging import configure_logging
from auditlog.core.schema import SqlAlchemySchemaIntrospector
from auditlog.core.settings_store import SqlConfigurationStore
from auditlog.policy import AuditPolicyEngine


logger = structlog.get_logger()


def create_policy_engine(
    registry: Registry,
    sessions: scoped_session[Session],
    app_settings: Settings | None = None,
) -> AuditPolicyEngine:
    """Wire an engine over a declarative registry and the settings table.

    Args:
        registry: Registry of the application's domain models
        sessions: Thread-scoped session registry shared with the application
        app_settings: Settings supplying the property names
    """
    return AuditPolicyEngine(
        SqlAlchemySchemaIntrospector(registry),
        SqlConfigurationStore(sessions),
        settings=app_settings or settings,
    )


def create_app(engine: AuditPolicyEngine) -> FastAPI:
    """Create the admin application around a policy engine.

    Args:
        engine: The process-wide policy engine

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
        configure_logging(settings)
        logger.info(
            "application_startup",
            app_name=settings.app_name,
            environment=settings.environment,
        )
        yield
        logger.info("application_shutdown")

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.policy_engine = engine

    register_exception_handlers(app)
    app.include_router(api_router)

    return app
