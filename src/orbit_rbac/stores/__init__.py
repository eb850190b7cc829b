"""Storage backends for the authorization engine."""

import structlog

from orbit_rbac.config import Settings, settings
from orbit_rbac.core.database import (
    create_db_engine,
    create_schema,
    create_session_factory,
)
from orbit_rbac.stores.base import AuthzStore
from orbit_rbac.stores.memory import InMemoryStore
from orbit_rbac.stores.sql import SqlAlchemyStore


logger = structlog.get_logger()


def create_store(
    config: Settings | None = None, database_url: str | None = None
) -> AuthzStore:
    """Build the store selected by configuration.

    The SQL backend creates any missing tables before returning.

    Args:
        config: Settings to read the backend and database URL from
        database_url: Overrides the configured URL and forces the SQL backend

    Returns:
        A ready-to-use store
    """
    config = config or settings

    if database_url is None and config.storage_backend == "memory":
        logger.info("store_created", backend="memory")
        return InMemoryStore()

    engine = create_db_engine(database_url, config=config)
    create_schema(engine)
    logger.info("store_created", backend="sql", dialect=engine.dialect.name)
    return SqlAlchemyStore(create_session_factory(engine))


__all__ = [
    "AuthzStore",
    "InMemoryStore",
    "SqlAlchemyStore",
    "create_store",
]
