"""Database engine and session factory."""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from orbit_rbac.config import Settings, settings
from orbit_rbac.core.database.base import Base


def create_db_engine(
    database_url: str | None = None, config: Settings | None = None
) -> Engine:
    """Create an engine for the configured database.

    In-memory SQLite shares one connection across threads so that every
    session sees the same database.

    Args:
        database_url: Overrides the configured URL
        config: Settings to read defaults from

    Returns:
        A SQLAlchemy engine
    """
    config = config or settings
    url = database_url or config.database_url

    if url.startswith("sqlite"):
        kwargs: dict[str, object] = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=config.database_echo, **kwargs)

    return create_engine(
        url,
        echo=config.database_echo,
        pool_pre_ping=True,  # Verify connections before use
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create the session factory used by the SQL store."""
    return sessionmaker(
        bind=engine,
        class_=Session,
        expire_on_commit=False,
        autoflush=False,
    )


def create_schema(engine: Engine) -> None:
    """Create any missing tables. Safe to call on every start."""
    # Register the models with Base.metadata
    from orbit_rbac.core.database import models  # noqa: F401, PLC0415

    Base.metadata.create_all(engine)
