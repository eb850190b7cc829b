"""Database layer - engine and session management, base models, and mixins."""

from orbit_rbac.core.database.base import (
    Base,
    OrganizationMixin,
    TimestampMixin,
    UTCDateTime,
    UUIDMixin,
)
from orbit_rbac.core.database.session import (
    create_db_engine,
    create_schema,
    create_session_factory,
)


__all__ = [
    "Base",
    "OrganizationMixin",
    "TimestampMixin",
    "UTCDateTime",
    "UUIDMixin",
    "create_db_engine",
    "create_schema",
    "create_session_factory",
]
