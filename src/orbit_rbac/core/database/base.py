"""SQLAlchemy declarative base and common mixins."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Dialect, ForeignKey, TypeDecorator
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class UTCDateTime(TypeDecorator[datetime]):
    """Timezone-aware datetime that comes back as UTC on every backend.

    SQLite drops tzinfo on storage; values are always written in UTC, so
    naive results are re-tagged rather than converted.
    """

    impl = DateTime
    cache_ok = True

    def process_result_value(
        self, value: datetime | None, dialect: Dialect
    ) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class UUIDMixin:
    """Mixin that adds a UUID primary key."""

    id: Mapped[UUID] = mapped_column(
        primary_key=True,
        default=uuid4,
        index=True,
    )


class TimestampMixin:
    """Mixin that adds a created_at timestamp.

    The value is set on the Python side so that records built by the
    engine carry the same timestamp the database stores.
    """

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )


class OrganizationMixin:
    """Mixin that adds organization_id for tenant scoping.

    Every tenant-scoped model inherits from this mixin. The foreign key
    references the organizations table.
    """

    organization_id: Mapped[UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
