"""RBAC database models.

Tables:
- organizations: tenant roots with a unique slug
- permissions: the global, append-only catalog ("functions")
- roles: organization-scoped bundles, soft-deleted via deleted_at
- role_permissions: junction linking roles to permissions
- memberships: (user, organization) pairs with a tier
- role_assignments: (user, role, organization) triples

No ORM relationships are declared. Related rows are fetched by id,
which keeps the mapped objects free of reference cycles.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from orbit_rbac.core.constants import (
    MAX_CATEGORY_LENGTH,
    MAX_DEPARTMENT_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PERMISSION_ID_LENGTH,
    MAX_ROLE_NAME_LENGTH,
    MAX_SLUG_LENGTH,
)
from orbit_rbac.core.database.base import (
    Base,
    OrganizationMixin,
    TimestampMixin,
    UTCDateTime,
    UUIDMixin,
)
from orbit_rbac.rbac.schemas import MembershipTier


class OrganizationModel(Base, UUIDMixin, TimestampMixin):
    """Organization row. All tenant-scoped rows reference it."""

    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(MAX_SLUG_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, slug={self.slug})>"


class PermissionModel(Base, TimestampMixin):
    """Catalog entry keyed by its stable string identifier.

    ``position`` records registration order so listings are stable. Writers
    racing on the same position tie, and ``id`` breaks the tie.
    """

    __tablename__ = "permissions"

    id: Mapped[str] = mapped_column(String(MAX_PERMISSION_ID_LENGTH), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    category: Mapped[str] = mapped_column(
        String(MAX_CATEGORY_LENGTH),
        nullable=False,
        index=True,
    )
    description: Mapped[str] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=False,
    )
    purpose: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )
    organization_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("organizations.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Permission({self.id})>"


class RoleModel(Base, UUIDMixin, TimestampMixin, OrganizationMixin):
    """Role row.

    ``name_key`` holds the normalized name. The partial unique index
    only covers live roles, so a tombstoned name can be reused.
    """

    __tablename__ = "roles"
    __table_args__ = (
        Index(
            "uq_role_org_name_active",
            "organization_id",
            "name_key",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    name: Mapped[str] = mapped_column(String(MAX_ROLE_NAME_LENGTH), nullable=False)
    name_key: Mapped[str] = mapped_column(String(MAX_ROLE_NAME_LENGTH), nullable=False)
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )
    purpose: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )
    department: Mapped[str | None] = mapped_column(
        String(MAX_DEPARTMENT_LENGTH),
        nullable=True,
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<Role(id={self.id}, name={self.name}, "
            f"organization_id={self.organization_id})>"
        )


class RolePermissionModel(Base, TimestampMixin):
    """Junction table: role grants permission."""

    __tablename__ = "role_permissions"

    role_id: Mapped[UUID] = mapped_column(
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    permission_id: Mapped[str] = mapped_column(
        ForeignKey("permissions.id", ondelete="RESTRICT"),
        primary_key=True,
    )

    def __repr__(self) -> str:
        return (
            f"<RolePermission(role_id={self.role_id}, "
            f"permission_id={self.permission_id})>"
        )


class MembershipModel(Base, TimestampMixin):
    """A user's membership in an organization.

    Users live in the identity layer, so user_id carries no foreign key.
    """

    __tablename__ = "memberships"
    __table_args__ = (
        UniqueConstraint("user_id", "organization_id", name="uq_membership_user_org"),
    )

    user_id: Mapped[UUID] = mapped_column(primary_key=True, index=True)
    organization_id: Mapped[UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    tier: Mapped[MembershipTier] = mapped_column(
        Enum(
            MembershipTier,
            native_enum=False,
            length=20,
            values_callable=lambda tiers: [t.value for t in tiers],
        ),
        nullable=False,
        default=MembershipTier.MEMBER,
    )

    def __repr__(self) -> str:
        return (
            f"<Membership(user_id={self.user_id}, "
            f"organization_id={self.organization_id}, tier={self.tier})>"
        )


class RoleAssignmentModel(Base, TimestampMixin):
    """Junction table linking users to roles within an organization."""

    __tablename__ = "role_assignments"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "role_id", "organization_id", name="uq_role_assignment"
        ),
    )

    user_id: Mapped[UUID] = mapped_column(primary_key=True, index=True)
    role_id: Mapped[UUID] = mapped_column(
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    organization_id: Mapped[UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        return (
            f"<RoleAssignment(user_id={self.user_id}, role_id={self.role_id}, "
            f"organization_id={self.organization_id})>"
        )
