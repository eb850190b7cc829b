"""Immutable records exchanged between the stores and the engine.

Every entity is keyed by an opaque identifier. Relations are plain id
fields resolved through explicit store lookups; no record holds a
reference to another record.
"""

from datetime import UTC, datetime
from enum import StrEnum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


class MembershipTier(StrEnum):
    """Coarse membership level of a user inside an organization.

    Ordered from least to most privileged.
    """

    MEMBER = "member"
    ADMIN = "admin"
    OWNER = "owner"

    @property
    def rank(self) -> int:
        return list(MembershipTier).index(self)


class Record(BaseModel):
    """Base for all stored records."""

    model_config = ConfigDict(frozen=True, from_attributes=True)


class Organization(Record):
    """Tenant boundary. Owns roles, memberships and custom permissions."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    slug: str
    description: str | None = None
    created_at: datetime = Field(default_factory=utcnow)


class Permission(Record):
    """A granular permission ("function") such as ``users.view``.

    ``organization_id`` is ``None`` for system permissions that every
    tenant can grant, and set for custom permissions owned by one tenant.
    """

    id: str
    category: str
    description: str
    purpose: str | None = None
    organization_id: UUID | None = None
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def is_system(self) -> bool:
        return self.organization_id is None


class Role(Record):
    """Named, organization-scoped bundle of permissions.

    Roles are never hard-deleted; ``deleted_at`` marks the tombstone.
    """

    id: UUID = Field(default_factory=uuid4)
    organization_id: UUID
    name: str
    description: str | None = None
    purpose: str | None = None
    department: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class Membership(Record):
    """A user's membership in one organization."""

    user_id: UUID
    organization_id: UUID
    tier: MembershipTier = MembershipTier.MEMBER
    created_at: datetime = Field(default_factory=utcnow)


class RoleAssignment(Record):
    """A role held by a user inside the role's own organization."""

    user_id: UUID
    role_id: UUID
    organization_id: UUID
    created_at: datetime = Field(default_factory=utcnow)
