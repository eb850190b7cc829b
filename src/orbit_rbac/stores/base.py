"""Storage interface consumed by the authorization engine.

The engine never talks to a database directly. It calls the primitive
operations below, each of which must be atomic on its own (a single row
or a single transaction). Uniqueness invariants are enforced inside the
store so that concurrent creates of the same key produce exactly one
row and the loser receives the typed error.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol, runtime_checkable
from uuid import UUID

from orbit_rbac.rbac.schemas import (
    Membership,
    MembershipTier,
    Organization,
    Permission,
    Role,
    RoleAssignment,
)


@runtime_checkable
class AuthzStore(Protocol):
    """Persistence for organizations, permissions, roles and their junctions."""

    # Organizations

    def add_organization(self, organization: Organization) -> Organization:
        """Persist an organization.

        Raises:
            DuplicateIdentifierError: If the slug is taken
        """
        ...

    def get_organization(self, organization_id: UUID) -> Organization | None: ...

    def get_organization_by_slug(self, slug: str) -> Organization | None: ...

    def list_organizations(self) -> list[Organization]: ...

    # Permission catalog

    def add_permission(self, permission: Permission) -> Permission:
        """Append a permission to the catalog.

        Raises:
            DuplicateIdentifierError: If the id is already registered
        """
        ...

    def get_permission(self, permission_id: str) -> Permission | None: ...

    def list_permissions(self) -> list[Permission]:
        """Return the catalog in registration order."""
        ...

    # Roles

    def add_role(self, role: Role) -> Role:
        """Persist a new role.

        Raises:
            DuplicateNameError: If a non-deleted role in the same
                organization has the same normalized name
        """
        ...

    def update_role(self, role: Role) -> Role:
        """Update the descriptive fields of a live role in one atomic step.

        Only name, description, purpose and department are written; the
        stored tombstone and timestamps are kept.

        Raises:
            UnknownRoleError: If the role is missing or already deleted
            DuplicateNameError: If the new name collides with another role
        """
        ...

    def get_role(self, role_id: UUID) -> Role | None:
        """Return the role, including soft-deleted ones."""
        ...

    def find_role_by_name(self, organization_id: UUID, name: str) -> Role | None:
        """Return the non-deleted role with this normalized name, if any."""
        ...

    def list_roles(
        self, organization_id: UUID, include_deleted: bool = False
    ) -> list[Role]: ...

    def mark_role_deleted(self, role_id: UUID, deleted_at: datetime) -> Role | None:
        """Set the tombstone on a role in a single-row update.

        Returns the role as stored afterwards, or ``None`` if it does not
        exist. An existing tombstone is left untouched.
        """
        ...

    # Role grants

    def add_role_permission(self, role_id: UUID, permission_id: str) -> bool:
        """Record a grant. Returns ``False`` if it already existed."""
        ...

    def remove_role_permission(self, role_id: UUID, permission_id: str) -> bool:
        """Delete a grant. Returns ``False`` if there was none."""
        ...

    def role_permission_ids(self, role_id: UUID) -> frozenset[str]: ...

    # Memberships

    def add_membership(self, membership: Membership) -> Membership:
        """Persist a membership.

        Raises:
            AlreadyMemberError: If the (user, organization) pair exists
        """
        ...

    def get_membership(
        self, user_id: UUID, organization_id: UUID
    ) -> Membership | None: ...

    def set_membership_tier(
        self, user_id: UUID, organization_id: UUID, tier: MembershipTier
    ) -> Membership | None: ...

    def remove_membership(self, user_id: UUID, organization_id: UUID) -> bool: ...

    def list_memberships(self, organization_id: UUID) -> list[Membership]: ...

    # Role assignments

    def add_assignment(self, assignment: RoleAssignment) -> bool:
        """Record an assignment. Returns ``False`` if the triple existed."""
        ...

    def get_assignment(
        self, user_id: UUID, role_id: UUID, organization_id: UUID
    ) -> RoleAssignment | None: ...

    def remove_assignment(
        self, user_id: UUID, role_id: UUID, organization_id: UUID
    ) -> bool: ...

    def list_assignments(
        self, user_id: UUID, organization_id: UUID
    ) -> list[RoleAssignment]: ...

    def get_roles(self, role_ids: Iterable[UUID]) -> list[Role]:
        """Bulk variant of :meth:`get_role`; unknown ids are skipped."""
        ...
