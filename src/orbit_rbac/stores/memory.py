"""In-process store backed by dictionaries.

Every public method holds one re-entrant lock for its whole body, so
each primitive operation is atomic and readers never see a half-applied
write. Records are immutable; updates replace the stored object.
"""

import threading
from collections.abc import Iterable
from datetime import datetime
from uuid import UUID

from orbit_rbac.core.errors import (
    AlreadyMemberError,
    DuplicateIdentifierError,
    DuplicateNameError,
    UnknownRoleError,
)
from orbit_rbac.core.utils import normalize_role_name
from orbit_rbac.rbac.schemas import (
    Membership,
    MembershipTier,
    Organization,
    Permission,
    Role,
    RoleAssignment,
)


class InMemoryStore:
    """Arena-style implementation of :class:`~orbit_rbac.stores.base.AuthzStore`."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._organizations: dict[UUID, Organization] = {}
        self._slugs: dict[str, UUID] = {}
        self._permissions: dict[str, Permission] = {}
        self._roles: dict[UUID, Role] = {}
        self._role_permissions: dict[UUID, set[str]] = {}
        self._memberships: dict[tuple[UUID, UUID], Membership] = {}
        # (user_id, organization_id) -> role_id -> assignment
        self._assignments: dict[tuple[UUID, UUID], dict[UUID, RoleAssignment]] = {}

    # Organizations

    def add_organization(self, organization: Organization) -> Organization:
        with self._lock:
            if organization.slug in self._slugs:
                raise DuplicateIdentifierError(
                    f"Organization slug '{organization.slug}' is already taken",
                    details={"slug": organization.slug},
                )
            self._organizations[organization.id] = organization
            self._slugs[organization.slug] = organization.id
            return organization

    def get_organization(self, organization_id: UUID) -> Organization | None:
        with self._lock:
            return self._organizations.get(organization_id)

    def get_organization_by_slug(self, slug: str) -> Organization | None:
        with self._lock:
            organization_id = self._slugs.get(slug)
            if organization_id is None:
                return None
            return self._organizations[organization_id]

    def list_organizations(self) -> list[Organization]:
        with self._lock:
            return list(self._organizations.values())

    # Permission catalog

    def add_permission(self, permission: Permission) -> Permission:
        with self._lock:
            if permission.id in self._permissions:
                raise DuplicateIdentifierError(
                    f"Permission '{permission.id}' is already registered",
                    details={"permission_id": permission.id},
                )
            self._permissions[permission.id] = permission
            return permission

    def get_permission(self, permission_id: str) -> Permission | None:
        with self._lock:
            return self._permissions.get(permission_id)

    def list_permissions(self) -> list[Permission]:
        with self._lock:
            return list(self._permissions.values())

    # Roles

    def _name_taken(self, role: Role) -> bool:
        key = normalize_role_name(role.name)
        return any(
            other.id != role.id
            and other.organization_id == role.organization_id
            and not other.is_deleted
            and normalize_role_name(other.name) == key
            for other in self._roles.values()
        )

    def add_role(self, role: Role) -> Role:
        with self._lock:
            if self._name_taken(role):
                raise DuplicateNameError(details={"name": role.name})
            self._roles[role.id] = role
            self._role_permissions.setdefault(role.id, set())
            return role

    def update_role(self, role: Role) -> Role:
        with self._lock:
            stored = self._roles.get(role.id)
            if stored is None or stored.is_deleted:
                raise UnknownRoleError(role.id)
            if self._name_taken(role):
                raise DuplicateNameError(details={"name": role.name})
            # Only descriptive fields; the tombstone is never overwritten
            updated = stored.model_copy(
                update={
                    "name": role.name,
                    "description": role.description,
                    "purpose": role.purpose,
                    "department": role.department,
                }
            )
            self._roles[role.id] = updated
            return updated

    def get_role(self, role_id: UUID) -> Role | None:
        with self._lock:
            return self._roles.get(role_id)

    def get_roles(self, role_ids: Iterable[UUID]) -> list[Role]:
        with self._lock:
            return [self._roles[rid] for rid in role_ids if rid in self._roles]

    def find_role_by_name(self, organization_id: UUID, name: str) -> Role | None:
        key = normalize_role_name(name)
        with self._lock:
            for role in self._roles.values():
                if (
                    role.organization_id == organization_id
                    and not role.is_deleted
                    and normalize_role_name(role.name) == key
                ):
                    return role
            return None

    def list_roles(
        self, organization_id: UUID, include_deleted: bool = False
    ) -> list[Role]:
        with self._lock:
            return [
                role
                for role in self._roles.values()
                if role.organization_id == organization_id
                and (include_deleted or not role.is_deleted)
            ]

    def mark_role_deleted(self, role_id: UUID, deleted_at: datetime) -> Role | None:
        with self._lock:
            role = self._roles.get(role_id)
            if role is None or role.is_deleted:
                return role
            role = role.model_copy(update={"deleted_at": deleted_at})
            self._roles[role_id] = role
            return role

    # Role grants

    def add_role_permission(self, role_id: UUID, permission_id: str) -> bool:
        with self._lock:
            granted = self._role_permissions.setdefault(role_id, set())
            if permission_id in granted:
                return False
            granted.add(permission_id)
            return True

    def remove_role_permission(self, role_id: UUID, permission_id: str) -> bool:
        with self._lock:
            granted = self._role_permissions.get(role_id, set())
            if permission_id not in granted:
                return False
            granted.discard(permission_id)
            return True

    def role_permission_ids(self, role_id: UUID) -> frozenset[str]:
        with self._lock:
            return frozenset(self._role_permissions.get(role_id, ()))

    # Memberships

    def add_membership(self, membership: Membership) -> Membership:
        key = (membership.user_id, membership.organization_id)
        with self._lock:
            if key in self._memberships:
                raise AlreadyMemberError(
                    details={
                        "user_id": str(membership.user_id),
                        "organization_id": str(membership.organization_id),
                    }
                )
            self._memberships[key] = membership
            return membership

    def get_membership(self, user_id: UUID, organization_id: UUID) -> Membership | None:
        with self._lock:
            return self._memberships.get((user_id, organization_id))

    def set_membership_tier(
        self, user_id: UUID, organization_id: UUID, tier: MembershipTier
    ) -> Membership | None:
        key = (user_id, organization_id)
        with self._lock:
            membership = self._memberships.get(key)
            if membership is None:
                return None
            membership = membership.model_copy(update={"tier": tier})
            self._memberships[key] = membership
            return membership

    def remove_membership(self, user_id: UUID, organization_id: UUID) -> bool:
        with self._lock:
            return self._memberships.pop((user_id, organization_id), None) is not None

    def list_memberships(self, organization_id: UUID) -> list[Membership]:
        with self._lock:
            return [
                m
                for m in self._memberships.values()
                if m.organization_id == organization_id
            ]

    # Role assignments

    def add_assignment(self, assignment: RoleAssignment) -> bool:
        key = (assignment.user_id, assignment.organization_id)
        with self._lock:
            held = self._assignments.setdefault(key, {})
            if assignment.role_id in held:
                return False
            held[assignment.role_id] = assignment
            return True

    def get_assignment(
        self, user_id: UUID, role_id: UUID, organization_id: UUID
    ) -> RoleAssignment | None:
        with self._lock:
            return self._assignments.get((user_id, organization_id), {}).get(role_id)

    def remove_assignment(
        self, user_id: UUID, role_id: UUID, organization_id: UUID
    ) -> bool:
        with self._lock:
            held = self._assignments.get((user_id, organization_id), {})
            return held.pop(role_id, None) is not None

    def list_assignments(
        self, user_id: UUID, organization_id: UUID
    ) -> list[RoleAssignment]:
        with self._lock:
            return list(self._assignments.get((user_id, organization_id), {}).values())
