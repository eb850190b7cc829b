"""Tenant isolation guard.

Every operation that takes an organization-scoped identifier goes
through a guard bound to the caller's organization. The guard loads the
referenced role first and refuses to touch it if it belongs to another
organization. Mismatches are raised, never filtered silently.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from orbit_rbac.core.errors import (
    CrossTenantAccessError,
    OrganizationNotFoundError,
    UnknownRoleError,
)
from orbit_rbac.rbac.memberships import MembershipStore
from orbit_rbac.rbac.resolver import AuthorizationResolver
from orbit_rbac.rbac.roles import RoleStore
from orbit_rbac.rbac.schemas import (
    Membership,
    MembershipTier,
    Permission,
    Role,
    RoleAssignment,
)


if TYPE_CHECKING:
    from orbit_rbac.stores.base import AuthzStore


logger = structlog.get_logger()


class TenantGuard:
    """Organization-bound facade over the role, membership and resolver APIs.

    Usage:
        guard = TenantGuard(store, organization_id)
        guard.grant_permission(role_id, "users.view")
    """

    def __init__(
        self,
        store: "AuthzStore",
        organization_id: UUID,
        resolver: AuthorizationResolver | None = None,
    ) -> None:
        if store.get_organization(organization_id) is None:
            raise OrganizationNotFoundError(organization_id)
        self.store = store
        self.organization_id = organization_id
        self.roles = RoleStore(store)
        self.memberships = MembershipStore(store)
        self.resolver = resolver or AuthorizationResolver(store)

    def _check_role(self, role_id: UUID) -> Role:
        """Load a role (live or deleted) and verify it belongs to this tenant.

        Raises:
            UnknownRoleError: If the role does not exist
            CrossTenantAccessError: If it belongs to another organization
        """
        role = self.store.get_role(role_id)
        if role is None:
            raise UnknownRoleError(role_id)
        if role.organization_id != self.organization_id:
            logger.warning(
                "cross_tenant_access",
                resource="role",
                resource_id=str(role_id),
                organization_id=str(self.organization_id),
                owner_organization_id=str(role.organization_id),
            )
            raise CrossTenantAccessError(
                resource="role",
                resource_id=str(role_id),
                organization_id=str(self.organization_id),
                owner_organization_id=str(role.organization_id),
            )
        return role

    # Roles

    def create_role(
        self,
        name: str,
        description: str | None = None,
        *,
        purpose: str | None = None,
        department: str | None = None,
    ) -> Role:
        return self.roles.create_role(
            self.organization_id,
            name,
            description,
            purpose=purpose,
            department=department,
        )

    def get_role(self, role_id: UUID) -> Role:
        self._check_role(role_id)
        return self.roles.get_role(role_id)

    def list_roles(self, include_deleted: bool = False) -> list[Role]:
        return self.roles.list_roles(
            self.organization_id, include_deleted=include_deleted
        )

    def update_role(
        self,
        role_id: UUID,
        *,
        name: str | None = None,
        description: str | None = None,
        purpose: str | None = None,
        department: str | None = None,
    ) -> Role:
        self._check_role(role_id)
        return self.roles.update_role(
            role_id,
            name=name,
            description=description,
            purpose=purpose,
            department=department,
        )

    def delete_role(self, role_id: UUID) -> Role:
        self._check_role(role_id)
        return self.roles.delete_role(role_id)

    def grant_permission(self, role_id: UUID, permission_id: str) -> None:
        self._check_role(role_id)
        self.roles.grant_permission(role_id, permission_id)

    def revoke_permission(self, role_id: UUID, permission_id: str) -> None:
        self._check_role(role_id)
        self.roles.revoke_permission(role_id, permission_id)

    def permissions_of(self, role_id: UUID) -> frozenset[Permission]:
        self._check_role(role_id)
        return self.roles.permissions_of(role_id)

    # Members

    def add_member(
        self, user_id: UUID, tier: MembershipTier = MembershipTier.MEMBER
    ) -> Membership:
        return self.memberships.add_member(user_id, self.organization_id, tier)

    def remove_member(self, user_id: UUID) -> bool:
        return self.memberships.remove_member(user_id, self.organization_id)

    def change_tier(self, user_id: UUID, tier: MembershipTier) -> Membership:
        return self.memberships.change_tier(user_id, self.organization_id, tier)

    def members(self) -> list[Membership]:
        return self.memberships.members_of(self.organization_id)

    def assign_role(
        self, user_id: UUID, role_id: UUID, *, strict: bool = False
    ) -> RoleAssignment:
        self._check_role(role_id)
        return self.memberships.assign_role(
            user_id, role_id, self.organization_id, strict=strict
        )

    def revoke_role(self, user_id: UUID, role_id: UUID) -> bool:
        self._check_role(role_id)
        return self.memberships.revoke_role(user_id, role_id, self.organization_id)

    def roles_of(self, user_id: UUID) -> frozenset[Role]:
        return self.memberships.roles_of(user_id, self.organization_id)

    # Authorization

    def effective_permissions(self, user_id: UUID) -> frozenset[str]:
        return self.resolver.effective_permissions(user_id, self.organization_id)

    def authorize(self, user_id: UUID, permission_id: str) -> bool:
        return self.resolver.authorize(user_id, self.organization_id, permission_id)

    def authorize_any(self, user_id: UUID, permission_ids: Iterable[str]) -> bool:
        return self.resolver.authorize_any(
            user_id, self.organization_id, permission_ids
        )

    def authorize_all(self, user_id: UUID, permission_ids: Iterable[str]) -> bool:
        return self.resolver.authorize_all(
            user_id, self.organization_id, permission_ids
        )
