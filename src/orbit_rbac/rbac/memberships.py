"""Membership and role assignment store."""

from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from orbit_rbac.core.errors import (
    AlreadyAssignedError,
    NotAMemberError,
    NotFoundError,
    OrganizationMismatchError,
    OrganizationNotFoundError,
    UnknownRoleError,
)
from orbit_rbac.rbac.schemas import Membership, MembershipTier, Role, RoleAssignment


if TYPE_CHECKING:
    from orbit_rbac.stores.base import AuthzStore


logger = structlog.get_logger()


class MembershipStore:
    """Manages who belongs to an organization and which roles they hold.

    A role assignment only counts while the user is a member and the
    role is live. Removing a membership leaves assignments in place,
    inert, so re-adding the member restores them.
    """

    def __init__(self, store: "AuthzStore") -> None:
        self.store = store

    def _require_organization(self, organization_id: UUID) -> None:
        if self.store.get_organization(organization_id) is None:
            raise OrganizationNotFoundError(organization_id)

    def add_member(
        self,
        user_id: UUID,
        organization_id: UUID,
        tier: MembershipTier = MembershipTier.MEMBER,
    ) -> Membership:
        """Add a user to an organization.

        Raises:
            OrganizationNotFoundError: If the organization does not exist
            AlreadyMemberError: If the user is already a member
        """
        self._require_organization(organization_id)
        membership = self.store.add_membership(
            Membership(user_id=user_id, organization_id=organization_id, tier=tier)
        )
        logger.info(
            "member_added",
            user_id=str(user_id),
            organization_id=str(organization_id),
            tier=membership.tier.value,
        )
        return membership

    def get_membership(self, user_id: UUID, organization_id: UUID) -> Membership | None:
        return self.store.get_membership(user_id, organization_id)

    def members_of(self, organization_id: UUID) -> list[Membership]:
        self._require_organization(organization_id)
        return self.store.list_memberships(organization_id)

    def change_tier(
        self, user_id: UUID, organization_id: UUID, tier: MembershipTier
    ) -> Membership:
        """Move a member to another tier.

        Raises:
            NotAMemberError: If the user is not a member
        """
        membership = self.store.set_membership_tier(user_id, organization_id, tier)
        if membership is None:
            raise NotAMemberError(
                details={
                    "user_id": str(user_id),
                    "organization_id": str(organization_id),
                }
            )
        logger.info(
            "member_tier_changed",
            user_id=str(user_id),
            organization_id=str(organization_id),
            tier=tier.value,
        )
        return membership

    def remove_member(self, user_id: UUID, organization_id: UUID) -> bool:
        """Remove a membership. Returns ``False`` if there was none."""
        removed = self.store.remove_membership(user_id, organization_id)
        if removed:
            logger.info(
                "member_removed",
                user_id=str(user_id),
                organization_id=str(organization_id),
            )
        return removed

    def assign_role(
        self,
        user_id: UUID,
        role_id: UUID,
        organization_id: UUID,
        *,
        strict: bool = False,
    ) -> RoleAssignment:
        """Assign a role to a member of the role's organization.

        Assigning a role the user already holds returns the existing
        assignment unless ``strict`` is set.

        Raises:
            UnknownRoleError: If the role is missing or deleted
            OrganizationMismatchError: If the role belongs to another organization
            NotAMemberError: If the user is not a member of the organization
            AlreadyAssignedError: If ``strict`` and the assignment exists
        """
        role = self.store.get_role(role_id)
        if role is None or role.is_deleted:
            raise UnknownRoleError(role_id)
        if role.organization_id != organization_id:
            raise OrganizationMismatchError(
                details={
                    "role_id": str(role_id),
                    "organization_id": str(organization_id),
                }
            )
        if self.store.get_membership(user_id, organization_id) is None:
            raise NotAMemberError(
                details={
                    "user_id": str(user_id),
                    "organization_id": str(organization_id),
                }
            )

        assignment = RoleAssignment(
            user_id=user_id, role_id=role_id, organization_id=organization_id
        )
        if self.store.add_assignment(assignment):
            logger.info(
                "role_assigned",
                user_id=str(user_id),
                role_id=str(role_id),
                organization_id=str(organization_id),
            )
            return assignment

        if strict:
            raise AlreadyAssignedError(
                details={"user_id": str(user_id), "role_id": str(role_id)}
            )
        existing = self.store.get_assignment(user_id, role_id, organization_id)
        if existing is None:
            # Revoked between the insert attempt and the read
            raise NotFoundError(
                "Role assignment not found",
                resource="role_assignment",
                resource_id=str(role_id),
            )
        return existing

    def revoke_role(self, user_id: UUID, role_id: UUID, organization_id: UUID) -> bool:
        """Remove a role assignment. Returns ``False`` if it did not exist."""
        revoked = self.store.remove_assignment(user_id, role_id, organization_id)
        if revoked:
            logger.info(
                "role_revoked",
                user_id=str(user_id),
                role_id=str(role_id),
                organization_id=str(organization_id),
            )
        return revoked

    def roles_of(self, user_id: UUID, organization_id: UUID) -> frozenset[Role]:
        """Live roles the user holds in the organization.

        Empty when the user is not a member.
        """
        if self.store.get_membership(user_id, organization_id) is None:
            return frozenset()
        assignments = self.store.list_assignments(user_id, organization_id)
        return frozenset(
            role
            for role in self.store.get_roles(a.role_id for a in assignments)
            if not role.is_deleted and role.organization_id == organization_id
        )
