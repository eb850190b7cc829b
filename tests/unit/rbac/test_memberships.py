"""Unit tests for memberships and role assignments."""

from uuid import UUID, uuid4

import pytest

from orbit_rbac.core.errors import (
    AlreadyAssignedError,
    AlreadyMemberError,
    NotAMemberError,
    OrganizationMismatchError,
    OrganizationNotFoundError,
    UnknownRoleError,
)
from orbit_rbac.rbac.memberships import MembershipStore
from orbit_rbac.rbac.roles import RoleStore
from orbit_rbac.rbac.schemas import MembershipTier, Organization, Role
from orbit_rbac.stores.base import AuthzStore


pytestmark = pytest.mark.unit


@pytest.fixture
def role(roles: RoleStore, organization: Organization) -> Role:
    return roles.create_role(organization.id, "Viewer")


@pytest.fixture
def member(
    memberships: MembershipStore, organization: Organization, user_id: UUID
) -> UUID:
    memberships.add_member(user_id, organization.id)
    return user_id


class TestMembers:
    """Tests for add_member / remove_member / change_tier."""

    def test_add_member_defaults_to_member_tier(
        self, memberships: MembershipStore, organization: Organization, user_id: UUID
    ):
        membership = memberships.add_member(user_id, organization.id)

        assert membership.tier is MembershipTier.MEMBER
        assert memberships.get_membership(user_id, organization.id) == membership

    def test_add_member_twice(
        self, memberships: MembershipStore, organization: Organization, member: UUID
    ):
        with pytest.raises(AlreadyMemberError):
            memberships.add_member(member, organization.id, MembershipTier.OWNER)

        membership = memberships.get_membership(member, organization.id)
        assert membership is not None
        assert membership.tier is MembershipTier.MEMBER

    def test_add_member_to_missing_organization(
        self, memberships: MembershipStore, user_id: UUID
    ):
        with pytest.raises(OrganizationNotFoundError):
            memberships.add_member(user_id, uuid4())

    def test_members_of(
        self, memberships: MembershipStore, organization: Organization, member: UUID
    ):
        other = uuid4()
        memberships.add_member(other, organization.id, MembershipTier.ADMIN)

        members = {m.user_id: m.tier for m in memberships.members_of(organization.id)}

        assert members == {member: MembershipTier.MEMBER, other: MembershipTier.ADMIN}

    def test_change_tier(
        self, memberships: MembershipStore, organization: Organization, member: UUID
    ):
        membership = memberships.change_tier(
            member, organization.id, MembershipTier.OWNER
        )

        assert membership.tier is MembershipTier.OWNER

    def test_change_tier_of_non_member(
        self, memberships: MembershipStore, organization: Organization, user_id: UUID
    ):
        with pytest.raises(NotAMemberError):
            memberships.change_tier(user_id, organization.id, MembershipTier.ADMIN)

    def test_remove_member(
        self, memberships: MembershipStore, organization: Organization, member: UUID
    ):
        assert memberships.remove_member(member, organization.id) is True
        assert memberships.remove_member(member, organization.id) is False
        assert memberships.get_membership(member, organization.id) is None

    def test_tiers_are_ordered(self):
        assert (
            MembershipTier.MEMBER.rank
            < MembershipTier.ADMIN.rank
            < MembershipTier.OWNER.rank
        )


class TestAssignRole:
    """Tests for MembershipStore.assign_role."""

    def test_assigns_role(
        self,
        memberships: MembershipStore,
        organization: Organization,
        member: UUID,
        role: Role,
    ):
        assignment = memberships.assign_role(member, role.id, organization.id)

        assert assignment.role_id == role.id
        assert memberships.roles_of(member, organization.id) == frozenset({role})

    def test_reassign_returns_existing_assignment(
        self,
        memberships: MembershipStore,
        store: AuthzStore,
        organization: Organization,
        member: UUID,
        role: Role,
    ):
        first = memberships.assign_role(member, role.id, organization.id)
        second = memberships.assign_role(member, role.id, organization.id)

        assert second.created_at == first.created_at
        assert len(store.list_assignments(member, organization.id)) == 1

    def test_strict_reassign_raises(
        self,
        memberships: MembershipStore,
        organization: Organization,
        member: UUID,
        role: Role,
    ):
        memberships.assign_role(member, role.id, organization.id)

        with pytest.raises(AlreadyAssignedError):
            memberships.assign_role(member, role.id, organization.id, strict=True)

    def test_unknown_role(
        self, memberships: MembershipStore, organization: Organization, member: UUID
    ):
        with pytest.raises(UnknownRoleError):
            memberships.assign_role(member, uuid4(), organization.id)

    def test_deleted_role(
        self,
        memberships: MembershipStore,
        roles: RoleStore,
        organization: Organization,
        member: UUID,
        role: Role,
    ):
        roles.delete_role(role.id)

        with pytest.raises(UnknownRoleError):
            memberships.assign_role(member, role.id, organization.id)

    def test_role_of_other_organization(
        self,
        memberships: MembershipStore,
        roles: RoleStore,
        store: AuthzStore,
        organization: Organization,
        other_organization: Organization,
        member: UUID,
    ):
        foreign = roles.create_role(other_organization.id, "Viewer")
        memberships.add_member(member, other_organization.id)

        with pytest.raises(OrganizationMismatchError):
            memberships.assign_role(member, foreign.id, organization.id)

        assert store.list_assignments(member, organization.id) == []
        assert store.list_assignments(member, other_organization.id) == []

    def test_mismatch_checked_before_membership(
        self,
        memberships: MembershipStore,
        roles: RoleStore,
        organization: Organization,
        other_organization: Organization,
        user_id: UUID,
    ):
        foreign = roles.create_role(other_organization.id, "Viewer")

        with pytest.raises(OrganizationMismatchError):
            memberships.assign_role(user_id, foreign.id, organization.id)

    def test_non_member(
        self,
        memberships: MembershipStore,
        organization: Organization,
        user_id: UUID,
        role: Role,
    ):
        with pytest.raises(NotAMemberError):
            memberships.assign_role(user_id, role.id, organization.id)


class TestRevokeAndRolesOf:
    """Tests for revoke_role and roles_of."""

    def test_revoke_is_idempotent(
        self,
        memberships: MembershipStore,
        organization: Organization,
        member: UUID,
        role: Role,
    ):
        memberships.assign_role(member, role.id, organization.id)

        assert memberships.revoke_role(member, role.id, organization.id) is True
        assert memberships.revoke_role(member, role.id, organization.id) is False
        assert memberships.roles_of(member, organization.id) == frozenset()

    def test_roles_of_skips_deleted_roles(
        self,
        memberships: MembershipStore,
        roles: RoleStore,
        organization: Organization,
        member: UUID,
        role: Role,
    ):
        editor = roles.create_role(organization.id, "Editor")
        memberships.assign_role(member, role.id, organization.id)
        memberships.assign_role(member, editor.id, organization.id)

        roles.delete_role(role.id)

        assert {r.id for r in memberships.roles_of(member, organization.id)} == {
            editor.id
        }

    def test_assignments_inert_after_membership_removed(
        self,
        memberships: MembershipStore,
        store: AuthzStore,
        organization: Organization,
        member: UUID,
        role: Role,
    ):
        memberships.assign_role(member, role.id, organization.id)

        memberships.remove_member(member, organization.id)

        assert memberships.roles_of(member, organization.id) == frozenset()
        assert len(store.list_assignments(member, organization.id)) == 1

        memberships.add_member(member, organization.id)
        assert {r.id for r in memberships.roles_of(member, organization.id)} == {
            role.id
        }

    def test_roles_of_non_member_is_empty(
        self, memberships: MembershipStore, organization: Organization, user_id: UUID
    ):
        assert memberships.roles_of(user_id, organization.id) == frozenset()
