"""Unit tests for the tenant isolation guard."""

from uuid import UUID, uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import Response
from structlog.testing import capture_logs

from orbit_rbac.core.errors import (
    CrossTenantAccessError,
    OrganizationNotFoundError,
    UnknownRoleError,
)
from orbit_rbac.core.errors.handlers import register_exception_handlers
from orbit_rbac.rbac.guard import TenantGuard
from orbit_rbac.rbac.roles import RoleStore
from orbit_rbac.rbac.schemas import MembershipTier, Organization, Role
from orbit_rbac.stores.base import AuthzStore


pytestmark = pytest.mark.unit


def render(exc: Exception) -> Response:
    """Response the API produces when a route raises ``exc``."""
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/role")
    def get_role() -> None:
        raise exc

    with TestClient(app) as client:
        return client.get("/role")


@pytest.fixture
def guard(store: AuthzStore, organization: Organization) -> TenantGuard:
    return TenantGuard(store, organization.id)


@pytest.fixture
def foreign_role(
    roles: RoleStore, other_organization: Organization, user_permissions: list[str]
) -> Role:
    role = roles.create_role(other_organization.id, "Admin")
    roles.grant_permission(role.id, "users.view")
    return role


class TestBinding:
    """Tests for guard construction."""

    def test_missing_organization(self, store: AuthzStore):
        with pytest.raises(OrganizationNotFoundError):
            TenantGuard(store, uuid4())


class TestCrossTenantRejection:
    """Every role-scoped operation refuses another tenant's role."""

    @pytest.mark.parametrize(
        "operation",
        [
            lambda g, r, u: g.get_role(r),
            lambda g, r, u: g.update_role(r, name="Owned"),
            lambda g, r, u: g.delete_role(r),
            lambda g, r, u: g.grant_permission(r, "users.create"),
            lambda g, r, u: g.revoke_permission(r, "users.view"),
            lambda g, r, u: g.permissions_of(r),
            lambda g, r, u: g.assign_role(u, r),
            lambda g, r, u: g.revoke_role(u, r),
        ],
        ids=[
            "get_role",
            "update_role",
            "delete_role",
            "grant_permission",
            "revoke_permission",
            "permissions_of",
            "assign_role",
            "revoke_role",
        ],
    )
    def test_rejects_foreign_role(
        self,
        guard: TenantGuard,
        roles: RoleStore,
        foreign_role: Role,
        user_id: UUID,
        operation,
    ):
        guard.add_member(user_id)

        with pytest.raises(CrossTenantAccessError):
            operation(guard, foreign_role.id, user_id)

        # Nothing about the foreign role changed
        role = roles.get_role(foreign_role.id)
        assert role.name == "Admin"
        assert {p.id for p in roles.permissions_of(role.id)} == {"users.view"}

    def test_logs_security_event(self, guard: TenantGuard, foreign_role: Role):
        with capture_logs() as logs:
            with pytest.raises(CrossTenantAccessError):
                guard.delete_role(foreign_role.id)

        events = [e for e in logs if e["event"] == "cross_tenant_access"]
        assert len(events) == 1
        assert events[0]["log_level"] == "warning"
        assert events[0]["resource_id"] == str(foreign_role.id)

    def test_public_error_matches_missing_role(
        self, guard: TenantGuard, foreign_role: Role
    ):
        with pytest.raises(CrossTenantAccessError) as exc_info:
            guard.get_role(foreign_role.id)
        missing = UnknownRoleError(foreign_role.id)

        public = exc_info.value.to_public()

        assert type(public) is UnknownRoleError
        assert public.error_code == missing.error_code
        assert public.message == missing.message
        assert public.details == missing.details
        assert "owner_organization_id" not in public.details

    def test_rendered_response_matches_missing_role(
        self, guard: TenantGuard, foreign_role: Role
    ):
        with pytest.raises(CrossTenantAccessError) as exc_info:
            guard.get_role(foreign_role.id)

        foreign = render(exc_info.value)
        missing = render(UnknownRoleError(foreign_role.id))

        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json()
        assert str(guard.organization_id) not in foreign.text

    def test_missing_role_is_unknown(self, guard: TenantGuard):
        with pytest.raises(UnknownRoleError):
            guard.get_role(uuid4())


class TestOwnTenant:
    """Operations on the guard's own organization pass through."""

    def test_full_flow(self, guard: TenantGuard, user_permissions: list[str]):
        user_id = uuid4()
        role = guard.create_role("Viewer")
        guard.grant_permission(role.id, "users.view")
        guard.add_member(user_id, MembershipTier.ADMIN)
        guard.assign_role(user_id, role.id)

        assert guard.authorize(user_id, "users.view")
        assert not guard.authorize(user_id, "users.delete")
        assert guard.authorize_any(user_id, ["users.delete", "users.view"])
        assert not guard.authorize_all(user_id, ["users.delete", "users.view"])
        assert guard.effective_permissions(user_id) == {"users.view"}
        assert guard.roles_of(user_id) == frozenset({guard.get_role(role.id)})
        assert [m.user_id for m in guard.members()] == [user_id]

        guard.revoke_role(user_id, role.id)
        assert not guard.authorize(user_id, "users.view")

    def test_list_roles_only_own(
        self, guard: TenantGuard, foreign_role: Role, organization: Organization
    ):
        own = guard.create_role("Viewer")

        assert [r.id for r in guard.list_roles()] == [own.id]

    def test_revoke_role_of_deleted_own_role(
        self, guard: TenantGuard, user_id: UUID
    ):
        role = guard.create_role("Viewer")
        guard.add_member(user_id)
        guard.assign_role(user_id, role.id)
        guard.delete_role(role.id)

        assert guard.revoke_role(user_id, role.id) is True

    def test_change_tier_and_remove_member(self, guard: TenantGuard, user_id: UUID):
        guard.add_member(user_id)

        assert guard.change_tier(user_id, MembershipTier.OWNER).tier is (
            MembershipTier.OWNER
        )
        assert guard.remove_member(user_id) is True
        assert guard.members() == []
