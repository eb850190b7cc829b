"""Concurrent writers racing on the same unique key.

Each race must leave exactly one row behind and report the losers with
the same typed error a sequential duplicate would get. A role deleted
while an update is in flight stays deleted.
"""

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from contextlib import suppress
from pathlib import Path
from uuid import UUID, uuid4

import pytest

from orbit_rbac.core.errors import (
    AlreadyMemberError,
    DuplicateIdentifierError,
    DuplicateNameError,
    UnknownRoleError,
)
from orbit_rbac.rbac.catalog import PermissionCatalog
from orbit_rbac.rbac.memberships import MembershipStore
from orbit_rbac.rbac.organizations import OrganizationStore
from orbit_rbac.rbac.resolver import AuthorizationResolver
from orbit_rbac.rbac.roles import RoleStore
from orbit_rbac.rbac.schemas import Role
from orbit_rbac.rbac.seeding import bootstrap
from orbit_rbac.stores.base import AuthzStore
from orbit_rbac.stores.memory import InMemoryStore
from tests.conftest import build_sql_store


pytestmark = pytest.mark.integration

WORKERS = 8


@pytest.fixture(params=["memory", "sql-file"])
def shared_store(request: pytest.FixtureRequest, tmp_path: Path) -> AuthzStore:
    if request.param == "memory":
        return InMemoryStore()
    return build_sql_store(f"sqlite:///{tmp_path / 'race.db'}")


def race(fn: Callable[[], object]) -> list[BaseException | None]:
    """Run ``fn`` on every worker at once and collect what each raised."""

    def attempt() -> BaseException | None:
        try:
            fn()
        except Exception as exc:  # noqa: BLE001
            return exc
        return None

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        futures = [pool.submit(attempt) for _ in range(WORKERS)]
        return [f.result() for f in futures]


def test_register_permission(shared_store: AuthzStore):
    catalog = PermissionCatalog(shared_store)

    outcomes = race(lambda: catalog.register("users.view", "Users", "View users"))

    assert outcomes.count(None) == 1
    assert all(
        isinstance(o, DuplicateIdentifierError) for o in outcomes if o is not None
    )
    assert [p.id for p in catalog.list_all()] == ["users.view"]


def test_create_role(shared_store: AuthzStore):
    organization = OrganizationStore(shared_store).create_organization("Acme")
    roles = RoleStore(shared_store)

    outcomes = race(lambda: roles.create_role(organization.id, "Viewer"))

    assert outcomes.count(None) == 1
    assert all(isinstance(o, DuplicateNameError) for o in outcomes if o is not None)
    assert len(roles.list_roles(organization.id)) == 1


def test_add_member(shared_store: AuthzStore):
    organization = OrganizationStore(shared_store).create_organization("Acme")
    memberships = MembershipStore(shared_store)
    user_id = uuid4()

    outcomes = race(lambda: memberships.add_member(user_id, organization.id))

    assert outcomes.count(None) == 1
    assert all(isinstance(o, AlreadyMemberError) for o in outcomes if o is not None)
    assert len(memberships.members_of(organization.id)) == 1


def test_assign_role(shared_store: AuthzStore):
    organization = OrganizationStore(shared_store).create_organization("Acme")
    role = RoleStore(shared_store).create_role(organization.id, "Viewer")
    memberships = MembershipStore(shared_store)
    user_id = uuid4()
    memberships.add_member(user_id, organization.id)

    outcomes = race(lambda: memberships.assign_role(user_id, role.id, organization.id))

    assert outcomes == [None] * WORKERS
    assert len(shared_store.list_assignments(user_id, organization.id)) == 1


def test_concurrent_bootstrap(shared_store: AuthzStore):
    owner_id = uuid4()

    outcomes = race(
        lambda: bootstrap(
            shared_store,
            organization_name="Acme",
            organization_slug="acme",
            owner_id=owner_id,
        )
    )

    assert outcomes == [None] * WORKERS
    organization = shared_store.get_organization_by_slug("acme")
    assert organization is not None
    assert len(shared_store.list_permissions()) == 33
    assert len(shared_store.list_roles(organization.id)) == 4
    assert len(shared_store.list_assignments(owner_id, organization.id)) == 1


def test_delete_between_read_and_update(
    shared_store: AuthzStore, monkeypatch: pytest.MonkeyPatch
):
    organization = OrganizationStore(shared_store).create_organization("Acme")
    PermissionCatalog(shared_store).register("users.view", "Users", "View users")
    roles = RoleStore(shared_store)
    role = roles.create_role(organization.id, "Viewer")
    roles.grant_permission(role.id, "users.view")
    user_id = uuid4()
    memberships = MembershipStore(shared_store)
    memberships.add_member(user_id, organization.id)
    memberships.assign_role(user_id, role.id, organization.id)

    read_role = shared_store.get_role
    deleted = False

    # The role is deleted right after update_role has read it
    def get_role_then_delete(role_id: UUID) -> Role | None:
        nonlocal deleted
        current = read_role(role_id)
        if not deleted:
            deleted = True
            roles.delete_role(role_id)
        return current

    monkeypatch.setattr(shared_store, "get_role", get_role_then_delete)
    with pytest.raises(UnknownRoleError):
        roles.update_role(role.id, description="Read only")
    monkeypatch.undo()

    stored = shared_store.get_role(role.id)
    assert stored is not None
    assert stored.is_deleted
    assert stored.description != "Read only"
    resolver = AuthorizationResolver(shared_store)
    assert not resolver.authorize(user_id, organization.id, "users.view")


def test_updates_racing_a_delete(shared_store: AuthzStore):
    organization = OrganizationStore(shared_store).create_organization("Acme")
    roles = RoleStore(shared_store)
    role = roles.create_role(organization.id, "Viewer")

    def update_or_delete(index: int) -> None:
        if index == WORKERS // 2:
            roles.delete_role(role.id)
        else:
            roles.update_role(role.id, description=f"revision {index}")

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        futures = [pool.submit(update_or_delete, i) for i in range(WORKERS)]
        for future in futures:
            with suppress(UnknownRoleError):
                future.result()

    stored = shared_store.get_role(role.id)
    assert stored is not None
    assert stored.is_deleted
    assert roles.list_roles(organization.id) == []
