"""Pytest configuration and shared fixtures."""

from collections.abc import Generator
from uuid import UUID, uuid4

import pytest
import structlog

from orbit_rbac.core.database import (
    create_db_engine,
    create_schema,
    create_session_factory,
)
from orbit_rbac.rbac.catalog import PermissionCatalog
from orbit_rbac.rbac.memberships import MembershipStore
from orbit_rbac.rbac.organizations import OrganizationStore
from orbit_rbac.rbac.resolver import AuthorizationResolver
from orbit_rbac.rbac.roles import RoleStore
from orbit_rbac.rbac.schemas import Organization
from orbit_rbac.stores.base import AuthzStore
from orbit_rbac.stores.memory import InMemoryStore
from orbit_rbac.stores.sql import SqlAlchemyStore
from tests.factories.organization import OrganizationFactory


@pytest.fixture(autouse=True)
def plain_logging(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep structlog on its uncached defaults.

    A cached logger would hold on to whatever stdout was current on first
    use, which CliRunner closes after each invocation.
    """
    structlog.reset_defaults()
    monkeypatch.setattr("orbit_rbac.main.configure_logging", lambda config=None: None)
    monkeypatch.setattr(
        "orbit_rbac.commands.configure_logging", lambda config=None: None
    )
    yield
    structlog.reset_defaults()


def build_sql_store(database_url: str = "sqlite://") -> SqlAlchemyStore:
    """SQL store on a fresh schema."""
    engine = create_db_engine(database_url)
    create_schema(engine)
    return SqlAlchemyStore(create_session_factory(engine))


@pytest.fixture(params=["memory", "sql"])
def store(request: pytest.FixtureRequest) -> AuthzStore:
    """Every store backend, so behavior is checked against both."""
    if request.param == "memory":
        return InMemoryStore()
    return build_sql_store()


@pytest.fixture
def catalog(store: AuthzStore) -> PermissionCatalog:
    return PermissionCatalog(store)


@pytest.fixture
def organizations(store: AuthzStore) -> OrganizationStore:
    return OrganizationStore(store)


@pytest.fixture
def roles(store: AuthzStore) -> RoleStore:
    return RoleStore(store)


@pytest.fixture
def memberships(store: AuthzStore) -> MembershipStore:
    return MembershipStore(store)


@pytest.fixture
def resolver(store: AuthzStore) -> AuthorizationResolver:
    return AuthorizationResolver(store)


@pytest.fixture
def organization(organizations: OrganizationStore) -> Organization:
    """An organization (tenant X)."""
    data = OrganizationFactory.build()
    return organizations.create_organization(
        data.name, slug=data.slug, description=data.description
    )


@pytest.fixture
def other_organization(organizations: OrganizationStore) -> Organization:
    """A second, unrelated organization (tenant Y)."""
    data = OrganizationFactory.build()
    return organizations.create_organization(data.name, slug=data.slug)


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def user_permissions(catalog: PermissionCatalog) -> list[str]:
    """A small catalog: users.view, users.create, users.delete."""
    ids = ["users.view", "users.create", "users.delete"]
    for permission_id in ids:
        catalog.register(permission_id, "User Management", permission_id)
    return ids
