"""Fixtures for API integration tests."""

from collections.abc import Awaitable, Callable, Generator
from uuid import UUID, uuid4

import pytest
from fastapi import FastAPI, Request, Response
from fastapi.testclient import TestClient

from orbit_rbac.config import Settings
from orbit_rbac.main import create_app
from orbit_rbac.rbac.schemas import Organization
from orbit_rbac.stores.base import AuthzStore
from orbit_rbac.stores.memory import InMemoryStore


@pytest.fixture
def owner_id() -> UUID:
    return uuid4()


@pytest.fixture
def api_store() -> AuthzStore:
    return InMemoryStore()


@pytest.fixture
def app(api_store: AuthzStore, owner_id: UUID) -> FastAPI:
    config = Settings(
        _env_file=None,
        seed_on_startup=True,
        bootstrap_organization_name="Acme",
        bootstrap_organization_slug="acme",
        bootstrap_owner_id=owner_id,
    )
    app = create_app(store=api_store, config=config)

    # Stand-in for the upstream identity layer
    @app.middleware("http")
    async def identity(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        user_id = request.headers.get("X-User-Id")
        if user_id is not None:
            request.state.user_id = user_id
        return await call_next(request)

    return app


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as client:
        yield client


@pytest.fixture
def acme(client: TestClient, api_store: AuthzStore) -> Organization:
    """The bootstrap organization, seeded at startup."""
    organization = api_store.get_organization_by_slug("acme")
    assert organization is not None
    return organization
