"""Tests for store construction from settings."""

from pathlib import Path

import pytest

from orbit_rbac.config import Settings
from orbit_rbac.stores import InMemoryStore, SqlAlchemyStore, create_store


pytestmark = pytest.mark.unit


def test_memory_backend():
    store = create_store(Settings(_env_file=None, storage_backend="memory"))

    assert isinstance(store, InMemoryStore)


def test_sql_backend_creates_schema(tmp_path: Path):
    url = f"sqlite:///{tmp_path / 'rbac.db'}"

    store = create_store(Settings(_env_file=None, database_url=url))

    assert isinstance(store, SqlAlchemyStore)
    assert store.list_permissions() == []
    assert (tmp_path / "rbac.db").exists()


def test_database_url_forces_sql_backend(tmp_path: Path):
    config = Settings(_env_file=None, storage_backend="memory")

    store = create_store(config, database_url=f"sqlite:///{tmp_path / 'x.db'}")

    assert isinstance(store, SqlAlchemyStore)
