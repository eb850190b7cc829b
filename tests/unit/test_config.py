"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from orbit_rbac.config import Settings


pytestmark = pytest.mark.unit


def test_defaults():
    config = Settings(_env_file=None)

    assert config.storage_backend == "sql"
    assert config.seed_on_startup is True
    assert config.bootstrap_organization_slug == "default"
    assert config.bootstrap_owner_id is None
    assert config.is_development


def test_reads_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("BOOTSTRAP_OWNER_ID", "8f9c2a86-5e1b-4f53-9a0e-2c1b3f6d7e01")
    monkeypatch.setenv("ENVIRONMENT", "production")

    config = Settings(_env_file=None)

    assert config.storage_backend == "memory"
    assert str(config.bootstrap_owner_id) == "8f9c2a86-5e1b-4f53-9a0e-2c1b3f6d7e01"
    assert config.is_production


def test_log_level_is_upper_cased():
    assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"


@pytest.mark.parametrize("slug", ["Default", "my_org", "-org", "org--one"])
def test_rejects_invalid_bootstrap_slug(slug: str):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, bootstrap_organization_slug=slug)


def test_rejects_unknown_backend():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, storage_backend="redis")
