"""Tests for structured logging configuration."""

import json

import pytest
import structlog

from orbit_rbac.config import Settings
from orbit_rbac.core.logging import configure_logging


pytestmark = pytest.mark.unit


def test_production_renders_json(capsys: pytest.CaptureFixture[str]):
    configure_logging(Settings(_env_file=None, environment="production"))

    structlog.get_logger().info("role_created", role_name="Viewer")

    line = capsys.readouterr().out.strip().splitlines()[-1]
    event = json.loads(line)
    assert event["event"] == "role_created"
    assert event["role_name"] == "Viewer"
    assert event["level"] == "info"
    assert "timestamp" in event


def test_level_filters_debug(capsys: pytest.CaptureFixture[str]):
    configure_logging(
        Settings(_env_file=None, environment="production", log_level="INFO")
    )

    structlog.get_logger().debug("authorization_denied")

    assert capsys.readouterr().out == ""
