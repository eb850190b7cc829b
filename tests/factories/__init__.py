"""Test factories for generating test data."""

from tests.factories.organization import OrganizationFactory


__all__ = ["OrganizationFactory"]
