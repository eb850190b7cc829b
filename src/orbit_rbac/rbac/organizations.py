"""Organization registry: the tenant roots."""

from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from orbit_rbac.core.constants import MAX_SLUG_LENGTH, SLUG_PATTERN
from orbit_rbac.core.errors import OrganizationNotFoundError, ValidationError
from orbit_rbac.core.utils import generate_slug
from orbit_rbac.rbac.schemas import Organization


if TYPE_CHECKING:
    from orbit_rbac.stores.base import AuthzStore


logger = structlog.get_logger()


class OrganizationStore:
    """Creates and resolves organizations."""

    def __init__(self, store: "AuthzStore") -> None:
        self.store = store

    def create_organization(
        self,
        name: str,
        slug: str | None = None,
        description: str | None = None,
    ) -> Organization:
        """Create an organization.

        Args:
            name: Display name
            slug: URL-safe unique handle; generated from the name if omitted
            description: Optional description

        Returns:
            The created organization

        Raises:
            ValidationError: If the name is blank or the slug is not URL-safe
            DuplicateIdentifierError: If the slug is taken
        """
        name = name.strip()
        if not name:
            raise ValidationError(
                "Organization name is required",
                errors=[{"field": "name", "message": "Must not be blank"}],
            )

        slug = slug if slug is not None else generate_slug(name)
        if len(slug) > MAX_SLUG_LENGTH or not SLUG_PATTERN.match(slug):
            raise ValidationError(
                f"Invalid organization slug '{slug}'",
                errors=[
                    {
                        "field": "slug",
                        "message": "Use lowercase letters, digits and single hyphens",
                    }
                ],
            )

        organization = self.store.add_organization(
            Organization(name=name, slug=slug, description=description)
        )
        logger.info(
            "organization_created",
            organization_id=str(organization.id),
            slug=organization.slug,
        )
        return organization

    def get_organization(self, organization_id: UUID) -> Organization:
        """Return an organization by id.

        Raises:
            OrganizationNotFoundError: If it does not exist
        """
        organization = self.store.get_organization(organization_id)
        if organization is None:
            raise OrganizationNotFoundError(organization_id)
        return organization

    def get_by_slug(self, slug: str) -> Organization:
        """Return an organization by slug.

        Raises:
            OrganizationNotFoundError: If it does not exist
        """
        organization = self.store.get_organization_by_slug(slug)
        if organization is None:
            raise OrganizationNotFoundError(slug)
        return organization

    def list_organizations(self) -> list[Organization]:
        return self.store.list_organizations()
