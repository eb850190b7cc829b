"""Permission catalog.

The catalog is the registry of every permission identifier ("function")
the system knows about, grouped by category. It is append-only: there
is no delete, because historical role grants must never dangle.
Permissions are deprecated by convention instead.
"""

from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from orbit_rbac.core.constants import MAX_PERMISSION_ID_LENGTH, PERMISSION_ID_PATTERN
from orbit_rbac.core.errors import (
    NotFoundError,
    OrganizationNotFoundError,
    ValidationError,
)
from orbit_rbac.rbac.schemas import Permission


if TYPE_CHECKING:
    from orbit_rbac.stores.base import AuthzStore


logger = structlog.get_logger()


def validate_permission_id(permission_id: str) -> str:
    """Check that a permission identifier is lowercase dotted segments.

    Raises:
        ValidationError: If the identifier is malformed
    """
    if (
        len(permission_id) > MAX_PERMISSION_ID_LENGTH
        or not PERMISSION_ID_PATTERN.match(permission_id)
    ):
        raise ValidationError(
            f"Invalid permission identifier '{permission_id}'",
            errors=[
                {
                    "field": "id",
                    "message": "Use lowercase dotted segments such as 'users.view'",
                }
            ],
        )
    return permission_id


class PermissionCatalog:
    """Registry of permissions backed by the store."""

    def __init__(self, store: "AuthzStore") -> None:
        self.store = store

    def register(
        self,
        permission_id: str,
        category: str,
        description: str,
        *,
        purpose: str | None = None,
        organization_id: UUID | None = None,
    ) -> Permission:
        """Add a permission to the catalog.

        Args:
            permission_id: Stable identifier, e.g. "users.view"
            category: Grouping label, e.g. "User Management"
            description: Human-readable description
            purpose: Optional longer explanation of why the permission exists
            organization_id: Owner of a custom permission; ``None`` for
                system permissions available to every organization

        Returns:
            The registered permission

        Raises:
            DuplicateIdentifierError: If the identifier is already registered
            ValidationError: If the identifier or category is malformed
            OrganizationNotFoundError: If the owning organization is missing
        """
        validate_permission_id(permission_id)
        if not category.strip():
            raise ValidationError(
                "Permission category is required",
                errors=[{"field": "category", "message": "Must not be blank"}],
            )
        if (
            organization_id is not None
            and self.store.get_organization(organization_id) is None
        ):
            raise OrganizationNotFoundError(organization_id)

        permission = self.store.add_permission(
            Permission(
                id=permission_id,
                category=category.strip(),
                description=description,
                purpose=purpose,
                organization_id=organization_id,
            )
        )
        logger.info(
            "permission_registered",
            permission_id=permission.id,
            category=permission.category,
            organization_id=str(organization_id) if organization_id else None,
        )
        return permission

    def lookup(self, permission_id: str) -> Permission:
        """Return a registered permission.

        Raises:
            NotFoundError: If the identifier is not in the catalog
        """
        permission = self.store.get_permission(permission_id)
        if permission is None:
            raise NotFoundError(
                "Permission not found",
                resource="permission",
                resource_id=permission_id,
            )
        return permission

    def contains(self, permission_id: str) -> bool:
        return self.store.get_permission(permission_id) is not None

    def list_all(self) -> list[Permission]:
        """Every permission in registration order."""
        return self.store.list_permissions()

    def list_by_category(self, category: str) -> list[Permission]:
        """Permissions of one category in registration order."""
        return [p for p in self.store.list_permissions() if p.category == category]

    def categories(self) -> list[str]:
        """Distinct categories in the order they first appeared."""
        return list(dict.fromkeys(p.category for p in self.store.list_permissions()))

    def available_to(self, organization_id: UUID) -> list[Permission]:
        """System permissions plus the organization's own custom permissions."""
        return [
            p
            for p in self.store.list_permissions()
            if p.organization_id is None or p.organization_id == organization_id
        ]
