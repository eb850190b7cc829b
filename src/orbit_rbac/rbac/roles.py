"""Role store: organization-scoped roles and their permission grants."""

from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from orbit_rbac.core.constants import MAX_ROLE_NAME_LENGTH
from orbit_rbac.core.errors import (
    CrossTenantAccessError,
    OrganizationNotFoundError,
    UnknownPermissionError,
    UnknownRoleError,
    ValidationError,
)
from orbit_rbac.rbac.schemas import Permission, Role, utcnow


if TYPE_CHECKING:
    from orbit_rbac.stores.base import AuthzStore


logger = structlog.get_logger()


def _clean_name(name: str) -> str:
    name = " ".join(name.split())
    if not name:
        raise ValidationError(
            "Role name is required",
            errors=[{"field": "name", "message": "Must not be blank"}],
        )
    if len(name) > MAX_ROLE_NAME_LENGTH:
        raise ValidationError(
            "Role name is too long",
            errors=[
                {
                    "field": "name",
                    "message": f"At most {MAX_ROLE_NAME_LENGTH} characters",
                }
            ],
        )
    return name


class RoleStore:
    """Creates roles, manages their grants and soft-deletes them.

    Roles are never hard-deleted. A deleted role keeps its grant and
    assignment rows; they simply stop contributing to authorization.
    """

    def __init__(self, store: "AuthzStore") -> None:
        self.store = store

    def _live_role(self, role_id: UUID) -> Role:
        role = self.store.get_role(role_id)
        if role is None or role.is_deleted:
            raise UnknownRoleError(role_id)
        return role

    def _catalog_permission(self, permission_id: str) -> Permission:
        permission = self.store.get_permission(permission_id)
        if permission is None:
            raise UnknownPermissionError(permission_id)
        return permission

    def create_role(
        self,
        organization_id: UUID,
        name: str,
        description: str | None = None,
        *,
        purpose: str | None = None,
        department: str | None = None,
    ) -> Role:
        """Create a role in an organization.

        Args:
            organization_id: Owning organization
            name: Role name, unique per organization among live roles
                (compared case-insensitively)
            description: Optional description
            purpose: Optional statement of what the role is for
            department: Optional owning department

        Returns:
            The created role

        Raises:
            OrganizationNotFoundError: If the organization does not exist
            ValidationError: If the name is blank
            DuplicateNameError: If a live role already uses the name
        """
        if self.store.get_organization(organization_id) is None:
            raise OrganizationNotFoundError(organization_id)

        role = self.store.add_role(
            Role(
                organization_id=organization_id,
                name=_clean_name(name),
                description=description,
                purpose=purpose,
                department=department,
            )
        )
        logger.info(
            "role_created",
            role_id=str(role.id),
            organization_id=str(organization_id),
            name=role.name,
        )
        return role

    def get_role(self, role_id: UUID) -> Role:
        """Return a live role.

        Raises:
            UnknownRoleError: If the role is missing or deleted
        """
        return self._live_role(role_id)

    def list_roles(
        self, organization_id: UUID, include_deleted: bool = False
    ) -> list[Role]:
        """Roles of an organization in creation order."""
        if self.store.get_organization(organization_id) is None:
            raise OrganizationNotFoundError(organization_id)
        return self.store.list_roles(organization_id, include_deleted=include_deleted)

    def update_role(
        self,
        role_id: UUID,
        *,
        name: str | None = None,
        description: str | None = None,
        purpose: str | None = None,
        department: str | None = None,
    ) -> Role:
        """Change a live role's descriptive fields.

        Only the arguments that are passed are changed.

        Raises:
            UnknownRoleError: If the role is missing or deleted
            ValidationError: If the new name is blank
            DuplicateNameError: If another live role already uses the new name
        """
        role = self._live_role(role_id)
        changes: dict[str, str] = {}
        if name is not None:
            changes["name"] = _clean_name(name)
        if description is not None:
            changes["description"] = description
        if purpose is not None:
            changes["purpose"] = purpose
        if department is not None:
            changes["department"] = department
        if not changes:
            return role

        role = self.store.update_role(role.model_copy(update=changes))
        logger.info("role_updated", role_id=str(role_id), fields=sorted(changes))
        return role

    def grant_permission(self, role_id: UUID, permission_id: str) -> None:
        """Grant a catalog permission to a role. Granting twice is a no-op.

        Raises:
            UnknownPermissionError: If the permission is not in the catalog
            UnknownRoleError: If the role is missing or deleted
            CrossTenantAccessError: If the permission is a custom permission
                owned by another organization
        """
        permission = self._catalog_permission(permission_id)
        role = self._live_role(role_id)
        if (
            permission.organization_id is not None
            and permission.organization_id != role.organization_id
        ):
            logger.warning(
                "cross_tenant_access",
                resource="permission",
                resource_id=permission_id,
                organization_id=str(role.organization_id),
                owner_organization_id=str(permission.organization_id),
            )
            raise CrossTenantAccessError(
                resource="permission",
                resource_id=permission_id,
                organization_id=str(role.organization_id),
                owner_organization_id=str(permission.organization_id),
            )

        if self.store.add_role_permission(role_id, permission_id):
            logger.info(
                "permission_granted",
                role_id=str(role_id),
                permission_id=permission_id,
            )

    def revoke_permission(self, role_id: UUID, permission_id: str) -> None:
        """Revoke a permission from a role. Revoking an absent grant is a no-op.

        Raises:
            UnknownPermissionError: If the permission is not in the catalog
            UnknownRoleError: If the role is missing or deleted
        """
        self._catalog_permission(permission_id)
        self._live_role(role_id)
        if self.store.remove_role_permission(role_id, permission_id):
            logger.info(
                "permission_revoked",
                role_id=str(role_id),
                permission_id=permission_id,
            )

    def delete_role(self, role_id: UUID) -> Role:
        """Soft-delete a role and return its tombstone.

        Deleting a role that is already deleted returns the existing
        tombstone unchanged.

        Raises:
            UnknownRoleError: If the role does not exist
        """
        if self.store.get_role(role_id) is None:
            raise UnknownRoleError(role_id)
        role = self.store.mark_role_deleted(role_id, utcnow())
        if role is None:
            raise UnknownRoleError(role_id)
        logger.info(
            "role_deleted",
            role_id=str(role_id),
            organization_id=str(role.organization_id),
        )
        return role

    def permissions_of(self, role_id: UUID) -> frozenset[Permission]:
        """Permissions currently granted to a live role.

        Raises:
            UnknownRoleError: If the role is missing or deleted
        """
        self._live_role(role_id)
        return frozenset(
            permission
            for permission_id in self.store.role_permission_ids(role_id)
            if (permission := self.store.get_permission(permission_id)) is not None
        )
