"""Authorization resolver.

Evaluates whether a user holds a permission inside an organization,
based on the roles assigned to them there. The effective permission
set is the plain union of every live role's grants; there are no deny
rules and no precedence between roles.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from orbit_rbac.core.errors import OrganizationNotFoundError
from orbit_rbac.rbac.schemas import Permission


if TYPE_CHECKING:
    from orbit_rbac.stores.base import AuthzStore


logger = structlog.get_logger()


class AuthorizationResolver:
    """Computes effective permissions from current store state.

    Nothing is cached between calls, so a revocation is visible to the
    very next query. Use :meth:`for_request` to memoize within a single
    request.
    """

    def __init__(self, store: "AuthzStore") -> None:
        self.store = store

    def _compute(self, user_id: UUID, organization_id: UUID) -> frozenset[str]:
        if self.store.get_organization(organization_id) is None:
            raise OrganizationNotFoundError(organization_id)
        if self.store.get_membership(user_id, organization_id) is None:
            return frozenset()

        assignments = self.store.list_assignments(user_id, organization_id)
        if not assignments:
            return frozenset()

        granted: set[str] = set()
        for role in self.store.get_roles(a.role_id for a in assignments):
            if role.is_deleted or role.organization_id != organization_id:
                continue
            granted |= self.store.role_permission_ids(role.id)

        # Only permissions still present in the catalog count
        return frozenset(
            permission_id
            for permission_id in granted
            if self.store.get_permission(permission_id) is not None
        )

    def effective_permissions(
        self, user_id: UUID, organization_id: UUID
    ) -> frozenset[str]:
        """Get every permission identifier the user holds in the organization.

        Args:
            user_id: The user's UUID
            organization_id: The organization's UUID

        Returns:
            Set of permission identifiers; empty for non-members

        Raises:
            OrganizationNotFoundError: If the organization does not exist
        """
        return self._compute(user_id, organization_id)

    def effective_permission_details(
        self, user_id: UUID, organization_id: UUID
    ) -> list[Permission]:
        """Effective permissions as catalog records, in catalog order."""
        held = self.effective_permissions(user_id, organization_id)
        return [p for p in self.store.list_permissions() if p.id in held]

    def authorize(
        self, user_id: UUID, organization_id: UUID, permission_id: str
    ) -> bool:
        """Check if a user has a specific permission.

        Never raises for missing membership, role or permission; those
        are plain denials.

        Raises:
            OrganizationNotFoundError: If the organization does not exist
        """
        allowed = permission_id in self.effective_permissions(user_id, organization_id)
        if not allowed:
            logger.debug(
                "authorization_denied",
                user_id=str(user_id),
                organization_id=str(organization_id),
                permission_id=permission_id,
            )
        return allowed

    def authorize_any(
        self,
        user_id: UUID,
        organization_id: UUID,
        permission_ids: Iterable[str],
    ) -> bool:
        """Check if a user has at least one of the permissions.

        An empty request is denied.
        """
        requested = list(permission_ids)
        held = self.effective_permissions(user_id, organization_id)
        allowed = any(p in held for p in requested)
        if not allowed:
            logger.debug(
                "authorization_denied",
                user_id=str(user_id),
                organization_id=str(organization_id),
                permission_ids=requested,
                mode="any",
            )
        return allowed

    def authorize_all(
        self,
        user_id: UUID,
        organization_id: UUID,
        permission_ids: Iterable[str],
    ) -> bool:
        """Check if a user has every one of the permissions.

        An empty request is allowed.
        """
        requested = list(permission_ids)
        held = self.effective_permissions(user_id, organization_id)
        missing = [p for p in requested if p not in held]
        if missing:
            logger.debug(
                "authorization_denied",
                user_id=str(user_id),
                organization_id=str(organization_id),
                permission_ids=missing,
                mode="all",
            )
        return not missing

    def for_request(self) -> "RequestAuthorizer":
        """Return a resolver that memoizes results for one request."""
        return RequestAuthorizer(self.store)


class RequestAuthorizer(AuthorizationResolver):
    """Resolver memoizing effective permissions per (user, organization).

    Create one per request and drop it afterwards; the memo is never
    invalidated.
    """

    def __init__(self, store: "AuthzStore") -> None:
        super().__init__(store)
        self._memo: dict[tuple[UUID, UUID], frozenset[str]] = {}

    def effective_permissions(
        self, user_id: UUID, organization_id: UUID
    ) -> frozenset[str]:
        key = (user_id, organization_id)
        if key not in self._memo:
            self._memo[key] = self._compute(user_id, organization_id)
        return self._memo[key]

    def for_request(self) -> "RequestAuthorizer":
        return RequestAuthorizer(self.store)
