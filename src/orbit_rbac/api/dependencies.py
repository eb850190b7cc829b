"""FastAPI dependencies for authorization.

The engine never authenticates. An upstream identity layer is expected
to verify the caller and put their id on ``request.state.user_id``.
"""

from collections.abc import Callable
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request

from orbit_rbac.core.errors import (
    ForbiddenError,
    OrganizationNotFoundError,
    UnauthorizedError,
)
from orbit_rbac.rbac.guard import TenantGuard
from orbit_rbac.rbac.resolver import AuthorizationResolver, RequestAuthorizer
from orbit_rbac.stores.base import AuthzStore


def get_store(request: Request) -> AuthzStore:
    """Store attached to the application at startup."""
    return request.app.state.store


Store = Annotated[AuthzStore, Depends(get_store)]


def get_authorizer(store: Store) -> RequestAuthorizer:
    """Memoizing resolver scoped to the current request."""
    return AuthorizationResolver(store).for_request()


Authorizer = Annotated[RequestAuthorizer, Depends(get_authorizer)]


def get_current_user_id(request: Request) -> UUID:
    """Id of the verified caller.

    Raises:
        UnauthorizedError: If the identity layer did not set a valid user id
    """
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        raise UnauthorizedError(
            "Missing authenticated user",
            error_code="missing_identity",
        )
    if isinstance(user_id, UUID):
        return user_id
    try:
        return UUID(str(user_id))
    except ValueError as e:
        raise UnauthorizedError(
            "Invalid authenticated user",
            error_code="invalid_identity",
        ) from e


CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]


def get_tenant_guard(organization_id: UUID, store: Store) -> TenantGuard:
    """Guard bound to the organization named in the path."""
    return TenantGuard(store, organization_id)


Guard = Annotated[TenantGuard, Depends(get_tenant_guard)]


PermissionDependency = Callable[[UUID, UUID, RequestAuthorizer], None]


def _permission_dependency(
    permission_ids: list[str], require_all: bool
) -> PermissionDependency:
    def dependency(
        organization_id: UUID,
        user_id: CurrentUserId,
        authorizer: Authorizer,
    ) -> None:
        check = authorizer.authorize_all if require_all else authorizer.authorize_any
        try:
            allowed = check(user_id, organization_id, permission_ids)
        except OrganizationNotFoundError:
            # Unknown organizations are denied like non-members
            allowed = False

        if not allowed:
            raise ForbiddenError(error_code="permission_denied")

    return dependency


def require_permission(permission_id: str) -> PermissionDependency:
    """Dependency that requires one permission in the path's organization.

    Usage:
        @router.get(
            "/organizations/{organization_id}/roles",
            dependencies=[Depends(require_permission("roles.view"))],
        )
        def list_roles(organization_id: UUID): ...

    Raises:
        ForbiddenError: If the caller lacks the permission
    """
    return _permission_dependency([permission_id], require_all=True)


def require_any_permission(
    permission_ids: list[str],
) -> PermissionDependency:
    """Dependency that requires at least one of the permissions."""
    return _permission_dependency(permission_ids, require_all=False)


def require_all_permissions(
    permission_ids: list[str],
) -> PermissionDependency:
    """Dependency that requires every one of the permissions."""
    return _permission_dependency(permission_ids, require_all=True)
