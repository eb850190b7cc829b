"""Authorization read routes."""

from uuid import UUID

from fastapi import APIRouter, Depends

from orbit_rbac.api.dependencies import (
    Authorizer,
    CurrentUserId,
    Guard,
    require_permission,
)
from orbit_rbac.api.schemas import (
    EffectivePermissionsResponse,
    HealthResponse,
    PermissionResponse,
    RoleResponse,
)
from orbit_rbac.core.errors import OrganizationNotFoundError


api_router = APIRouter()

health_router = APIRouter(tags=["health"])


@health_router.get(
    "/health/live",
    response_model=HealthResponse,
    summary="Liveness probe",
)
def liveness() -> HealthResponse:
    """Liveness probe endpoint."""
    return HealthResponse(status="alive")


organizations_router = APIRouter(
    prefix="/organizations/{organization_id}",
    tags=["authorization"],
)


@organizations_router.get(
    "/permissions/me",
    response_model=EffectivePermissionsResponse,
    summary="Get my permissions",
    description="List the permissions the caller holds in the organization.",
)
def my_permissions(
    organization_id: UUID,
    user_id: CurrentUserId,
    authorizer: Authorizer,
) -> EffectivePermissionsResponse:
    """Effective permissions of the caller, in catalog order.

    An unknown organization answers like one the caller is not a member of.
    """
    try:
        permissions = authorizer.effective_permission_details(
            user_id, organization_id
        )
    except OrganizationNotFoundError:
        permissions = []
    return EffectivePermissionsResponse(
        organization_id=organization_id,
        user_id=user_id,
        permissions=[PermissionResponse.model_validate(p) for p in permissions],
    )


@organizations_router.get(
    "/roles",
    response_model=list[RoleResponse],
    summary="List roles",
    description="List the live roles of the organization. Requires roles.view.",
    dependencies=[Depends(require_permission("roles.view"))],
)
def list_roles(guard: Guard) -> list[RoleResponse]:
    """Live roles in creation order."""
    return [RoleResponse.model_validate(role) for role in guard.list_roles()]


api_router.include_router(health_router)
api_router.include_router(organizations_router)
