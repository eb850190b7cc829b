"""Response schemas for the authorization API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str


class PermissionResponse(BaseModel):
    """A catalog permission."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    category: str
    description: str
    purpose: str | None = None


class EffectivePermissionsResponse(BaseModel):
    """Permissions the caller holds in an organization."""

    organization_id: UUID
    user_id: UUID
    permissions: list[PermissionResponse]


class RoleResponse(BaseModel):
    """A live role of an organization."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organization_id: UUID
    name: str
    description: str | None = None
    purpose: str | None = None
    department: str | None = None
    created_at: datetime
