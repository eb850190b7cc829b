"""Role-based access control for multi-tenant applications."""

from orbit_rbac.rbac.catalog import PermissionCatalog
from orbit_rbac.rbac.guard import TenantGuard
from orbit_rbac.rbac.memberships import MembershipStore
from orbit_rbac.rbac.organizations import OrganizationStore
from orbit_rbac.rbac.resolver import AuthorizationResolver, RequestAuthorizer
from orbit_rbac.rbac.roles import RoleStore
from orbit_rbac.rbac.schemas import (
    Membership,
    MembershipTier,
    Organization,
    Permission,
    Role,
    RoleAssignment,
)
from orbit_rbac.rbac.seeding import (
    SeedReport,
    bootstrap,
    seed_catalog,
    seed_default_roles,
    seed_organization,
    seed_owner,
)


__all__ = [
    # Services
    "AuthorizationResolver",
    # Records
    "Membership",
    "MembershipStore",
    "MembershipTier",
    "Organization",
    "OrganizationStore",
    "Permission",
    "PermissionCatalog",
    "RequestAuthorizer",
    "Role",
    "RoleAssignment",
    "RoleStore",
    # Seeding
    "SeedReport",
    "TenantGuard",
    "bootstrap",
    "seed_catalog",
    "seed_default_roles",
    "seed_organization",
    "seed_owner",
]
