"""Multi-tenant role-based access control engine."""

__version__ = "0.1.0"

from orbit_rbac.core.errors import (  # noqa: E402
    AlreadyAssignedError,
    AlreadyMemberError,
    ConflictError,
    CrossTenantAccessError,
    DuplicateIdentifierError,
    DuplicateNameError,
    ForbiddenError,
    NotAMemberError,
    NotFoundError,
    OrganizationMismatchError,
    OrganizationNotFoundError,
    RbacError,
    UnauthorizedError,
    UnknownPermissionError,
    UnknownRoleError,
    ValidationError,
)
from orbit_rbac.rbac import (  # noqa: E402
    AuthorizationResolver,
    Membership,
    MembershipStore,
    MembershipTier,
    Organization,
    OrganizationStore,
    Permission,
    PermissionCatalog,
    RequestAuthorizer,
    Role,
    RoleAssignment,
    RoleStore,
    SeedReport,
    TenantGuard,
    bootstrap,
    seed_catalog,
    seed_default_roles,
    seed_organization,
    seed_owner,
)
from orbit_rbac.stores import (  # noqa: E402
    AuthzStore,
    InMemoryStore,
    SqlAlchemyStore,
    create_store,
)


__all__ = [
    "AlreadyAssignedError",
    "AlreadyMemberError",
    "AuthorizationResolver",
    "AuthzStore",
    "ConflictError",
    "CrossTenantAccessError",
    "DuplicateIdentifierError",
    "DuplicateNameError",
    "ForbiddenError",
    "InMemoryStore",
    "Membership",
    "MembershipStore",
    "MembershipTier",
    "NotAMemberError",
    "NotFoundError",
    "Organization",
    "OrganizationMismatchError",
    "OrganizationNotFoundError",
    "OrganizationStore",
    "Permission",
    "PermissionCatalog",
    "RbacError",
    "RequestAuthorizer",
    "Role",
    "RoleAssignment",
    "RoleStore",
    "SeedReport",
    "SqlAlchemyStore",
    "TenantGuard",
    "UnauthorizedError",
    "UnknownPermissionError",
    "UnknownRoleError",
    "ValidationError",
    "__version__",
    "bootstrap",
    "create_store",
    "seed_catalog",
    "seed_default_roles",
    "seed_organization",
    "seed_owner",
]
