"""Error handling module with RFC 7807 Problem Details."""

from orbit_rbac.core.errors.exceptions import (
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


__all__ = [
    "AlreadyAssignedError",
    "AlreadyMemberError",
    "ConflictError",
    "CrossTenantAccessError",
    "DuplicateIdentifierError",
    "DuplicateNameError",
    "ForbiddenError",
    "NotAMemberError",
    "NotFoundError",
    "OrganizationMismatchError",
    "OrganizationNotFoundError",
    "RbacError",
    "UnauthorizedError",
    "UnknownPermissionError",
    "UnknownRoleError",
    "ValidationError",
]
