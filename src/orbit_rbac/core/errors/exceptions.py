"""Domain exceptions for the authorization engine.

These exceptions represent invariant violations and are converted to
RFC 7807 Problem Details responses by the exception handlers when the
engine is mounted behind FastAPI.
"""

from typing import Any


class RbacError(Exception):
    """Base exception for all authorization engine errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(RbacError):
    """Raised when a referenced entity does not exist at all.

    Example:
        raise NotFoundError("Role not found", resource="role", resource_id=str(role_id))
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class OrganizationNotFoundError(NotFoundError):
    """Raised when an organization id or slug does not resolve."""

    message = "Organization not found"
    error_code = "organization_not_found"

    def __init__(self, organization: object, **kwargs: Any) -> None:
        super().__init__(
            resource="organization", resource_id=str(organization), **kwargs
        )


class UnknownRoleError(NotFoundError):
    """Raised when a role is missing or has been soft-deleted."""

    message = "Role not found"
    error_code = "unknown_role"

    def __init__(self, role_id: object, **kwargs: Any) -> None:
        super().__init__(resource="role", resource_id=str(role_id), **kwargs)


class CrossTenantAccessError(RbacError):
    """Raised when an identifier resolves to another organization's entity.

    This is a security event and is logged as ``cross_tenant_access``.
    Callers outside the engine must surface it as the error returned by
    :meth:`to_public`, the same one a missing entity raises, so that the
    existence of other tenants' entities does not leak.
    """

    message = "Entity belongs to a different organization"
    error_code = "cross_tenant_access"
    status_code = 404

    def __init__(
        self,
        resource: str,
        resource_id: str,
        organization_id: str,
        owner_organization_id: str | None,
        **kwargs: Any,
    ) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(
            details={
                "resource": resource,
                "resource_id": resource_id,
                "organization_id": organization_id,
                "owner_organization_id": owner_organization_id,
            },
            **kwargs,
        )

    def to_public(self) -> RbacError:
        """Return the error a genuine miss on the same identifier would raise.

        The public error is indistinguishable from the one raised when the
        entity does not exist at all.
        """
        if self.resource == "role":
            return UnknownRoleError(self.resource_id)
        if self.resource == "permission":
            return UnknownPermissionError(self.resource_id)
        return NotFoundError(resource=self.resource, resource_id=self.resource_id)


class ConflictError(RbacError):
    """Raised when a uniqueness invariant would be violated.

    Example:
        raise ConflictError("Slug already taken", details={"slug": slug})
    """

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class DuplicateIdentifierError(ConflictError):
    """Raised when registering an identifier (permission id, slug) twice."""

    message = "Identifier already registered"
    error_code = "duplicate_identifier"


class DuplicateNameError(ConflictError):
    """Raised when a non-deleted role with the same name already exists."""

    message = "A role with this name already exists in the organization"
    error_code = "duplicate_name"


class AlreadyMemberError(ConflictError):
    """Raised when adding a membership that already exists."""

    message = "User is already a member of the organization"
    error_code = "already_member"


class AlreadyAssignedError(ConflictError):
    """Raised by strict role assignment when the triple already exists."""

    message = "Role is already assigned to the user"
    error_code = "already_assigned"


class ValidationError(RbacError):
    """Raised when a request fails validation or references unusable data.

    Example:
        raise ValidationError(
            "Invalid slug",
            errors=[{"field": "slug", "message": "Must be URL-safe"}]
        )
    """

    message = "Validation error"
    error_code = "validation_error"
    status_code = 422

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if errors:
            details["errors"] = errors
        super().__init__(message=message, details=details, **kwargs)


class UnknownPermissionError(ValidationError):
    """Raised when a grant or revoke names a permission absent from the catalog."""

    message = "Permission is not registered in the catalog"
    error_code = "unknown_permission"

    def __init__(self, permission_id: str, **kwargs: Any) -> None:
        super().__init__(
            f"Permission '{permission_id}' is not registered in the catalog",
            details={"permission_id": permission_id},
            **kwargs,
        )


class NotAMemberError(ValidationError):
    """Raised when a role assignment is attempted without a membership."""

    message = "User is not a member of the organization"
    error_code = "not_a_member"


class OrganizationMismatchError(ValidationError):
    """Raised when a role is assigned under an organization that does not own it."""

    message = "Role does not belong to the organization"
    error_code = "organization_mismatch"


class UnauthorizedError(RbacError):
    """Raised when no verified user identity accompanies a request."""

    message = "Authentication required"
    error_code = "unauthorized"
    status_code = 401


class ForbiddenError(RbacError):
    """Raised at the HTTP boundary when an authorization check denies access.

    The message is intentionally generic: it never names the permission
    that failed.
    """

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403
