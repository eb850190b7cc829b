"""Idempotent bootstrap seeding.

Every step checks for existing data before inserting, so the whole
bootstrap is safe to run on every process start. Role grants are only
applied when a role is first created: permissions added to the catalog
later never flow into existing roles by themselves.
"""

from typing import TYPE_CHECKING
from uuid import UUID

import structlog
from pydantic import BaseModel, Field

from orbit_rbac.config import Settings, settings
from orbit_rbac.core.errors import (
    AlreadyMemberError,
    DuplicateIdentifierError,
    DuplicateNameError,
    UnknownRoleError,
)
from orbit_rbac.rbac.catalog import PermissionCatalog
from orbit_rbac.rbac.defaults import (
    ALL_PERMISSIONS,
    OWNER_ROLE,
    SYSTEM_PERMISSIONS,
    SYSTEM_ROLES,
)
from orbit_rbac.rbac.memberships import MembershipStore
from orbit_rbac.rbac.organizations import OrganizationStore
from orbit_rbac.rbac.roles import RoleStore
from orbit_rbac.rbac.schemas import (
    MembershipTier,
    Organization,
    Role,
    RoleAssignment,
)


if TYPE_CHECKING:
    from orbit_rbac.stores.base import AuthzStore


logger = structlog.get_logger()


class SeedReport(BaseModel):
    """What a bootstrap run created. Empty lists mean nothing was missing."""

    organization: Organization
    permissions_created: list[str] = Field(default_factory=list)
    roles_created: list[str] = Field(default_factory=list)
    owner_id: UUID | None = None


def seed_catalog(store: "AuthzStore") -> list[str]:
    """Register every built-in permission that is not yet in the catalog.

    Returns:
        Identifiers registered by this call
    """
    catalog = PermissionCatalog(store)
    created: list[str] = []

    for group in SYSTEM_PERMISSIONS:
        for data in group["permissions"]:
            if catalog.contains(data["id"]):
                continue
            try:
                catalog.register(
                    data["id"],
                    group["category"],
                    data["description"],
                    purpose=data["purpose"],
                )
            except DuplicateIdentifierError:
                # Registered concurrently by another process
                continue
            created.append(data["id"])

    if created:
        logger.info("catalog_seeded", count=len(created))
    else:
        logger.debug("catalog_already_seeded")
    return created


def seed_organization(store: "AuthzStore", name: str, slug: str) -> Organization:
    """Return the organization with ``slug``, creating it if missing."""
    organizations = OrganizationStore(store)

    existing = store.get_organization_by_slug(slug)
    if existing is not None:
        logger.debug("organization_already_seeded", slug=slug)
        return existing

    try:
        return organizations.create_organization(name, slug=slug)
    except DuplicateIdentifierError:
        return organizations.get_by_slug(slug)


def _resolve_grants(
    catalog: PermissionCatalog, organization_id: UUID, selectors: list[str]
) -> list[str]:
    available = [p.id for p in catalog.available_to(organization_id)]
    if ALL_PERMISSIONS in selectors:
        return available

    known = set(available)
    missing = [p for p in selectors if p not in known]
    if missing:
        logger.warning("seed_permissions_missing", permission_ids=missing)
    return [p for p in selectors if p in known]


def seed_default_roles(store: "AuthzStore", organization_id: UUID) -> list[Role]:
    """Create the system roles that the organization does not have yet.

    A newly created role is granted its default permissions from the
    catalog as it stands now. Existing roles are left untouched.

    Returns:
        Roles created by this call

    Raises:
        OrganizationNotFoundError: If the organization does not exist
    """
    catalog = PermissionCatalog(store)
    roles = RoleStore(store)
    created: list[Role] = []

    for name, data in SYSTEM_ROLES.items():
        if store.find_role_by_name(organization_id, name) is not None:
            continue
        try:
            role = roles.create_role(
                organization_id,
                name,
                data["description"],
                purpose=data["purpose"],
                department=data["department"],
            )
        except DuplicateNameError:
            # Created concurrently; its grants belong to the other writer
            continue

        for permission_id in _resolve_grants(
            catalog, organization_id, data["permissions"]
        ):
            roles.grant_permission(role.id, permission_id)
        created.append(role)

    if created:
        logger.info(
            "roles_seeded",
            organization_id=str(organization_id),
            roles=[r.name for r in created],
        )
    return created


def seed_owner(
    store: "AuthzStore", organization_id: UUID, user_id: UUID
) -> RoleAssignment:
    """Make ``user_id`` an owner holding the super administrator role.

    An existing membership is kept as is; the role is assigned if missing.

    Raises:
        UnknownRoleError: If the organization has no live super administrator role
    """
    memberships = MembershipStore(store)

    role = store.find_role_by_name(organization_id, OWNER_ROLE)
    if role is None:
        raise UnknownRoleError(OWNER_ROLE)

    if store.get_membership(user_id, organization_id) is None:
        try:
            memberships.add_member(user_id, organization_id, MembershipTier.OWNER)
        except AlreadyMemberError:
            logger.debug("owner_already_member", user_id=str(user_id))

    return memberships.assign_role(user_id, role.id, organization_id)


def bootstrap(
    store: "AuthzStore",
    *,
    organization_name: str | None = None,
    organization_slug: str | None = None,
    owner_id: UUID | None = None,
    config: Settings | None = None,
) -> SeedReport:
    """Seed the catalog, the bootstrap organization, its roles and its owner.

    Arguments default to the ``BOOTSTRAP_*`` settings.

    Returns:
        Report of what was created
    """
    config = config or settings
    name = organization_name or config.bootstrap_organization_name
    slug = organization_slug or config.bootstrap_organization_slug
    owner_id = owner_id or config.bootstrap_owner_id

    logger.info("seed_started", organization_slug=slug)

    permissions_created = seed_catalog(store)
    organization = seed_organization(store, name, slug)
    roles_created = seed_default_roles(store, organization.id)
    if owner_id is not None:
        seed_owner(store, organization.id, owner_id)

    report = SeedReport(
        organization=organization,
        permissions_created=permissions_created,
        roles_created=[r.name for r in roles_created],
        owner_id=owner_id,
    )
    logger.info(
        "seed_completed",
        organization_id=str(organization.id),
        permissions_created=len(report.permissions_created),
        roles_created=report.roles_created,
    )
    return report
