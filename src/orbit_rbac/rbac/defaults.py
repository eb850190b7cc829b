"""Built-in permission catalog and system role definitions.

Seeding reads these definitions; nothing here touches a store.
"""

from typing import TypedDict


# ============================================================
# Type Definitions
# ============================================================


class PermissionData(TypedDict):
    id: str
    description: str
    purpose: str


class CategoryData(TypedDict):
    category: str
    permissions: list[PermissionData]


class RoleData(TypedDict):
    description: str
    purpose: str
    department: str
    permissions: list[str]


# Grants every permission in the catalog at the moment the role is seeded
ALL_PERMISSIONS = "*"


# ============================================================
# System Permissions
# ============================================================

USER_MANAGEMENT = "User Management"
ORGANIZATION_MANAGEMENT = "Organization Management"
ROLE_MANAGEMENT = "Role Management"
FUNCTION_MANAGEMENT = "Function Management"

SYSTEM_PERMISSIONS: list[CategoryData] = [
    {
        "category": USER_MANAGEMENT,
        "permissions": [
            {
                "id": "users.view",
                "description": "View user profiles and information",
                "purpose": "Read access to user data",
            },
            {
                "id": "users.create",
                "description": "Create new user accounts",
                "purpose": "Add new users to the organization",
            },
            {
                "id": "users.update",
                "description": "Update user profile information",
                "purpose": "Modify existing user data",
            },
            {
                "id": "users.delete",
                "description": "Delete user accounts",
                "purpose": "Remove users from the organization",
            },
            {
                "id": "users.roles.manage",
                "description": "Assign and remove roles from users",
                "purpose": "Control user permissions",
            },
            {
                "id": "users.roles.view",
                "description": "View role assignments for users",
                "purpose": "See what roles users have",
            },
            {
                "id": "users.invite",
                "description": "Send invitations to new users",
                "purpose": "Onboard new team members",
            },
            {
                "id": "users.deactivate",
                "description": "Deactivate user accounts",
                "purpose": "Temporarily disable user access",
            },
            {
                "id": "users.reactivate",
                "description": "Reactivate deactivated user accounts",
                "purpose": "Restore user access",
            },
            {
                "id": "users.activity.view",
                "description": "View user activity logs",
                "purpose": "Monitor user actions",
            },
        ],
    },
    {
        "category": ORGANIZATION_MANAGEMENT,
        "permissions": [
            {
                "id": "organization.view",
                "description": "View organization information",
                "purpose": "Read access to organization data",
            },
            {
                "id": "organization.update",
                "description": "Update organization information",
                "purpose": "Modify organization profile",
            },
            {
                "id": "organization.settings.manage",
                "description": "Manage organization settings",
                "purpose": "Configure organization preferences",
            },
            {
                "id": "organization.settings.view",
                "description": "View organization settings",
                "purpose": "Read organization configuration",
            },
            {
                "id": "organization.billing.manage",
                "description": "Manage billing and subscriptions",
                "purpose": "Handle payments and plans",
            },
            {
                "id": "organization.billing.view",
                "description": "View billing information",
                "purpose": "See payment history and invoices",
            },
            {
                "id": "organization.integrations.manage",
                "description": "Manage third-party integrations",
                "purpose": "Configure external services",
            },
            {
                "id": "organization.integrations.view",
                "description": "View integration configurations",
                "purpose": "See connected services",
            },
            {
                "id": "organization.apikeys.manage",
                "description": "Create and revoke API keys",
                "purpose": "Manage programmatic access",
            },
            {
                "id": "organization.apikeys.view",
                "description": "View API keys",
                "purpose": "See existing API keys",
            },
            {
                "id": "organization.webhooks.manage",
                "description": "Configure webhook endpoints",
                "purpose": "Set up event notifications",
            },
            {
                "id": "organization.webhooks.view",
                "description": "View webhook configurations",
                "purpose": "See webhook settings",
            },
            {
                "id": "organization.auditlog.view",
                "description": "View organization audit log",
                "purpose": "Review security and compliance events",
            },
            {
                "id": "organization.data.export",
                "description": "Export organization data",
                "purpose": "Download data for backup or migration",
            },
        ],
    },
    {
        "category": ROLE_MANAGEMENT,
        "permissions": [
            {
                "id": "roles.view",
                "description": "View roles",
                "purpose": "See available roles",
            },
            {
                "id": "roles.create",
                "description": "Create new roles",
                "purpose": "Define custom permission sets",
            },
            {
                "id": "roles.update",
                "description": "Update existing roles",
                "purpose": "Modify role definitions",
            },
            {
                "id": "roles.delete",
                "description": "Delete roles",
                "purpose": "Remove unused roles",
            },
            {
                "id": "roles.functions.assign",
                "description": "Assign functions to roles",
                "purpose": "Configure role permissions",
            },
        ],
    },
    {
        "category": FUNCTION_MANAGEMENT,
        "permissions": [
            {
                "id": "functions.view",
                "description": "View functions",
                "purpose": "See available permissions",
            },
            {
                "id": "functions.create",
                "description": "Create custom functions",
                "purpose": "Define new permissions",
            },
            {
                "id": "functions.update",
                "description": "Update functions",
                "purpose": "Modify permission definitions",
            },
            {
                "id": "functions.delete",
                "description": "Delete functions",
                "purpose": "Remove unused permissions",
            },
        ],
    },
]


def permission_ids(category: str) -> list[str]:
    """Identifiers of one built-in category, in definition order."""
    for group in SYSTEM_PERMISSIONS:
        if group["category"] == category:
            return [p["id"] for p in group["permissions"]]
    raise KeyError(category)


# ============================================================
# System Roles
# ============================================================

SUPER_ADMINISTRATOR = "Super Administrator"
USER_ADMINISTRATOR = "User Administrator"
ORGANIZATION_ADMINISTRATOR = "Organization Administrator"
VIEWER = "Viewer"

SYSTEM_ROLES: dict[str, RoleData] = {
    SUPER_ADMINISTRATOR: {
        "description": (
            "Full access to all system features including user and "
            "organization management"
        ),
        "purpose": "Ultimate administrative control",
        "department": "Administration",
        "permissions": [ALL_PERMISSIONS],
    },
    USER_ADMINISTRATOR: {
        "description": "Full access to user management features",
        "purpose": "Manage users and their permissions",
        "department": "Human Resources",
        "permissions": [
            *permission_ids(USER_MANAGEMENT),
            *permission_ids(ROLE_MANAGEMENT),
            "functions.view",
        ],
    },
    ORGANIZATION_ADMINISTRATOR: {
        "description": "Full access to organization management features",
        "purpose": "Configure organization settings and integrations",
        "department": "Operations",
        "permissions": [
            *permission_ids(ORGANIZATION_MANAGEMENT),
            "users.view",
            "users.roles.view",
            "roles.view",
            "functions.view",
        ],
    },
    # Deliberately not every *.view: users.activity.view and
    # organization.auditlog.view are left out
    VIEWER: {
        "description": "Read-only access to view users and organization information",
        "purpose": "Observation without modification capabilities",
        "department": "General",
        "permissions": [
            "users.view",
            "users.roles.view",
            "organization.view",
            "organization.settings.view",
            "organization.billing.view",
            "organization.integrations.view",
            "organization.apikeys.view",
            "organization.webhooks.view",
            "roles.view",
            "functions.view",
        ],
    },
}

# Role assigned to the bootstrap owner
OWNER_ROLE = SUPER_ADMINISTRATOR
