"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

import re


# Slug generation
MAX_SLUG_LENGTH = 63
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

# String field lengths
MAX_NAME_LENGTH = 255
MAX_ROLE_NAME_LENGTH = 100
MAX_PERMISSION_ID_LENGTH = 100
MAX_CATEGORY_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 255
MAX_DEPARTMENT_LENGTH = 100

# Permission identifiers are lowercase dotted segments, e.g. "users.roles.manage"
PERMISSION_ID_PATTERN = re.compile(r"^[a-z][a-z0-9_]*(?:\.[a-z][a-z0-9_]*)*$")

# Bootstrap defaults
DEFAULT_ORGANIZATION_NAME = "Default Organization"
DEFAULT_ORGANIZATION_SLUG = "default"
