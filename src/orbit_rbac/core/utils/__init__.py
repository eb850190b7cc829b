"""Shared helper functions."""

from orbit_rbac.core.utils.text import generate_slug, normalize_role_name


__all__ = [
    "generate_slug",
    "normalize_role_name",
]
