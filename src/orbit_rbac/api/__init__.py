"""HTTP boundary adapter."""

from orbit_rbac.api.router import api_router


__all__ = ["api_router"]
