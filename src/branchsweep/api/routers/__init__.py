"""API routers for branchsweep."""

from branchsweep.api.routers import repositories

__all__ = ["repositories"]
