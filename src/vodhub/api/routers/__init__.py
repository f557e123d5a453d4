"""API routers for vodhub."""

from vodhub.api.routers import detail, health, search

__all__ = ["detail", "health", "search"]
