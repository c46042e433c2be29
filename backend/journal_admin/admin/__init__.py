"""Admin dashboard API: route guard, permission-gated dependencies, router."""

from .router import router

__all__ = ["router"]
