from .actor_service import ActorService
from .permission_service import PermissionService

__all__ = ["ActorService", "PermissionService"]
