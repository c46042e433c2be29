import logging
import threading
from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .auth.catalog import AccessCatalog, build_default_catalog
from .config import settings
from .crud.actor import InMemoryActorDirectory
from .domain.ports.actor import ActorDirectoryPort
from .models.actor import Actor
from .security.token_inspection import ExpiredTokenError, InvalidTokenError, actor_id_from_token
from .services.admin import ActorService, PermissionService
from .services.audit import AuditService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

_directory_instance: InMemoryActorDirectory | None = None
_directory_lock = threading.Lock()


def get_actor_directory() -> ActorDirectoryPort:
    """Process-wide actor directory, seeded with the bootstrap super admin."""
    global _directory_instance

    if _directory_instance is not None:
        return _directory_instance

    with _directory_lock:
        if _directory_instance is None:
            directory = InMemoryActorDirectory()
            if settings.bootstrap_admin_email:
                admin = directory.ensure_super_admin(
                    email=settings.bootstrap_admin_email,
                    name=settings.bootstrap_admin_name,
                )
                logger.info("Bootstrap super admin ready id=%s", admin.id)
            _directory_instance = directory

    return _directory_instance


@lru_cache
def get_access_catalog() -> AccessCatalog:
    catalog = build_default_catalog(unmapped_routes_allowed=settings.unmapped_routes_allowed)
    if not catalog.unmapped_routes_allowed:
        logger.info("Unmapped admin routes are denied (UNMAPPED_ROUTE_POLICY=deny)")
    return catalog


def get_audit_service() -> AuditService:
    return AuditService()


def get_permission_service(
    catalog: AccessCatalog = Depends(get_access_catalog),
    audit: AuditService = Depends(get_audit_service),
) -> PermissionService:
    return PermissionService(catalog, audit)


def get_actor_service(
    directory: ActorDirectoryPort = Depends(get_actor_directory),
    catalog: AccessCatalog = Depends(get_access_catalog),
    audit: AuditService = Depends(get_audit_service),
) -> ActorService:
    return ActorService(directory, catalog, audit)


async def get_current_actor(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    directory: ActorDirectoryPort = Depends(get_actor_directory),
) -> Actor:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated"
        )

    try:
        actor_id = actor_id_from_token(credentials.credentials)
    except ExpiredTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Token has expired"
        ) from None
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token"
        ) from None

    actor = directory.get_actor(actor_id)
    if actor is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Actor not found"
        )

    return actor


async def get_current_actor_optional(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    directory: ActorDirectoryPort = Depends(get_actor_directory),
) -> Actor | None:
    if credentials is None:
        return None
    return await get_current_actor(credentials=credentials, directory=directory)
