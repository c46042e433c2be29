"""
Admin Dependencies - permission-gated dependency injection.

Each dependency resolves the current actor (anonymous allowed), asks the
``PermissionService`` and returns the actor when access is granted.
Denials are logged and audited by the service, which raises ``AuthError``
(401) for anonymous callers and ``PermissionError`` (403) otherwise.
"""
from __future__ import annotations

from typing import Callable

from fastapi import Depends, Request

from ..auth.rbac_contract import Permission
from ..dependencies import get_current_actor_optional, get_permission_service
from ..models.actor import Actor
from ..services.admin.permission_service import PermissionService


def require_permission(permission: Permission) -> Callable:
    """Enforce a single permission."""

    async def dependency(
        request: Request,
        actor: Actor | None = Depends(get_current_actor_optional),
        permissions: PermissionService = Depends(get_permission_service),
    ) -> Actor | None:
        permissions.require_permission(
            actor,
            permission,
            request_method=request.method,
            request_path=request.url.path,
        )
        return actor

    return dependency


def require_route_permission(route: str) -> Callable:
    """Enforce whatever the route permission map requires for ``route``."""

    async def dependency(
        request: Request,
        actor: Actor | None = Depends(get_current_actor_optional),
        permissions: PermissionService = Depends(get_permission_service),
    ) -> Actor | None:
        permissions.require_route_permission(
            actor,
            route,
            request_method=request.method,
            request_path=request.url.path,
        )
        return actor

    return dependency
