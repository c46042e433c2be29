"""
Admin Router - access introspection and actor management.

Every actor-management endpoint is gated by the route permission map entry
of the dashboard page it backs (``/admin/users``, ``/admin/roles``,
``/admin/permissions``). Mutations go through ``ActorService`` so the
mutation policy and audit trail apply; failed results are unwrapped into
``AppError`` responses.
"""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from .dependencies import require_route_permission
from .guard import resolve_route_access
from ..auth.enforcement_matrix import PERMISSIONS_ROUTE, ROLES_ROUTE, USERS_ROUTE
from ..auth.rbac_contract import Permission, Role, role_description, role_display_name
from ..config import settings
from ..dependencies import (
    get_actor_service,
    get_current_actor,
    get_current_actor_optional,
    get_permission_service,
)
from ..models.actor import Actor
from ..schemas.access import (
    CurrentActorRead,
    NavigationRead,
    PermissionCatalogRead,
    PermissionRead,
    RoleList,
    RoleRead,
    RouteCheckRequest,
    RouteDecisionRead,
    RoutePermissionRead,
)
from ..schemas.actor import (
    ActorCreate,
    ActorList,
    ActorPermissionsUpdate,
    ActorRead,
    ActorRoleUpdate,
    ActorUpdate,
)
from ..services.admin import ActorService, PermissionService

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
)


def _ordered(permissions) -> list[Permission]:
    return [p for p in Permission if p in permissions]


# ----------------------------------------------------------------------------
# Access introspection
# ----------------------------------------------------------------------------

@router.get("/me", response_model=CurrentActorRead)
async def read_current_actor(
    actor: Actor = Depends(get_current_actor),
    permissions: PermissionService = Depends(get_permission_service),
) -> CurrentActorRead:
    return CurrentActorRead(
        actor=ActorRead.from_actor(actor),
        is_super_admin=permissions.is_super_admin(actor),
        permissions=_ordered(permissions.effective_permissions(actor)),
    )


@router.get("/navigation", response_model=NavigationRead)
async def read_navigation(
    actor: Actor = Depends(get_current_actor),
    permissions: PermissionService = Depends(get_permission_service),
) -> NavigationRead:
    """Dashboard pages the current actor may open, for the sidebar."""
    reachable = set(permissions.accessible_routes(actor))
    return NavigationRead(
        routes=[
            RoutePermissionRead(**entry.as_dict())
            for entry in permissions.list_route_permissions()
            if entry.route in reachable
        ]
    )


@router.post("/access/check", response_model=RouteDecisionRead)
async def check_route_access(
    payload: RouteCheckRequest,
    actor: Actor | None = Depends(get_current_actor_optional),
    permissions: PermissionService = Depends(get_permission_service),
) -> RouteDecisionRead:
    decision = resolve_route_access(
        actor,
        payload.route,
        catalog=permissions.catalog,
        login_path=settings.admin_login_path,
    )
    return RouteDecisionRead(
        route=decision.route,
        allowed=decision.allowed,
        redirect_to=decision.redirect_to,
    )


@router.get("/roles", response_model=RoleList)
async def list_roles(
    _: Actor = Depends(require_route_permission(ROLES_ROUTE)),
    permissions: PermissionService = Depends(get_permission_service),
) -> RoleList:
    return RoleList(
        roles=[
            RoleRead(
                role=role,
                display_name=role_display_name(role),
                description=role_description(role),
                permissions=_ordered(permissions.catalog.grants_for(role)),
            )
            for role in Role
        ]
    )


@router.get("/permissions", response_model=PermissionCatalogRead)
async def list_permissions(
    _: Actor = Depends(require_route_permission(PERMISSIONS_ROUTE)),
    permissions: PermissionService = Depends(get_permission_service),
) -> PermissionCatalogRead:
    return PermissionCatalogRead(
        permissions=[PermissionRead(**entry.as_dict()) for entry in permissions.list_permissions()],
        routes=[
            RoutePermissionRead(**entry.as_dict())
            for entry in permissions.list_route_permissions()
        ],
    )


# ----------------------------------------------------------------------------
# Actor management
# ----------------------------------------------------------------------------

@router.get("/users", response_model=ActorList)
async def list_users(
    _: Actor = Depends(require_route_permission(USERS_ROUTE)),
    actors: ActorService = Depends(get_actor_service),
) -> ActorList:
    items = [ActorRead.from_actor(actor) for actor in actors.list_actors()]
    return ActorList(actors=items, total=len(items))


@router.post("/users", response_model=ActorRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: ActorCreate,
    acting: Actor = Depends(require_route_permission(USERS_ROUTE)),
    actors: ActorService = Depends(get_actor_service),
) -> ActorRead:
    return ActorRead.from_actor(actors.create_actor(acting, payload).unwrap())


@router.get("/users/{actor_id}", response_model=ActorRead)
async def get_user(
    actor_id: UUID,
    _: Actor = Depends(require_route_permission(USERS_ROUTE)),
    actors: ActorService = Depends(get_actor_service),
) -> ActorRead:
    return ActorRead.from_actor(actors.get_actor(actor_id).unwrap())


@router.patch("/users/{actor_id}", response_model=ActorRead)
async def update_user(
    actor_id: UUID,
    payload: ActorUpdate,
    acting: Actor = Depends(require_route_permission(USERS_ROUTE)),
    actors: ActorService = Depends(get_actor_service),
) -> ActorRead:
    return ActorRead.from_actor(actors.update_actor(acting, actor_id, payload).unwrap())


@router.delete("/users/{actor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    actor_id: UUID,
    acting: Actor = Depends(require_route_permission(USERS_ROUTE)),
    actors: ActorService = Depends(get_actor_service),
) -> Response:
    actors.delete_actor(acting, actor_id).unwrap()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/users/{actor_id}/role", response_model=ActorRead)
async def change_user_role(
    actor_id: UUID,
    payload: ActorRoleUpdate,
    acting: Actor = Depends(require_route_permission(ROLES_ROUTE)),
    actors: ActorService = Depends(get_actor_service),
) -> ActorRead:
    return ActorRead.from_actor(actors.change_role(acting, actor_id, payload.role).unwrap())


@router.put("/users/{actor_id}/permissions", response_model=ActorRead)
async def set_user_permissions(
    actor_id: UUID,
    payload: ActorPermissionsUpdate,
    acting: Actor = Depends(require_route_permission(PERMISSIONS_ROUTE)),
    actors: ActorService = Depends(get_actor_service),
) -> ActorRead:
    return ActorRead.from_actor(
        actors.set_permissions(acting, actor_id, payload.permissions).unwrap()
    )
