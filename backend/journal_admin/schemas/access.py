from pydantic import BaseModel, Field

from ..auth.rbac_contract import Permission, Role
from .actor import ActorRead


class PermissionRead(BaseModel):
    id: str
    name: str


class RoutePermissionRead(BaseModel):
    route: str
    permission: str
    description: str


class PermissionCatalogRead(BaseModel):
    permissions: list[PermissionRead]
    routes: list[RoutePermissionRead]


class RoleRead(BaseModel):
    role: Role
    display_name: str
    description: str
    permissions: list[Permission]


class RoleList(BaseModel):
    roles: list[RoleRead]


class CurrentActorRead(BaseModel):
    actor: ActorRead
    is_super_admin: bool
    permissions: list[Permission]


class NavigationRead(BaseModel):
    routes: list[RoutePermissionRead]


class RouteCheckRequest(BaseModel):
    route: str = Field(..., min_length=1, max_length=255)


class RouteDecisionRead(BaseModel):
    route: str
    allowed: bool
    redirect_to: str | None = None
