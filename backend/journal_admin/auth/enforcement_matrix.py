"""Declarative mapping of admin routes to the single permission they require.

Routes are matched exactly. A route absent from this map has no permission
requirement; whether it is reachable is decided by the catalog's unmapped
route policy.
"""
from __future__ import annotations

from typing import Final

from .rbac_contract import Permission

ADMIN_ROOT: Final[str] = "/admin"
USERS_ROUTE: Final[str] = "/admin/users"
ROLES_ROUTE: Final[str] = "/admin/roles"
PERMISSIONS_ROUTE: Final[str] = "/admin/permissions"

ROUTE_PERMISSIONS: Final[dict[str, Permission]] = {
    ADMIN_ROOT: Permission.VIEW_DASHBOARD,
    "/admin/posts": Permission.MANAGE_POSTS,
    "/admin/authors": Permission.MANAGE_AUTHORS,
    "/admin/journals": Permission.MANAGE_JOURNALS,
    "/admin/journal-articles": Permission.MANAGE_ARTICLES,
    "/admin/call-for-papers": Permission.MANAGE_CALL_FOR_PAPERS,
    "/admin/notifications": Permission.MANAGE_NOTIFICATIONS,
    "/admin/media": Permission.MANAGE_MEDIA,
    "/admin/editorial-board": Permission.MANAGE_EDITORIAL_BOARD,
    "/admin/board-advisors": Permission.MANAGE_BOARD_ADVISORS,
    USERS_ROUTE: Permission.MANAGE_USERS,
    ROLES_ROUTE: Permission.MANAGE_ROLES,
    PERMISSIONS_ROUTE: Permission.MANAGE_PERMISSIONS,
}
