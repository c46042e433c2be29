"""
Actor mutation policy.

Predicates deciding whether an acting actor may create, edit, re-role, grant
permissions to, or delete another actor. Like the evaluator they never raise;
``ActorService`` turns a False into a ``PermissionError`` result so the rules
hold whichever surface triggers the mutation.
"""
from __future__ import annotations

from typing import Any

from .catalog import DEFAULT_CATALOG, AccessCatalog
from .evaluator import actor_field, has_permission, is_super_admin, tokens_equal
from .rbac_contract import Permission


def can_manage_actors(acting: Any, *, catalog: AccessCatalog = DEFAULT_CATALOG) -> bool:
    return has_permission(acting, Permission.MANAGE_USERS, catalog=catalog)


def can_assign_role(
    acting: Any, role: Any, *, catalog: AccessCatalog = DEFAULT_CATALOG
) -> bool:
    """Whether ``acting`` may create or save an actor holding ``role``."""
    if tokens_equal(role, catalog.super_admin_role):
        return has_permission(acting, Permission.MANAGE_ROLES, catalog=catalog)
    return acting is not None


def can_change_role(acting: Any, *, catalog: AccessCatalog = DEFAULT_CATALOG) -> bool:
    return has_permission(acting, Permission.MANAGE_ROLES, catalog=catalog)


def can_grant_permissions(acting: Any, *, catalog: AccessCatalog = DEFAULT_CATALOG) -> bool:
    return has_permission(acting, Permission.MANAGE_PERMISSIONS, catalog=catalog)


def is_same_actor(acting: Any, target: Any) -> bool:
    if acting is None or target is None:
        return False
    acting_id = actor_field(acting, "id")
    return acting_id is not None and tokens_equal(acting_id, actor_field(target, "id"))


def can_delete_actor(
    acting: Any, target: Any, *, catalog: AccessCatalog = DEFAULT_CATALOG
) -> bool:
    if acting is None or target is None:
        return False
    if is_same_actor(acting, target):
        return False
    if is_super_admin(target, catalog=catalog) and not is_super_admin(acting, catalog=catalog):
        return False
    return can_manage_actors(acting, catalog=catalog)


def deletion_denial_reason(
    acting: Any, target: Any, *, catalog: AccessCatalog = DEFAULT_CATALOG
) -> str | None:
    """Why ``can_delete_actor`` refuses, or None when deletion is allowed."""
    if acting is None:
        return "Authentication required"
    if is_same_actor(acting, target):
        return "Actors cannot delete themselves"
    if is_super_admin(target, catalog=catalog) and not is_super_admin(acting, catalog=catalog):
        return "Only a super admin can delete another super admin"
    if not can_manage_actors(acting, catalog=catalog):
        return f"Permission denied: {Permission.MANAGE_USERS.value} required"
    return None
