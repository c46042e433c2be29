"""
Authorization evaluator.

Pure yes/no answers over an actor snapshot and an ``AccessCatalog``. Every
function here is total: it never raises and never mutates its inputs.
Anything malformed (missing actor, unknown role, unhashable tokens) is
answered with a deny.

Evaluation order for a single permission:
1. super admin bypass
2. explicit per-actor override
3. role grant
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .catalog import DEFAULT_CATALOG, AccessCatalog


def actor_field(actor: Any, field: str) -> Any:
    if isinstance(actor, Mapping):
        return actor.get(field)
    return getattr(actor, field, None)


def _as_tokens(value: Any) -> list[Any] | None:
    """List of tokens, or None when ``value`` is not a collection of tokens."""
    if isinstance(value, (str, bytes)):
        return None
    try:
        return list(value)
    except TypeError:
        return None


def _snapshot_tokens(value: Any) -> list[Any] | None:
    """Like ``_as_tokens`` but also rejects one-shot iterators.

    Actor fields are read on every check, so a generator would answer
    differently the second time.
    """
    try:
        if iter(value) is value:
            return None
    except TypeError:
        return None
    return _as_tokens(value)


def tokens_equal(left: Any, right: Any) -> bool:
    try:
        return bool(left == right)
    except Exception:
        return False


def _contains(collection: Any, item: Any) -> bool:
    try:
        return item in collection
    except TypeError:
        return False


def is_super_admin(actor: Any, *, catalog: AccessCatalog = DEFAULT_CATALOG) -> bool:
    if actor is None:
        return False
    return tokens_equal(actor_field(actor, "role"), catalog.super_admin_role)


def has_permission(
    actor: Any,
    permission: Any,
    *,
    catalog: AccessCatalog = DEFAULT_CATALOG,
) -> bool:
    if actor is None:
        return False

    if is_super_admin(actor, catalog=catalog):
        return True

    overrides = _snapshot_tokens(actor_field(actor, "permissions")) or []
    if any(tokens_equal(granted, permission) for granted in overrides):
        return True

    try:
        grants = catalog.grants_for(actor_field(actor, "role"))
    except TypeError:
        return False
    return _contains(grants, permission)


def has_route_permission(
    actor: Any,
    route: Any,
    *,
    catalog: AccessCatalog = DEFAULT_CATALOG,
) -> bool:
    try:
        required = catalog.required_permission(route)
    except TypeError:
        required = None
    if required is None:
        return catalog.unmapped_routes_allowed
    return has_permission(actor, required, catalog=catalog)


def has_any_permission(
    actor: Any,
    permissions: Iterable[Any] | None,
    *,
    catalog: AccessCatalog = DEFAULT_CATALOG,
) -> bool:
    tokens = _as_tokens(permissions) if permissions is not None else []
    if not tokens:
        return False
    return any(has_permission(actor, p, catalog=catalog) for p in tokens)


def has_all_permissions(
    actor: Any,
    permissions: Iterable[Any] | None,
    *,
    catalog: AccessCatalog = DEFAULT_CATALOG,
) -> bool:
    tokens = _as_tokens(permissions) if permissions is not None else []
    if tokens is None:
        return False
    return all(has_permission(actor, p, catalog=catalog) for p in tokens)


def effective_permissions(
    actor: Any,
    *,
    catalog: AccessCatalog = DEFAULT_CATALOG,
) -> frozenset[str]:
    """Every catalog permission the actor currently holds."""
    if actor is None:
        return frozenset()
    return frozenset(
        permission
        for permission in catalog.permissions
        if has_permission(actor, permission, catalog=catalog)
    )


def accessible_routes(
    actor: Any,
    *,
    catalog: AccessCatalog = DEFAULT_CATALOG,
) -> list[str]:
    """Mapped routes the actor may reach, in map order."""
    return [
        route
        for route in catalog.route_permissions
        if has_route_permission(actor, route, catalog=catalog)
    ]
