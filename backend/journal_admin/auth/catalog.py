"""
Immutable access catalog: permissions, role grants and the route map.

The catalog is built once at startup and injected into the evaluator. The
super admin grant set is derived from the permission list at construction
time, so it always equals the whole catalog.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from .enforcement_matrix import ROUTE_PERMISSIONS
from .rbac_contract import ALL_PERMISSIONS, ROLE_PERMISSION_MAPPINGS, Role


def _token(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def describe_permission(permission: str | Enum) -> str:
    """Human-readable label for a permission token.

    ``manage_call_for_papers`` -> ``Manage Call For Papers``.
    """
    words = _token(permission).split("_")
    return " ".join(word[:1].upper() + word[1:] for word in words if word)


@dataclass(frozen=True)
class RoutePermissionEntry:
    route: str
    permission: str
    description: str

    def as_dict(self) -> dict[str, str]:
        return {
            "route": self.route,
            "permission": self.permission,
            "description": self.description,
        }


@dataclass(frozen=True)
class PermissionEntry:
    id: str
    name: str

    def as_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True, eq=False)
class AccessCatalog:
    permissions: tuple[str, ...]
    role_grants: Mapping[str, frozenset[str]]
    route_permissions: Mapping[str, str]
    super_admin_role: str = Role.SUPER_ADMIN
    unmapped_routes_allowed: bool = True

    @classmethod
    def build(
        cls,
        *,
        permissions: Iterable[str] = ALL_PERMISSIONS,
        role_grants: Mapping[str, Iterable[str]] = ROLE_PERMISSION_MAPPINGS,
        route_permissions: Mapping[str, str] = ROUTE_PERMISSIONS,
        super_admin_role: str = Role.SUPER_ADMIN,
        unmapped_routes_allowed: bool = True,
    ) -> "AccessCatalog":
        """Validate and freeze a catalog.

        Raises:
            ValueError: If a role grant or route references a permission
                missing from ``permissions``
        """
        catalog_permissions = tuple(dict.fromkeys(permissions))
        known = frozenset(catalog_permissions)
        errors: list[str] = []

        grants: dict[str, frozenset[str]] = {}
        for role, granted in role_grants.items():
            if role == super_admin_role:
                # Computed below, never taken from the table
                continue
            granted = frozenset(granted)
            for permission in sorted(_token(p) for p in granted - known):
                errors.append(f"Role '{_token(role)}' grants unknown permission '{permission}'")
            grants[role] = granted
        grants[super_admin_role] = known

        routes = dict(route_permissions)
        for route, permission in routes.items():
            if permission not in known:
                errors.append(f"Route '{route}' requires unknown permission '{_token(permission)}'")

        if errors:
            raise ValueError(
                "Access catalog validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )

        return cls(
            permissions=catalog_permissions,
            role_grants=MappingProxyType(grants),
            route_permissions=MappingProxyType(routes),
            super_admin_role=super_admin_role,
            unmapped_routes_allowed=unmapped_routes_allowed,
        )

    def with_unmapped_route_policy(self, allowed: bool) -> "AccessCatalog":
        return replace(self, unmapped_routes_allowed=allowed)

    def grants_for(self, role: str) -> frozenset[str]:
        return self.role_grants.get(role, frozenset())

    def required_permission(self, route: str) -> str | None:
        return self.route_permissions.get(route)

    def is_known_permission(self, permission: str) -> bool:
        return permission in self.permissions

    def list_route_permissions(self) -> list[RoutePermissionEntry]:
        return [
            RoutePermissionEntry(
                route=route,
                permission=_token(permission),
                description=describe_permission(permission),
            )
            for route, permission in self.route_permissions.items()
        ]

    def list_permissions(self) -> list[PermissionEntry]:
        # Names come from the token, one capitalized word per segment:
        # "manage_call_for_papers" -> "Manage Call For Papers"
        return [
            PermissionEntry(id=_token(permission), name=describe_permission(permission))
            for permission in self.permissions
        ]


DEFAULT_CATALOG = AccessCatalog.build()


def build_default_catalog(*, unmapped_routes_allowed: bool = True) -> AccessCatalog:
    return DEFAULT_CATALOG.with_unmapped_route_policy(unmapped_routes_allowed)
