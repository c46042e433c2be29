from __future__ import annotations

import logging
from typing import Any, Iterable

from ...auth import evaluator
from ...auth.catalog import DEFAULT_CATALOG, AccessCatalog, PermissionEntry, RoutePermissionEntry
from ...errors import AuthError, PermissionError
from ..audit.audit_service import AuditService

logger = logging.getLogger("journal_admin.rbac")


class PermissionService:
    """Permission checks bound to one ``AccessCatalog``.

    The ``has_*`` methods are the evaluator's answers and never raise. The
    ``require_*`` methods are the enforcement points: they log and audit a
    denial, then raise ``AuthError`` for an anonymous caller or
    ``PermissionError`` otherwise.
    """

    def __init__(
        self,
        catalog: AccessCatalog = DEFAULT_CATALOG,
        audit: AuditService | None = None,
    ) -> None:
        self.catalog = catalog
        self.audit = audit or AuditService()

    def has_permission(self, actor: Any, permission: Any) -> bool:
        return evaluator.has_permission(actor, permission, catalog=self.catalog)

    def has_route_permission(self, actor: Any, route: Any) -> bool:
        return evaluator.has_route_permission(actor, route, catalog=self.catalog)

    def has_any_permission(self, actor: Any, permissions: Iterable[Any]) -> bool:
        return evaluator.has_any_permission(actor, permissions, catalog=self.catalog)

    def has_all_permissions(self, actor: Any, permissions: Iterable[Any]) -> bool:
        return evaluator.has_all_permissions(actor, permissions, catalog=self.catalog)

    def is_super_admin(self, actor: Any) -> bool:
        return evaluator.is_super_admin(actor, catalog=self.catalog)

    def effective_permissions(self, actor: Any) -> frozenset[str]:
        return evaluator.effective_permissions(actor, catalog=self.catalog)

    def accessible_routes(self, actor: Any) -> list[str]:
        return evaluator.accessible_routes(actor, catalog=self.catalog)

    def list_route_permissions(self) -> list[RoutePermissionEntry]:
        return self.catalog.list_route_permissions()

    def list_permissions(self) -> list[PermissionEntry]:
        return self.catalog.list_permissions()

    def _deny(
        self,
        actor: Any,
        *,
        permission: str | None,
        route: str | None = None,
        request_method: str | None = None,
        request_path: str | None = None,
    ) -> None:
        logger.warning(
            "Permission denied actor=%s permission=%s route=%s method=%s path=%s",
            getattr(actor, "id", None),
            permission,
            route,
            request_method,
            request_path,
        )
        self.audit.log_permission_denied(
            actor=actor,
            permission=permission,
            route=route,
            request_method=request_method,
            request_path=request_path,
        )
        if actor is None:
            raise AuthError()
        detail = f"Permission denied: {permission} required" if permission else PermissionError.message
        raise PermissionError(detail)

    def require_permission(
        self,
        actor: Any,
        permission: Any,
        *,
        request_method: str | None = None,
        request_path: str | None = None,
    ) -> None:
        """Raise unless ``actor`` holds ``permission``.

        Raises:
            AuthError: If the check fails and there is no actor
            PermissionError: If the check fails for an authenticated actor
        """
        if self.has_permission(actor, permission):
            return
        self._deny(
            actor,
            permission=getattr(permission, "value", permission),
            request_method=request_method,
            request_path=request_path,
        )

    def require_route_permission(
        self,
        actor: Any,
        route: str,
        *,
        request_method: str | None = None,
        request_path: str | None = None,
    ) -> None:
        """Raise unless ``actor`` may reach ``route``.

        Raises:
            AuthError: If the check fails and there is no actor
            PermissionError: If the check fails for an authenticated actor
        """
        if self.has_route_permission(actor, route):
            return
        required = self.catalog.required_permission(route)
        self._deny(
            actor,
            permission=getattr(required, "value", required),
            route=route,
            request_method=request_method,
            request_path=request_path,
        )
