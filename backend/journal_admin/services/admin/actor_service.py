from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping, Sequence

from ...auth import policy
from ...auth.catalog import DEFAULT_CATALOG, AccessCatalog
from ...auth.rbac_contract import Permission, Role, parse_role
from ...domain.ports.actor import ActorDirectoryPort
from ...domain.results import Result
from ...errors import NotFoundError, PermissionError, ValidationError
from ...models.actor import Actor
from ...schemas.actor import ActorCreate, ActorUpdate, parse_fields
from ..audit.audit_service import AuditService

logger = logging.getLogger(__name__)

TARGET_TYPE = "actor"


class ActorService:
    """Actor mutations with the mutation policy applied.

    Every operation returns a ``Result``. Policy denials come back as
    ``PermissionError`` results and are audited like successful mutations.
    """

    def __init__(
        self,
        directory: ActorDirectoryPort,
        catalog: AccessCatalog = DEFAULT_CATALOG,
        audit: AuditService | None = None,
    ) -> None:
        self.directory = directory
        self.catalog = catalog
        self.audit = audit or AuditService()

    def _denied(
        self,
        acting: Any,
        action: str,
        target_id: uuid.UUID | None,
        message: str,
    ) -> Result[Any]:
        logger.warning(
            "Actor mutation denied action=%s actor=%s target=%s reason=%s",
            action,
            getattr(acting, "id", None),
            target_id,
            message,
        )
        self.audit.log_admin_action(
            actor=acting,
            action=action,
            target_type=TARGET_TYPE,
            target_id=target_id,
            status="denied",
            payload={"reason": message},
        )
        return Result.failure(PermissionError(message))

    def _succeeded(
        self,
        acting: Any,
        action: str,
        target_id: uuid.UUID,
        payload: dict[str, Any] | None = None,
    ) -> None:
        self.audit.log_admin_action(
            actor=acting,
            action=action,
            target_type=TARGET_TYPE,
            target_id=target_id,
            payload=payload,
        )

    def _lookup(self, actor_id: uuid.UUID) -> Result[Actor]:
        actor = self.directory.get_actor(actor_id)
        if actor is None:
            return Result.failure(NotFoundError(f"Actor {actor_id} not found"))
        return Result.success(actor)

    def get_actor(self, actor_id: uuid.UUID) -> Result[Actor]:
        return self._lookup(actor_id)

    def list_actors(self) -> Sequence[Actor]:
        return self.directory.list_actors()

    def create_actor(self, acting: Any, fields: ActorCreate | Mapping[str, Any]) -> Result[Actor]:
        action = "admin.users.create"
        if not policy.can_manage_actors(acting, catalog=self.catalog):
            return self._denied(
                acting, action, None, f"Permission denied: {Permission.MANAGE_USERS.value} required"
            )

        parsed = parse_fields(ActorCreate, fields)
        if not parsed.ok:
            return parsed
        data: ActorCreate = parsed.value

        if not policy.can_assign_role(acting, data.role, catalog=self.catalog):
            return self._denied(
                acting,
                action,
                None,
                f"Permission denied: {Permission.MANAGE_ROLES.value} required to assign {data.role.value}",
            )
        if data.permissions and not policy.can_grant_permissions(acting, catalog=self.catalog):
            return self._denied(
                acting,
                action,
                None,
                f"Permission denied: {Permission.MANAGE_PERMISSIONS.value} required to grant permissions",
            )

        result = self.directory.create_actor(data)
        if result.ok:
            self._succeeded(acting, action, result.value.id, {"role": data.role.value})
        return result

    def update_actor(
        self,
        acting: Any,
        actor_id: uuid.UUID,
        fields: ActorUpdate | Mapping[str, Any],
    ) -> Result[Actor]:
        action = "admin.users.update"
        if not policy.can_manage_actors(acting, catalog=self.catalog):
            return self._denied(
                acting, action, actor_id, f"Permission denied: {Permission.MANAGE_USERS.value} required"
            )

        parsed = parse_fields(ActorUpdate, fields)
        if not parsed.ok:
            return parsed
        data: ActorUpdate = parsed.value

        found = self._lookup(actor_id)
        if not found.ok:
            return found
        target = found.value

        if data.role is not None and data.role != target.role:
            if not policy.can_change_role(acting, catalog=self.catalog):
                return self._denied(
                    acting,
                    action,
                    actor_id,
                    f"Permission denied: {Permission.MANAGE_ROLES.value} required to change roles",
                )

        resulting_role = data.role or target.role
        if not policy.can_assign_role(acting, resulting_role, catalog=self.catalog):
            return self._denied(
                acting,
                action,
                actor_id,
                f"Permission denied: {Permission.MANAGE_ROLES.value} required to edit a {resulting_role.value}",
            )

        # Only applies while the stored record still equals the checked snapshot
        result = self.directory.update_actor(actor_id, data, expected=target)
        if result.ok:
            self._succeeded(
                acting,
                action,
                actor_id,
                {"fields": sorted(data.model_dump(exclude_unset=True, exclude_none=True))},
            )
        return result

    def delete_actor(self, acting: Any, actor_id: uuid.UUID) -> Result[None]:
        action = "admin.users.delete"
        found = self._lookup(actor_id)
        if not found.ok:
            return found
        target = found.value

        reason = policy.deletion_denial_reason(acting, target, catalog=self.catalog)
        if reason is not None:
            return self._denied(acting, action, actor_id, reason)

        result = self.directory.delete_actor(actor_id, expected=target)
        if result.ok:
            self._succeeded(acting, action, actor_id, {"role": target.role.value})
        return result

    def change_role(self, acting: Any, actor_id: uuid.UUID, role: Role | str) -> Result[Actor]:
        action = "admin.users.roles.update"
        if not policy.can_change_role(acting, catalog=self.catalog):
            return self._denied(
                acting, action, actor_id, f"Permission denied: {Permission.MANAGE_ROLES.value} required"
            )

        try:
            new_role = parse_role(role)
        except ValueError as exc:
            return Result.failure(ValidationError(str(exc)))

        found = self._lookup(actor_id)
        if not found.ok:
            return found
        previous_role = found.value.role

        result = self.directory.set_actor_role(actor_id, new_role)
        if not result.ok:
            return result
        self._succeeded(
            acting,
            action,
            actor_id,
            {"from": previous_role.value, "to": new_role.value},
        )
        return self._lookup(actor_id)

    def set_permissions(
        self,
        acting: Any,
        actor_id: uuid.UUID,
        permissions: Sequence[Permission | str],
    ) -> Result[Actor]:
        action = "admin.users.permissions.update"
        if not policy.can_grant_permissions(acting, catalog=self.catalog):
            return self._denied(
                acting,
                action,
                actor_id,
                f"Permission denied: {Permission.MANAGE_PERMISSIONS.value} required",
            )

        result = self.directory.set_actor_permissions(actor_id, permissions)
        if result.ok:
            self._succeeded(
                acting,
                action,
                actor_id,
                {"permissions": sorted(p.value for p in result.value.permissions)},
            )
        return result
