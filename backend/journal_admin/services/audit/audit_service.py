"""
Audit Service - structured audit trail for admin actions and access denials.

Entries are emitted as JSON through the standard logger. Audit failures
never propagate to the caller: an operation is not blocked because its
audit line could not be written.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

logger = logging.getLogger(__name__)


def _actor_id(actor: Any) -> str | None:
    actor_id = getattr(actor, "id", None)
    return str(actor_id) if actor_id is not None else None


class AuditService:
    """Writes audit entries; every method is fire-and-forget."""

    def _emit(self, entry: dict[str, Any]) -> None:
        try:
            entry["timestamp"] = datetime.now(timezone.utc).isoformat()
            logger.info(
                "AUDIT: %s",
                json.dumps(entry, ensure_ascii=False, default=str),
                extra={"audit_entry": entry},
            )
        except Exception as e:
            logger.error(
                "Audit logging failed for action %s: %s",
                entry.get("action"),
                str(e),
                exc_info=True,
            )

    def log_admin_action(
        self,
        *,
        actor: Any,
        action: str,
        target_type: str,
        target_id: str | UUID | None,
        status: str = "success",
        payload: dict[str, Any] | None = None,
    ) -> None:
        """
        Record an admin mutation.

        Args:
            actor: The acting actor (or None for anonymous)
            action: Action identifier (e.g. "admin.users.delete")
            target_type: Type of target entity (e.g. "actor")
            target_id: ID of the target entity
            status: "success" or "denied"
            payload: Optional dict with action details
        """
        self._emit(
            {
                "actor_id": _actor_id(actor),
                "action": action,
                "target_type": target_type,
                "target_id": str(target_id) if target_id is not None else None,
                "status": status,
                "payload": payload or {},
            }
        )

    def log_permission_denied(
        self,
        *,
        actor: Any,
        permission: str | None,
        route: str | None = None,
        request_method: str | None = None,
        request_path: str | None = None,
    ) -> None:
        self._emit(
            {
                "actor_id": _actor_id(actor),
                "action": "permission_denied",
                "target_type": "route" if route is not None else "permission",
                "target_id": route if route is not None else permission,
                "status": "denied",
                "payload": {
                    "required_permission": permission,
                    "request_method": request_method,
                    "request_path": request_path,
                },
            }
        )
