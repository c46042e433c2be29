from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from ..auth.rbac_contract import Permission, Role


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Actor:
    """Admin dashboard user.

    Instances are immutable snapshots; the directory hands out copies and
    replaces its stored record on every mutation.
    """

    id: uuid.UUID
    name: str
    email: str
    role: Role
    permissions: frozenset[Permission] = field(default_factory=frozenset)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def evolve(self, **changes: Any) -> "Actor":
        return replace(self, updated_at=_utcnow(), **changes)

    def __repr__(self) -> str:
        return f"<Actor email={self.email!r} role={self.role.value!r}>"
