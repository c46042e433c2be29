from __future__ import annotations

import uuid
from typing import Any, Mapping, Protocol, Sequence

from ...auth.rbac_contract import Permission, Role
from ...models.actor import Actor
from ...schemas.actor import ActorCreate, ActorUpdate
from ..results import Result


class ActorDirectoryPort(Protocol):
    def get_actor(self, actor_id: uuid.UUID) -> Actor | None:
        ...

    def list_actors(self) -> Sequence[Actor]:
        ...

    def create_actor(self, fields: ActorCreate | Mapping[str, Any]) -> Result[Actor]:
        ...

    def update_actor(
        self,
        actor_id: uuid.UUID,
        fields: ActorUpdate | Mapping[str, Any],
        *,
        expected: Actor | None = None,
    ) -> Result[Actor]:
        ...

    def delete_actor(
        self, actor_id: uuid.UUID, *, expected: Actor | None = None
    ) -> Result[None]:
        ...

    def set_actor_role(self, actor_id: uuid.UUID, role: Role | str) -> Result[None]:
        ...

    def set_actor_permissions(
        self, actor_id: uuid.UUID, permissions: Sequence[Permission | str]
    ) -> Result[Actor]:
        ...
