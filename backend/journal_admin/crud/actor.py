from __future__ import annotations

import logging
import threading
import uuid
from typing import Any, Iterable, Mapping, Sequence

from ..auth.rbac_contract import Permission, Role, parse_permission, parse_role
from ..domain.results import Result
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models.actor import Actor
from ..schemas.actor import ActorCreate, ActorUpdate, parse_fields

logger = logging.getLogger(__name__)


def _not_found(actor_id: uuid.UUID) -> NotFoundError:
    return NotFoundError(f"Actor {actor_id} not found")


def _stale(actor_id: uuid.UUID) -> ConflictError:
    return ConflictError(f"Actor {actor_id} was modified by another request")


class InMemoryActorDirectory:
    """Actor directory kept in process memory.

    Reads return immutable ``Actor`` snapshots. Mutations are serialized by a
    lock and replace the stored snapshot wholesale, so a reader never sees a
    half-applied change.
    """

    def __init__(self, actors: Iterable[Actor] = ()) -> None:
        self._lock = threading.Lock()
        self._actors: dict[uuid.UUID, Actor] = {actor.id: actor for actor in actors}

    def get_actor(self, actor_id: uuid.UUID) -> Actor | None:
        return self._actors.get(actor_id)

    def list_actors(self) -> Sequence[Actor]:
        with self._lock:
            return list(self._actors.values())

    def find_by_email(self, email: str) -> Actor | None:
        normalized = email.strip().lower()
        with self._lock:
            return self._find_by_email_locked(normalized)

    def _find_by_email_locked(self, normalized_email: str) -> Actor | None:
        for actor in self._actors.values():
            if actor.email.lower() == normalized_email:
                return actor
        return None

    def _email_conflict_locked(
        self, email: str, exclude: uuid.UUID | None = None
    ) -> ConflictError | None:
        existing = self._find_by_email_locked(email.strip().lower())
        if existing is not None and existing.id != exclude:
            return ConflictError(f"An actor with email {email} already exists")
        return None

    def create_actor(self, fields: ActorCreate | Mapping[str, Any]) -> Result[Actor]:
        parsed = parse_fields(ActorCreate, fields)
        if not parsed.ok:
            return parsed
        data = parsed.value

        with self._lock:
            conflict = self._email_conflict_locked(data.email)
            if conflict is not None:
                return Result.failure(conflict)

            actor = Actor(
                id=uuid.uuid4(),
                name=data.name,
                email=data.email,
                role=data.role,
                permissions=frozenset(data.permissions),
            )
            self._actors[actor.id] = actor

        logger.info("Actor created id=%s role=%s", actor.id, actor.role.value)
        return Result.success(actor)

    def update_actor(
        self,
        actor_id: uuid.UUID,
        fields: ActorUpdate | Mapping[str, Any],
        *,
        expected: Actor | None = None,
    ) -> Result[Actor]:
        """Apply ``fields`` to the stored actor.

        When ``expected`` is given the update only goes through if the stored
        record still equals that snapshot; otherwise a ``ConflictError``
        result is returned and nothing changes.
        """
        parsed = parse_fields(ActorUpdate, fields)
        if not parsed.ok:
            return parsed
        data = parsed.value

        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None
        }

        with self._lock:
            actor = self._actors.get(actor_id)
            if actor is None:
                return Result.failure(_not_found(actor_id))
            if expected is not None and actor != expected:
                return Result.failure(_stale(actor_id))

            if "email" in changes:
                conflict = self._email_conflict_locked(changes["email"], exclude=actor_id)
                if conflict is not None:
                    return Result.failure(conflict)

            updated = actor.evolve(**changes) if changes else actor
            self._actors[actor_id] = updated

        return Result.success(updated)

    def delete_actor(
        self, actor_id: uuid.UUID, *, expected: Actor | None = None
    ) -> Result[None]:
        """Remove the actor, only if it still equals ``expected`` when given."""
        with self._lock:
            actor = self._actors.get(actor_id)
            if actor is None:
                return Result.failure(_not_found(actor_id))
            if expected is not None and actor != expected:
                return Result.failure(_stale(actor_id))
            del self._actors[actor_id]

        logger.info("Actor deleted id=%s", actor_id)
        return Result.success()

    def set_actor_role(self, actor_id: uuid.UUID, role: Role | str) -> Result[None]:
        try:
            parsed = parse_role(role)
        except ValueError as exc:
            return Result.failure(ValidationError(str(exc)))

        with self._lock:
            actor = self._actors.get(actor_id)
            if actor is None:
                return Result.failure(_not_found(actor_id))
            self._actors[actor_id] = actor.evolve(role=parsed)

        logger.info("Actor role changed id=%s role=%s", actor_id, parsed.value)
        return Result.success()

    def set_actor_permissions(
        self, actor_id: uuid.UUID, permissions: Sequence[Permission | str]
    ) -> Result[Actor]:
        try:
            parsed = frozenset(parse_permission(p) for p in permissions)
        except ValueError as exc:
            return Result.failure(ValidationError(str(exc)))

        with self._lock:
            actor = self._actors.get(actor_id)
            if actor is None:
                return Result.failure(_not_found(actor_id))
            updated = actor.evolve(permissions=parsed)
            self._actors[actor_id] = updated

        return Result.success(updated)

    def ensure_super_admin(self, *, email: str, name: str) -> Actor:
        """Create the bootstrap super admin unless an actor with ``email`` exists."""
        existing = self.find_by_email(email)
        if existing is not None:
            return existing
        return self.create_actor(
            {"name": name, "email": email, "role": Role.SUPER_ADMIN}
        ).unwrap()
