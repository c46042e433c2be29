import uuid
from datetime import datetime
from typing import Annotated, Any, Mapping

from pydantic import BaseModel, Field, StringConstraints
from pydantic import ValidationError as PydanticValidationError

from ..auth.rbac_contract import Permission, Role
from ..domain.results import Result
from ..errors import ValidationError

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

# Surrounding whitespace is stripped before the length and pattern checks
ActorName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=255)]
ActorEmail = Annotated[str, StringConstraints(strip_whitespace=True, pattern=EMAIL_PATTERN, max_length=255)]


class ActorBase(BaseModel):
    name: ActorName
    email: ActorEmail


class ActorCreate(ActorBase):
    role: Role = Role.VIEWER
    permissions: list[Permission] = Field(default_factory=list)


class ActorUpdate(BaseModel):
    name: ActorName | None = None
    email: ActorEmail | None = None
    role: Role | None = None


class ActorRoleUpdate(BaseModel):
    role: Role


class ActorPermissionsUpdate(BaseModel):
    permissions: list[Permission] = Field(default_factory=list)


class ActorRead(ActorBase):
    id: uuid.UUID
    role: Role
    permissions: list[Permission]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @classmethod
    def from_actor(cls, actor) -> "ActorRead":
        return cls(
            id=actor.id,
            name=actor.name,
            email=actor.email,
            role=actor.role,
            permissions=[p for p in Permission if p in actor.permissions],
            created_at=actor.created_at,
            updated_at=actor.updated_at,
        )


class ActorList(BaseModel):
    actors: list[ActorRead]
    total: int


def parse_fields(model: type[BaseModel], fields: BaseModel | Mapping[str, Any]) -> Result[Any]:
    """Validate ``fields`` against ``model``, reporting failure as a result."""
    if isinstance(fields, model):
        return Result.success(fields)
    if isinstance(fields, BaseModel):
        fields = fields.model_dump(exclude_unset=True)
    try:
        return Result.success(model.model_validate(fields))
    except PydanticValidationError as exc:
        return Result.failure(
            ValidationError(
                "Invalid actor data",
                details=exc.errors(include_url=False, include_context=False, include_input=False),
            )
        )
