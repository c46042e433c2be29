"""
Typed outcomes for actor directory operations.

Directory mutations report expected failures (not found, invalid input,
duplicate email, policy denial) as values so that callers can render a
message without special-casing control flow. ``unwrap()`` converts a failed
result back into the ``AppError`` for layers that prefer exceptions.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from ..errors import AppError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    value: T | None = None
    error: AppError | None = None

    @classmethod
    def success(cls, value: T | None = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: AppError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> str | None:
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
