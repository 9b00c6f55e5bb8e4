"""Explicit result type returned by category repositories.

Repositories never raise for remote failures; they return ``Ok(value)`` or
``Err(reason, kind, status)`` so call sites branch on a discriminated value
instead of guessing response shapes.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from py_category_sync.domain.categories import UserCategory

__all__ = [
    "FailureKind",
    "Ok",
    "Err",
    "Result",
    "CreateOutcome",
]

T = TypeVar("T")


class FailureKind(str, Enum):
    """Coarse classification of a failed remote call."""

    NETWORK = "network"  # transport error or timeout
    HTTP = "http"  # non-success status code
    PROTOCOL = "protocol"  # unexpected or unparsable body
    INVALID = "invalid"  # rejected locally before sending


@dataclass(slots=True, frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(slots=True, frozen=True)
class Err:
    reason: str
    kind: FailureKind = FailureKind.HTTP
    status: int | None = None

    @property
    def ok(self) -> bool:
        return False


Result = Ok[T] | Err


@dataclass(slots=True, frozen=True)
class CreateOutcome:
    """Successful create: either a new row or a benign duplicate.

    ``already_existed=True`` means the store reported the category as a
    duplicate; ``category`` is then None.
    """

    category: UserCategory | None
    already_existed: bool = False
