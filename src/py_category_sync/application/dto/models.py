from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from py_category_sync.domain.categories import UserCategory

__all__ = [
    "CreateFailureDTO",
    "BatchCreateReportDTO",
    "CategoryListDTO",
    "BootstrapStatusDTO",
    "SyncStatusDTO",
]


@dataclass(slots=True)
class CreateFailureDTO:
    """One definition that could not be created, with the store's reason."""

    name: str
    kind: str
    reason: str


@dataclass(slots=True)
class BatchCreateReportDTO:
    """Outcome of a tolerant batch creation.

    ``attempted`` counts create calls actually issued; ``cancelled`` is True when
    the batch stopped early on a cancellation token.
    """

    attempted: int = 0
    created: list[UserCategory] = field(default_factory=list)
    already_existed: list[str] = field(default_factory=list)
    failed: list[CreateFailureDTO] = field(default_factory=list)
    cancelled: bool = False

    @property
    def created_count(self) -> int:
        return len(self.created)

    @property
    def failed_count(self) -> int:
        return len(self.failed)


@dataclass(slots=True)
class CategoryListDTO:
    """Category read result; ``fallback_used`` marks catalog substitution."""

    categories: list[UserCategory]
    fallback_used: bool = False
    error: str | None = None


@dataclass(slots=True)
class BootstrapStatusDTO:
    state: str
    is_initialized: bool
    is_initializing: bool
    total_categories: int
    last_error: str | None = None


@dataclass(slots=True)
class SyncStatusDTO:
    is_syncing: bool
    last_sync_date: datetime | None
    sync_due: bool
