from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from py_category_sync.application.results import CreateOutcome, Result
from py_category_sync.domain.categories import (
    CanonicalCategoryDefinition,
    CategoryKind,
    UserCategory,
)

__all__ = [
    "Clock",
    "CategoryRepository",
    "KeyValueStore",
    "SyncStateStore",
]


@runtime_checkable
class Clock(Protocol):
    """Clock abstraction to decouple time in tests.

    Implementations typically return timezone-aware UTC datetimes.
    """

    def now(self) -> datetime: ...


@runtime_checkable
class CategoryRepository(Protocol):
    """Async façade over the remote category store.

    All methods return ``Ok | Err``; remote failures never raise. ``create``
    reports a duplicate as ``Ok(CreateOutcome(None, already_existed=True))``.
    """

    async def list(self, kind: CategoryKind | None = None) -> Result[list[UserCategory]]: ...
    async def create(self, definition: CanonicalCategoryDefinition) -> Result[CreateOutcome]: ...
    async def update(self, category_id: str, changes: dict[str, Any]) -> Result[UserCategory]: ...
    async def delete(self, category_id: str) -> Result[None]: ...
    async def restore_defaults(self) -> Result[int]: ...


@runtime_checkable
class KeyValueStore(Protocol):
    """Device-local string key-value storage (may raise on I/O failure)."""

    async def get_item(self, key: str) -> str | None: ...
    async def set_item(self, key: str, value: str) -> None: ...
    async def remove_item(self, key: str) -> None: ...


@runtime_checkable
class SyncStateStore(Protocol):
    """The two persisted scalars shared by bootstrap and sync.

    Reads return safe defaults when storage fails (flag absent / never synced).
    """

    async def is_bootstrap_completed(self) -> bool: ...
    async def mark_bootstrap_completed(self) -> None: ...
    async def clear_bootstrap_completed(self) -> None: ...
    async def get_last_sync_at(self) -> datetime | None: ...
    async def set_last_sync_at(self, when: datetime) -> None: ...
    async def clear_last_sync_at(self) -> None: ...
