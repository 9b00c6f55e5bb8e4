"""Persisted sync state over a device-local key-value store.

Owns the two storage keys and their string encodings:
- ``@categories_initialized`` -> ``"true"`` once bootstrap completed, absent otherwise
- ``@categories_last_sync`` -> epoch milliseconds of the last completed sync

Storage failures are logged and mapped to safe defaults: a failed read of the
bootstrap flag reads as "not completed" (bootstrap is re-attempted) and a failed
read of the timestamp reads as "never synced" (sync is re-attempted). Failed
writes are logged and swallowed.
"""
from __future__ import annotations

import logging
from datetime import datetime

from py_category_sync.application.ports import KeyValueStore
from py_category_sync.domain.reconciliation import from_epoch_millis, to_epoch_millis

__all__ = [
    "BOOTSTRAP_COMPLETED_KEY",
    "LAST_SYNC_KEY",
    "KeyValueSyncStateStore",
]

logger = logging.getLogger(__name__)

BOOTSTRAP_COMPLETED_KEY = "@categories_initialized"
LAST_SYNC_KEY = "@categories_last_sync"


class KeyValueSyncStateStore:
    """SyncStateStore implementation backed by any KeyValueStore."""

    def __init__(self, storage: KeyValueStore) -> None:
        self._storage = storage

    @property
    def storage(self) -> KeyValueStore:
        return self._storage

    async def is_bootstrap_completed(self) -> bool:
        try:
            raw = await self._storage.get_item(BOOTSTRAP_COMPLETED_KEY)
        except Exception:
            logger.exception("SyncState: failed to read %s; treating as absent", BOOTSTRAP_COMPLETED_KEY)
            return False
        return raw == "true"

    async def mark_bootstrap_completed(self) -> None:
        try:
            await self._storage.set_item(BOOTSTRAP_COMPLETED_KEY, "true")
        except Exception:
            logger.exception("SyncState: failed to persist %s", BOOTSTRAP_COMPLETED_KEY)

    async def clear_bootstrap_completed(self) -> None:
        try:
            await self._storage.remove_item(BOOTSTRAP_COMPLETED_KEY)
        except Exception:
            logger.exception("SyncState: failed to clear %s", BOOTSTRAP_COMPLETED_KEY)

    async def get_last_sync_at(self) -> datetime | None:
        try:
            raw = await self._storage.get_item(LAST_SYNC_KEY)
        except Exception:
            logger.exception("SyncState: failed to read %s; treating as never synced", LAST_SYNC_KEY)
            return None
        if raw is None:
            return None
        try:
            return from_epoch_millis(int(raw.strip()))
        except (ValueError, OverflowError, OSError):
            logger.warning("SyncState: unparsable %s value %r; treating as never synced", LAST_SYNC_KEY, raw)
            return None

    async def set_last_sync_at(self, when: datetime) -> None:
        try:
            await self._storage.set_item(LAST_SYNC_KEY, str(to_epoch_millis(when)))
        except Exception:
            logger.exception("SyncState: failed to persist %s", LAST_SYNC_KEY)

    async def clear_last_sync_at(self) -> None:
        try:
            await self._storage.remove_item(LAST_SYNC_KEY)
        except Exception:
            logger.exception("SyncState: failed to clear %s", LAST_SYNC_KEY)
