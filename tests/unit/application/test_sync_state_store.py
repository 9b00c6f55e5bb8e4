from __future__ import annotations

import logging
from datetime import UTC, datetime

import pytest

from py_category_sync.application.state import (
    BOOTSTRAP_COMPLETED_KEY,
    LAST_SYNC_KEY,
    KeyValueSyncStateStore,
)

WHEN = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


@pytest.mark.asyncio
async def test_bootstrap_flag_roundtrip(state_store, kv):
    assert await state_store.is_bootstrap_completed() is False
    await state_store.mark_bootstrap_completed()
    assert kv.data[BOOTSTRAP_COMPLETED_KEY] == "true"
    assert await state_store.is_bootstrap_completed() is True
    await state_store.clear_bootstrap_completed()
    assert BOOTSTRAP_COMPLETED_KEY not in kv.data
    assert await state_store.is_bootstrap_completed() is False


@pytest.mark.asyncio
async def test_only_literal_true_counts_as_completed(kv):
    kv_store = KeyValueSyncStateStore(kv)
    await kv.set_item(BOOTSTRAP_COMPLETED_KEY, "yes")
    assert await kv_store.is_bootstrap_completed() is False


@pytest.mark.asyncio
async def test_last_sync_stored_as_epoch_millis(state_store, kv):
    assert await state_store.get_last_sync_at() is None
    await state_store.set_last_sync_at(WHEN)
    assert kv.data[LAST_SYNC_KEY] == "1709294400000"
    assert await state_store.get_last_sync_at() == WHEN
    await state_store.clear_last_sync_at()
    assert await state_store.get_last_sync_at() is None


@pytest.mark.asyncio
async def test_unparsable_timestamp_reads_as_never(state_store, kv, caplog):
    await kv.set_item(LAST_SYNC_KEY, "yesterday")
    with caplog.at_level(logging.WARNING):
        assert await state_store.get_last_sync_at() is None
    assert "unparsable" in caplog.text


@pytest.mark.asyncio
async def test_read_failures_map_to_safe_defaults(state_store, kv):
    await state_store.mark_bootstrap_completed()
    await state_store.set_last_sync_at(WHEN)
    kv.fail_reads = True
    assert await state_store.is_bootstrap_completed() is False
    assert await state_store.get_last_sync_at() is None


@pytest.mark.asyncio
async def test_write_failures_are_swallowed(state_store, kv):
    kv.fail_writes = True
    await state_store.mark_bootstrap_completed()
    await state_store.set_last_sync_at(WHEN)
    await state_store.clear_bootstrap_completed()
    await state_store.clear_last_sync_at()
    kv.fail_writes = False
    assert kv.data == {}
