from __future__ import annotations

from datetime import UTC, datetime

import pytest

from py_category_sync.application.state import LAST_SYNC_KEY, KeyValueSyncStateStore
from py_category_sync.infrastructure.persistence.inmemory import InMemoryKeyValueStore
from py_category_sync.infrastructure.persistence.sqlalchemy.kv_store import SqlAlchemyKeyValueStore


@pytest.mark.asyncio
async def test_sqlite_store_get_set_remove(sqlite_kv):
    assert await sqlite_kv.get_item("k") is None
    await sqlite_kv.set_item("k", "v1")
    assert await sqlite_kv.get_item("k") == "v1"
    await sqlite_kv.set_item("k", "v2")
    assert await sqlite_kv.get_item("k") == "v2"
    await sqlite_kv.remove_item("k")
    assert await sqlite_kv.get_item("k") is None
    await sqlite_kv.remove_item("missing")


@pytest.mark.asyncio
async def test_sqlite_state_survives_restart(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'restart.db'}"
    when = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)

    first = SqlAlchemyKeyValueStore(url)
    try:
        state = KeyValueSyncStateStore(first)
        await state.mark_bootstrap_completed()
        await state.set_last_sync_at(when)
    finally:
        await first.aclose()

    second = SqlAlchemyKeyValueStore(url)
    try:
        state = KeyValueSyncStateStore(second)
        assert await state.is_bootstrap_completed() is True
        assert await state.get_last_sync_at() == when
        assert await second.get_item(LAST_SYNC_KEY) == "1709294400000"
    finally:
        await second.aclose()


def test_sqlite_store_requires_url_or_engine():
    with pytest.raises(ValueError):
        SqlAlchemyKeyValueStore()


@pytest.mark.asyncio
async def test_in_memory_store_failure_injection():
    store = InMemoryKeyValueStore({"a": "1"})
    assert await store.get_item("a") == "1"
    store.fail_reads = True
    with pytest.raises(OSError):
        await store.get_item("a")
    store.fail_writes = True
    with pytest.raises(OSError):
        await store.set_item("a", "2")
    with pytest.raises(OSError):
        await store.remove_item("a")
    assert store.data == {"a": "1"}
