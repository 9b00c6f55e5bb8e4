from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import UTC, datetime
from pathlib import Path

import pytest
import pytest_asyncio

from py_category_sync.application.state import KeyValueSyncStateStore
from py_category_sync.domain.categories import CategoryKind, UserCategory
from py_category_sync.infrastructure.persistence.inmemory import (
    FixedClock,
    InMemoryCategoryRepository,
    InMemoryKeyValueStore,
)
from py_category_sync.infrastructure.persistence.sqlalchemy.kv_store import SqlAlchemyKeyValueStore

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(T0)


@pytest.fixture
def repo() -> InMemoryCategoryRepository:
    """Empty in-memory category store (a brand-new user)."""
    return InMemoryCategoryRepository()


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def state_store(kv: InMemoryKeyValueStore) -> KeyValueSyncStateStore:
    return KeyValueSyncStateStore(kv)


@pytest_asyncio.fixture
async def sqlite_kv(tmp_path: Path) -> AsyncIterator[SqlAlchemyKeyValueStore]:
    """SQLite-backed key-value store in a temporary file."""
    store = SqlAlchemyKeyValueStore(f"sqlite+aiosqlite:///{tmp_path / 'state.db'}")
    try:
        yield store
    finally:
        await store.aclose()


def make_category(
    name: str,
    kind: CategoryKind = CategoryKind.EXPENSE,
    *,
    id: str | None = None,
    order: int = 1,
    active: bool = True,
    is_default: bool = False,
) -> UserCategory:
    return UserCategory(
        id=id or f"u-{kind.value}-{name}",
        name=name,
        kind=kind,
        icon="pricetag",
        color="#123456",
        order=order,
        active=active,
        is_default=is_default,
    )


@pytest.fixture
def category_factory():
    return make_category
