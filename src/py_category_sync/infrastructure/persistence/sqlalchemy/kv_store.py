from __future__ import annotations

import logging

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncEngine

from py_category_sync.infrastructure.persistence.sqlalchemy.async_engine import (
    get_async_engine,
    get_async_session_factory,
)
from py_category_sync.infrastructure.persistence.sqlalchemy.models import Base, LocalStateORM

logger = logging.getLogger(__name__)

__all__ = ["SqlAlchemyKeyValueStore"]


class SqlAlchemyKeyValueStore:
    """KeyValueStore persisted in the ``local_state`` table.

    The schema is created on first use. Storage errors propagate; the
    ``KeyValueSyncStateStore`` on top maps them to safe defaults.

    Parameters:
        url: SQLAlchemy URL (sync URLs are normalized to async drivers).
        engine: Pre-built AsyncEngine; not disposed by ``aclose``.
    """

    def __init__(self, url: str | None = None, *, engine: AsyncEngine | None = None) -> None:
        if engine is None:
            if url is None:
                raise ValueError("url or engine is required")
            engine = get_async_engine(url)
            self._owns_engine = True
        else:
            self._owns_engine = False
        self._engine = engine
        self._session_factory = get_async_session_factory(engine)
        self._schema_ready = False

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def create_schema(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self._schema_ready = True
        logger.debug("local_state schema ready")

    async def _ensure_schema(self) -> None:
        if not self._schema_ready:
            await self.create_schema()

    async def get_item(self, key: str) -> str | None:
        await self._ensure_schema()
        async with self._session_factory() as session:
            row = await session.get(LocalStateORM, key)
            return row.value if row is not None else None

    async def set_item(self, key: str, value: str) -> None:
        await self._ensure_schema()
        async with self._session_factory() as session, session.begin():
            row = await session.get(LocalStateORM, key)
            if row is None:
                session.add(LocalStateORM(key=key, value=value))
            else:
                row.value = value

    async def remove_item(self, key: str) -> None:
        await self._ensure_schema()
        async with self._session_factory() as session, session.begin():
            await session.execute(delete(LocalStateORM).where(LocalStateORM.key == key))

    async def aclose(self) -> None:
        if self._owns_engine:
            await self._engine.dispose()
