"""Async SQLAlchemy engine and session factory utilities for local state.

Key functions:
- normalize_async_url(url): ensure an async driver is used (aiosqlite/asyncpg)
- get_async_engine(url, ...): create AsyncEngine with sane defaults
- get_async_session_factory(engine, ...): build async sessionmaker

Supported URL examples:
    sqlite+aiosqlite:///:memory:
    sqlite+aiosqlite:///./category_sync_state.db
  A sync URL such as "sqlite:///./state.db" is normalized to "sqlite+aiosqlite://...".
"""
from __future__ import annotations

from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

__all__ = [
    "normalize_async_url",
    "get_async_engine",
    "get_async_session_factory",
]


def normalize_async_url(url: str) -> str:
    """Normalize the given SQLAlchemy URL to an async-driver URL.

    Behavior:
    - sqlite://...               -> sqlite+aiosqlite://...
    - sqlite+pysqlite://...      -> sqlite+aiosqlite://...
    - postgresql[+driver]://...  -> postgresql+asyncpg://...
    - Already-async schemes are returned unchanged.

    Raises:
    - ValueError: if url is empty/whitespace.
    """
    if not url or not url.strip():
        raise ValueError("Database URL must be a non-empty string")

    sa_url = make_url(url)
    drivername = sa_url.drivername or ""

    if drivername.startswith("postgresql") and drivername != "postgresql+asyncpg":
        sa_url = sa_url.set(drivername="postgresql+asyncpg")
    elif drivername.startswith("sqlite") and drivername != "sqlite+aiosqlite":
        sa_url = sa_url.set(drivername="sqlite+aiosqlite")
    return sa_url.render_as_string(hide_password=False)


def _is_memory_sqlite(norm_url: str) -> bool:
    sa_url = make_url(norm_url)
    return sa_url.drivername.startswith("sqlite") and sa_url.database in (None, "", ":memory:")


def get_async_engine(url: str, *, echo: bool = False, engine_kwargs: dict[str, Any] | None = None) -> AsyncEngine:
    """Create and return an AsyncEngine using the given URL.

    In-memory SQLite shares one connection (StaticPool) so the schema and data
    survive across sessions.
    """
    norm_url = normalize_async_url(url)
    kwargs: dict[str, Any] = {"echo": echo, "pool_pre_ping": True}
    if _is_memory_sqlite(norm_url):
        kwargs["poolclass"] = StaticPool
    kwargs.update(engine_kwargs or {})
    return create_async_engine(norm_url, **kwargs)


def get_async_session_factory(
    engine: AsyncEngine,
    *,
    expire_on_commit: bool = False,
) -> async_sessionmaker[AsyncSession]:
    """Build an ``async_sessionmaker`` bound to the given ``AsyncEngine``."""
    return async_sessionmaker(bind=engine, expire_on_commit=expire_on_commit, class_=AsyncSession)
