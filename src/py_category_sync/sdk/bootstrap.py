"""SDK bootstrap: build the application context from settings.

``init_app`` is the single place where the category repository, the local
state store, the clock, the bootstrap controller and the sync manager are
constructed and wired together. Consumers keep the returned ``AppContext`` for
the lifetime of the session and call ``aclose()`` on shutdown.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from py_category_sync.application.ports import CategoryRepository, Clock, KeyValueStore
from py_category_sync.application.state import KeyValueSyncStateStore
from py_category_sync.application.use_cases_async import (
    AsyncListCategories,
    CategoryBootstrapController,
    CategorySyncManager,
)
from py_category_sync.infrastructure.config.settings import BaseAppSettings, get_settings
from py_category_sync.infrastructure.http.repository import HttpCategoryRepository
from py_category_sync.infrastructure.persistence.inmemory.clock import SystemClock
from py_category_sync.infrastructure.persistence.sqlalchemy.kv_store import SqlAlchemyKeyValueStore

__all__ = ["AppContext", "init_app"]


@dataclass(slots=True)
class AppContext:
    """Application context for SDK users.

    Attributes:
        settings: Settings used to configure the app.
        repository: Remote category store adapter.
        storage: Device-local key-value storage.
        state_store: Bootstrap flag and last-sync timestamp over ``storage``.
        clock: UTC clock.
        bootstrap: The one bootstrap controller of this app.
        sync: The one sync manager of this app.
        list_categories: Category query with catalog fallback.
        logger: Package logger (handlers are configured by the host).
    """

    settings: BaseAppSettings
    repository: CategoryRepository
    storage: KeyValueStore
    state_store: KeyValueSyncStateStore
    clock: Clock
    bootstrap: CategoryBootstrapController
    sync: CategorySyncManager
    list_categories: AsyncListCategories
    logger: logging.Logger

    def cancel(self, reason: str | None = None) -> None:
        """Cancel any running bootstrap or sync batch (e.g. on logout)."""
        self.bootstrap.cancel(reason)
        self.sync.cancel(reason)

    async def aclose(self) -> None:
        """Release the HTTP client and the storage engine when owned."""
        for resource in (self.repository, self.storage):
            close = getattr(resource, "aclose", None)
            if close is not None:
                await close()


def init_app(
    settings: BaseAppSettings | None = None,
    *,
    repository: CategoryRepository | None = None,
    storage: KeyValueStore | None = None,
    clock: Clock | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AppContext:
    """Initialize the application context.

    Steps:
    1) Load settings from env when not provided.
    2) Build the HTTP repository (unless injected) with the optional transport.
    3) Build the SQLite/SQLAlchemy key-value storage (unless injected).
    4) Construct exactly one bootstrap controller and one sync manager.

    No I/O is performed here; the storage schema is created on first use and
    HTTP connections are opened on the first request.
    """
    settings = settings or get_settings()
    if repository is None:
        repository = HttpCategoryRepository.from_settings(settings, transport=transport)
    if storage is None:
        storage = SqlAlchemyKeyValueStore(settings.state_database_url)
    clock = clock or SystemClock()
    state_store = KeyValueSyncStateStore(storage)

    return AppContext(
        settings=settings,
        repository=repository,
        storage=storage,
        state_store=state_store,
        clock=clock,
        bootstrap=CategoryBootstrapController(
            repository,
            state_store,
            use_restore_endpoint=settings.use_restore_defaults_endpoint,
        ),
        sync=CategorySyncManager(repository, state_store, clock, ttl=settings.sync_ttl),
        list_categories=AsyncListCategories(repository),
        logger=logging.getLogger("py_category_sync"),
    )
