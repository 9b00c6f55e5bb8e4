"""One-shot category bootstrap controller.

State machine ``UNKNOWN -> CHECKING -> (INITIALIZING ->) INITIALIZED``:

- CHECKING: read the persisted completion flag and the user's remote list.
- Flag set or at least one remote row: straight to INITIALIZED, no writes.
- Otherwise INITIALIZING: create every catalog definition, tolerating per-item
  failures, persist the flag, move to INITIALIZED and refetch the list.

A failure to complete the check (remote list unavailable while the flag is not
set, or an unexpected error) leaves the state in CHECKING with
``is_initializing=False`` and ``is_initialized=False``; callers retry with
``check_and_initialize()`` or ``force_initialization()``.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum

from py_category_sync.application.cancellation import CancellationToken
from py_category_sync.application.dto.models import BatchCreateReportDTO, BootstrapStatusDTO
from py_category_sync.application.ports import CategoryRepository, SyncStateStore
from py_category_sync.application.results import Err
from py_category_sync.application.use_cases_async.batch import AsyncCreateDefinitions
from py_category_sync.domain.catalog import all_definitions
from py_category_sync.domain.categories import CanonicalCategoryDefinition, UserCategory

logger = logging.getLogger(__name__)

__all__ = ["BootstrapState", "CategoryBootstrapController"]


class BootstrapState(str, Enum):
    UNKNOWN = "unknown"
    CHECKING = "checking"
    INITIALIZING = "initializing"
    INITIALIZED = "initialized"


class CategoryBootstrapController:
    """Guarantee a non-empty category set for a new user exactly once.

    Parameters:
        repository: Remote category store façade.
        state_store: Persisted ``bootstrap_completed`` flag.
        catalog: Definitions to create (defaults to the canonical catalog).
        use_restore_endpoint: Try the store's server-side restore before creating
            definitions one by one.

    Re-entrancy: a call while a pass is running returns immediately without
    queuing. There is one controller per application, built by ``init_app``.
    """

    def __init__(
        self,
        repository: CategoryRepository,
        state_store: SyncStateStore,
        *,
        catalog: Sequence[CanonicalCategoryDefinition] | None = None,
        use_restore_endpoint: bool = False,
    ) -> None:
        self._repository = repository
        self._state_store = state_store
        self._catalog = tuple(catalog) if catalog is not None else all_definitions()
        self._use_restore_endpoint = use_restore_endpoint
        self._state = BootstrapState.UNKNOWN
        self._in_progress = False
        self._categories: list[UserCategory] = []
        self._last_error: str | None = None
        self._last_report: BatchCreateReportDTO | None = None
        self._token: CancellationToken | None = None

    # --- observable state ---
    @property
    def state(self) -> BootstrapState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state is BootstrapState.INITIALIZED

    @property
    def is_initializing(self) -> bool:
        return self._in_progress

    @property
    def total_categories(self) -> int:
        return len(self._categories)

    @property
    def categories(self) -> list[UserCategory]:
        return list(self._categories)

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def last_report(self) -> BatchCreateReportDTO | None:
        """Report of the last batch creation, None if no batch ran."""
        return self._last_report

    def status(self) -> BootstrapStatusDTO:
        return BootstrapStatusDTO(
            state=self._state.value,
            is_initialized=self.is_initialized,
            is_initializing=self.is_initializing,
            total_categories=self.total_categories,
            last_error=self._last_error,
        )

    # --- operations ---
    async def check_and_initialize(self, token: CancellationToken | None = None) -> bool:
        """Run one bootstrap pass; return True when the state is INITIALIZED."""
        if self._in_progress:
            logger.debug("Bootstrap already in progress; ignoring call")
            return False
        self._in_progress = True
        self._token = token or CancellationToken()
        self._state = BootstrapState.CHECKING
        self._last_error = None
        try:
            return await self._run(self._token)
        except Exception as exc:
            logger.exception("Bootstrap check failed")
            self._last_error = str(exc) or type(exc).__name__
            return False
        finally:
            self._in_progress = False
            self._token = None

    async def reset_initialization(self) -> None:
        """Clear the persisted completion flag (remote data is untouched)."""
        await self._state_store.clear_bootstrap_completed()
        if not self._in_progress:
            self._state = BootstrapState.UNKNOWN
        logger.info("Bootstrap status reset")

    async def force_initialization(self, token: CancellationToken | None = None) -> bool:
        """Reset the flag, then run a fresh bootstrap pass."""
        if self._in_progress:
            logger.debug("Bootstrap already in progress; force ignored")
            return False
        await self.reset_initialization()
        return await self.check_and_initialize(token)

    def cancel(self, reason: str | None = None) -> None:
        """Stop the running batch before its next create call."""
        if self._token is not None:
            self._token.cancel(reason or "bootstrap cancelled")

    # --- internals ---
    async def _run(self, token: CancellationToken) -> bool:
        completed = await self._state_store.is_bootstrap_completed()
        listing = await self._repository.list()
        if isinstance(listing, Err):
            self._last_error = listing.reason
            if completed:
                logger.warning("Category list unavailable (%s); bootstrap already completed", listing.reason)
                self._state = BootstrapState.INITIALIZED
                return True
            logger.error("Bootstrap check aborted: category list unavailable (%s)", listing.reason)
            return False
        self._categories = list(listing.value)
        if completed or self._categories:
            logger.debug(
                "Bootstrap not needed (flag=%s, categories=%s)", completed, len(self._categories)
            )
            self._state = BootstrapState.INITIALIZED
            return True

        self._state = BootstrapState.INITIALIZING
        logger.info("Initializing default categories (%s definitions)", len(self._catalog))
        report = await self._populate(token)
        if report.cancelled:
            logger.warning("Bootstrap cancelled; completion flag not persisted")
            self._state = BootstrapState.UNKNOWN
            return False
        await self._state_store.mark_bootstrap_completed()
        self._state = BootstrapState.INITIALIZED
        logger.info(
            "Default categories initialized: created=%s existing=%s failed=%s",
            report.created_count,
            len(report.already_existed),
            report.failed_count,
        )
        await self._refetch()
        return True

    async def _populate(self, token: CancellationToken) -> BatchCreateReportDTO:
        if self._use_restore_endpoint:
            restored = await self._repository.restore_defaults()
            if not isinstance(restored, Err):
                logger.info("Default categories restored server-side (%s)", restored.value)
                self._last_report = BatchCreateReportDTO()
                return self._last_report
            logger.info("Restore endpoint unavailable (%s); creating categories one by one", restored.reason)
        self._last_report = await AsyncCreateDefinitions(self._repository)(self._catalog, token)
        return self._last_report

    async def _refetch(self) -> None:
        listing = await self._repository.list()
        if isinstance(listing, Err):
            logger.warning("Refetch after bootstrap failed: %s", listing.reason)
            self._last_error = listing.reason
            return
        self._categories = list(listing.value)
