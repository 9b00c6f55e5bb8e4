"""TTL-gated, additive category reconciliation.

``CategorySyncManager`` periodically diffs the canonical catalog against the
user's remote categories and creates whatever is missing. It never deletes or
updates existing rows, including renamed or deactivated ones whose key still
matches a catalog entry.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta

from py_category_sync.application.cancellation import CancellationToken
from py_category_sync.application.dto.models import BatchCreateReportDTO, SyncStatusDTO
from py_category_sync.application.ports import CategoryRepository, Clock, SyncStateStore
from py_category_sync.application.results import Err
from py_category_sync.application.use_cases_async.batch import AsyncCreateDefinitions
from py_category_sync.domain.catalog import all_definitions
from py_category_sync.domain.categories import CanonicalCategoryDefinition
from py_category_sync.domain.reconciliation import DEFAULT_SYNC_TTL, ReconciliationService

logger = logging.getLogger(__name__)

__all__ = ["CategorySyncManager"]


class CategorySyncManager:
    """Single reconciliation service per process.

    Parameters:
        repository: Remote category store façade.
        state_store: Persisted ``last_sync_at`` timestamp.
        clock: Time source (UTC).
        catalog: Definitions to reconcile (defaults to the canonical catalog).
        ttl: Minimum age of the last sync before a new one is due (default 24h).

    Only one pass runs at a time; a concurrent call returns False at once.
    """

    def __init__(
        self,
        repository: CategoryRepository,
        state_store: SyncStateStore,
        clock: Clock,
        *,
        catalog: Sequence[CanonicalCategoryDefinition] | None = None,
        ttl: timedelta = DEFAULT_SYNC_TTL,
    ) -> None:
        self._repository = repository
        self._state_store = state_store
        self._clock = clock
        self._catalog = tuple(catalog) if catalog is not None else all_definitions()
        self._ttl = ttl
        self._is_syncing = False
        self._last_sync_date: datetime | None = None
        self._last_report: BatchCreateReportDTO | None = None
        self._token: CancellationToken | None = None

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    @property
    def is_syncing(self) -> bool:
        return self._is_syncing

    @property
    def last_sync_date(self) -> datetime | None:
        return self._last_sync_date

    @property
    def last_report(self) -> BatchCreateReportDTO | None:
        return self._last_report

    async def should_sync(self) -> bool:
        """True when never synced or the last sync is older than the TTL."""
        last = await self._state_store.get_last_sync_at()
        return ReconciliationService.is_sync_due(last, self._clock.now(), self._ttl)

    async def load_last_sync_date(self) -> datetime | None:
        """Load the persisted timestamp into ``last_sync_date`` and return it."""
        last = await self._state_store.get_last_sync_at()
        if last is not None:
            self._last_sync_date = last
        return last

    async def status(self) -> SyncStatusDTO:
        return SyncStatusDTO(
            is_syncing=self._is_syncing,
            last_sync_date=await self.load_last_sync_date(),
            sync_due=await self.should_sync(),
        )

    async def sync_categories(self, force: bool = False, token: CancellationToken | None = None) -> bool:
        """Reconcile the catalog against the user's categories.

        Returns:
            False when a sync is already running, the list fetch failed or the
            pass was cancelled; True when the pass completed or was not due.
        """
        if self._is_syncing:
            logger.debug("Sync already in progress; ignoring call")
            return False
        self._is_syncing = True
        self._token = token or CancellationToken()
        try:
            if not force and not await self.should_sync():
                logger.info("Category sync not needed yet")
                return True
            return await self._reconcile(self._token)
        finally:
            self._is_syncing = False
            self._token = None

    async def force_clear_sync(self) -> None:
        """Forget the last sync timestamp so the next check is due."""
        await self._state_store.clear_last_sync_at()
        logger.info("Sync timestamp cleared")

    def cancel(self, reason: str | None = None) -> None:
        """Stop the running pass before its next create call."""
        if self._token is not None:
            self._token.cancel(reason or "sync cancelled")

    async def _reconcile(self, token: CancellationToken) -> bool:
        logger.info("Starting category sync")
        try:
            listing = await self._repository.list()
        except Exception:
            logger.exception("Category sync aborted: list raised")
            return False
        if isinstance(listing, Err):
            logger.error("Category sync aborted: list failed (%s)", listing.reason)
            return False
        missing = ReconciliationService.missing_definitions(listing.value, self._catalog)
        if missing:
            logger.info("%s default categories missing", len(missing))
        report = await AsyncCreateDefinitions(self._repository)(missing, token)
        self._last_report = report
        if report.cancelled:
            logger.warning("Category sync cancelled; timestamp not updated")
            return False
        now = self._clock.now()
        await self._state_store.set_last_sync_at(now)
        self._last_sync_date = now
        logger.info(
            "Category sync completed: created=%s existing=%s failed=%s",
            report.created_count,
            len(report.already_existed),
            report.failed_count,
        )
        return True
