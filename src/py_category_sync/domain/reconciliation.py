"""Domain-only helpers for category reconciliation.

Pure computations used by the sync manager, the bootstrap controller and the
fallback read path: the additive diff between the catalog and the user's rows,
the TTL due-check and the mapping of catalog entries into the user-row shape.
No I/O or infrastructure dependencies.
"""
from __future__ import annotations

import datetime as dt
from collections.abc import Iterable

from .catalog import all_definitions, definitions_by_kind
from .categories import (
    CanonicalCategoryDefinition,
    CategoryKind,
    UserCategory,
    UserSubcategory,
    category_key,
)
from .errors import ValidationError

__all__ = [
    "DEFAULT_SYNC_TTL",
    "FALLBACK_ID_PREFIX",
    "ReconciliationService",
    "to_epoch_millis",
    "from_epoch_millis",
]

DEFAULT_SYNC_TTL = dt.timedelta(hours=24)
FALLBACK_ID_PREFIX = "fallback-"


def _to_utc(value: dt.datetime) -> dt.datetime:
    """Normalize a datetime to aware UTC; naive values are interpreted as UTC."""
    if not isinstance(value, dt.datetime):
        raise ValidationError("Expected datetime value")
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.UTC)
    return value.astimezone(dt.UTC)


def to_epoch_millis(value: dt.datetime) -> int:
    """Return integer epoch milliseconds for a datetime (naive treated as UTC)."""
    return int(_to_utc(value).timestamp() * 1000)


def from_epoch_millis(millis: int) -> dt.datetime:
    """Return an aware UTC datetime for epoch milliseconds."""
    return dt.datetime.fromtimestamp(millis / 1000, tz=dt.UTC)


class ReconciliationService:
    """Pure domain service for diffing, TTL checks and fallback rows.

    All methods are side-effect free and independent from repositories.
    """

    @staticmethod
    def missing_definitions(
        existing: Iterable[UserCategory],
        canonical: Iterable[CanonicalCategoryDefinition] | None = None,
    ) -> list[CanonicalCategoryDefinition]:
        """Return catalog entries with no existing row sharing their key.

        Contract: one-directional and additive. Existing rows are only read;
        inactive or renamed rows still count as present when their key matches.
        Output preserves catalog order.
        """
        present = {category_key(row) for row in existing}
        pool = all_definitions() if canonical is None else canonical
        return [d for d in pool if category_key(d) not in present]

    @staticmethod
    def is_sync_due(
        last_sync_at: dt.datetime | None,
        now: dt.datetime,
        ttl: dt.timedelta = DEFAULT_SYNC_TTL,
    ) -> bool:
        """True when never synced or strictly more than ``ttl`` has elapsed."""
        if ttl < dt.timedelta(0):
            raise ValidationError("ttl must be >= 0")
        if last_sync_at is None:
            return True
        return _to_utc(now) - _to_utc(last_sync_at) > ttl

    @staticmethod
    def fallback_id(definition: CanonicalCategoryDefinition) -> str:
        """Synthetic, non-persistent id for a catalog entry shown as a user row."""
        return f"{FALLBACK_ID_PREFIX}{definition.kind.value}-{definition.order}"

    @staticmethod
    def fallback_categories(kind: CategoryKind | str | None = None) -> list[UserCategory]:
        """Map catalog entries (optionally one kind) into UserCategory rows."""
        pool = all_definitions() if kind is None else definitions_by_kind(kind)
        return [
            UserCategory(
                id=ReconciliationService.fallback_id(d),
                name=d.name,
                kind=d.kind,
                icon=d.icon,
                color=d.color,
                order=d.order,
                active=True,
                is_default=True,
                subcategories=[
                    UserSubcategory(name=s.name, icon=s.icon, color=s.color) for s in d.subcategories
                ],
            )
            for d in pool
        ]

    @staticmethod
    def is_fallback(category: UserCategory) -> bool:
        return category.id.startswith(FALLBACK_ID_PREFIX)
