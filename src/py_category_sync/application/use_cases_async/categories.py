from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from py_category_sync.application.dto.models import CategoryListDTO
from py_category_sync.application.ports import CategoryRepository
from py_category_sync.application.results import Err
from py_category_sync.domain.categories import CategoryKind, UserCategory
from py_category_sync.domain.reconciliation import ReconciliationService

logger = logging.getLogger(__name__)

__all__ = ["AsyncListCategories", "filter_by_kind", "find_by_id"]


@dataclass(slots=True)
class AsyncListCategories:
    """Category query used by the rest of the app, shielded by the catalog.

    On any failure of the remote list call the catalog definitions (filtered by
    the requested kind) are returned as UserCategory rows with synthetic ids.
    The fallback rows are never written back; the sync manager fills gaps on its
    next successful pass.

    Returns ``CategoryListDTO``; ``fallback_used`` and ``error`` describe the
    substitution. This use case never raises for remote failures.
    """

    repository: CategoryRepository

    async def __call__(self, kind: CategoryKind | str | None = None) -> CategoryListDTO:
        wanted = CategoryKind.parse(kind) if kind is not None else None
        try:
            result = await self.repository.list(wanted)
        except Exception as exc:
            logger.exception("Category list raised; serving catalog fallback")
            reason = str(exc) or type(exc).__name__
        else:
            if not isinstance(result, Err):
                return CategoryListDTO(categories=result.value)
            reason = result.reason
        logger.warning("Category list failed (%s); serving catalog fallback", reason)
        return CategoryListDTO(
            categories=ReconciliationService.fallback_categories(wanted),
            fallback_used=True,
            error=reason,
        )


def filter_by_kind(categories: Iterable[UserCategory], kind: CategoryKind | str) -> list[UserCategory]:
    """Return the categories of one kind, preserving order."""
    wanted = CategoryKind.parse(kind)
    return [c for c in categories if c.kind is wanted]


def find_by_id(categories: Iterable[UserCategory], category_id: str) -> UserCategory | None:
    for c in categories:
        if c.id == category_id:
            return c
    return None
