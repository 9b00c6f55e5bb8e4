"""Async use cases: tolerant batch creation, bootstrap, sync and the fallback read path."""

from .batch import AsyncCreateDefinitions
from .bootstrap import BootstrapState, CategoryBootstrapController
from .categories import AsyncListCategories, filter_by_kind, find_by_id
from .sync import CategorySyncManager

__all__ = [
    "AsyncCreateDefinitions",
    "AsyncListCategories",
    "BootstrapState",
    "CategoryBootstrapController",
    "CategorySyncManager",
    "filter_by_kind",
    "find_by_id",
]
