"""Thin async facades over the category repository for SDK and CLI callers.

Repository calls return ``Ok``/``Err`` values; these wrappers unwrap them and
raise the public SDK exceptions instead, so callers can handle failures with
plain ``try``/``except``.

Public surface:
- get_category(ctx, category_id) -> UserCategory
- update_category(ctx, category_id, changes) -> UserCategory
- delete_category(ctx, category_id) -> None
"""
from __future__ import annotations

from collections.abc import Awaitable, Mapping
from typing import Any, TypeVar

from py_category_sync.application.results import Err, Result
from py_category_sync.application.use_cases_async.categories import find_by_id
from py_category_sync.domain.categories import UserCategory

from .bootstrap import AppContext
from .errors import NotFound, UserInputError, error_from_result, map_exception

__all__ = [
    "get_category",
    "update_category",
    "delete_category",
]

T = TypeVar("T")


async def _unwrap(call: Awaitable[Result[T]]) -> T:
    try:
        result = await call
    except Exception as exc:  # map to public errors
        raise map_exception(exc) from exc
    if isinstance(result, Err):
        raise error_from_result(result)
    return result.value


async def get_category(ctx: AppContext, category_id: str) -> UserCategory:
    """Return one of the user's categories by id (NotFound when absent)."""
    categories = await _unwrap(ctx.repository.list())
    found = find_by_id(categories, category_id)
    if found is None:
        raise NotFound(f"category {category_id} not found")
    return found


async def update_category(ctx: AppContext, category_id: str, changes: Mapping[str, Any]) -> UserCategory:
    """Apply a partial update (name, icon, color, order, active)."""
    if not changes:
        raise UserInputError("Nothing to update")
    return await _unwrap(ctx.repository.update(category_id, dict(changes)))


async def delete_category(ctx: AppContext, category_id: str) -> None:
    await _unwrap(ctx.repository.delete(category_id))
