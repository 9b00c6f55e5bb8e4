from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from typing import Any

from py_category_sync.application.results import CreateOutcome, Err, FailureKind, Ok, Result
from py_category_sync.domain.catalog import all_definitions
from py_category_sync.domain.categories import (
    CanonicalCategoryDefinition,
    CategoryKind,
    UserCategory,
    UserSubcategory,
    category_key,
    definition_errors,
)

_UPDATABLE = frozenset({"name", "icon", "color", "order", "active"})


class InMemoryCategoryRepository:
    """In-process stand-in for the remote category store.

    Mirrors the store's observable rules: duplicate ``(kind, name)`` creates are
    reported as already existing and default rows cannot be deleted.

    Test knobs:
    - ``fail_list``: every ``list`` call returns a network ``Err``.
    - ``fail_create_names``: names whose create returns an HTTP 500 ``Err``.
    - ``supports_restore``: whether ``restore_defaults`` is available.
    - ``delay``: seconds awaited inside every call (to interleave coroutines).
    - ``on_create``: callback invoked with each definition before it is stored.
    - ``*_calls`` counters record how many times each method ran.
    """

    def __init__(self, rows: Iterable[UserCategory] = ()) -> None:
        self._rows: dict[str, UserCategory] = {}
        self._seq = 0
        for row in rows:
            self._rows[row.id] = row
        self.fail_list = False
        self.fail_create_names: set[str] = set()
        self.supports_restore = False
        self.delay = 0.0
        self.on_create: Callable[[CanonicalCategoryDefinition], None] | None = None
        self.list_calls = 0
        self.create_calls = 0
        self.update_calls = 0
        self.delete_calls = 0
        self.restore_calls = 0

    @property
    def rows(self) -> list[UserCategory]:
        return self._sorted(self._rows.values())

    def _next_id(self) -> str:
        self._seq += 1
        return f"cat-{self._seq}"

    @staticmethod
    def _sorted(rows: Iterable[UserCategory]) -> list[UserCategory]:
        return sorted(rows, key=lambda r: (r.kind is CategoryKind.EXPENSE, r.order, r.name))

    async def _pause(self) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        else:
            await asyncio.sleep(0)

    def _store(self, definition: CanonicalCategoryDefinition) -> UserCategory:
        row = UserCategory(
            id=self._next_id(),
            name=definition.name,
            kind=definition.kind,
            icon=definition.icon,
            color=definition.color,
            order=definition.order,
            is_default=True,
            subcategories=[UserSubcategory(s.name, s.icon, s.color) for s in definition.subcategories],
        )
        self._rows[row.id] = row
        return row

    async def list(self, kind: CategoryKind | None = None) -> Result[list[UserCategory]]:
        self.list_calls += 1
        await self._pause()
        if self.fail_list:
            return Err("ConnectError: store unreachable", FailureKind.NETWORK)
        rows = self._rows.values() if kind is None else [r for r in self._rows.values() if r.kind is kind]
        return Ok(self._sorted(rows))

    async def create(self, definition: CanonicalCategoryDefinition) -> Result[CreateOutcome]:
        self.create_calls += 1
        await self._pause()
        errors = definition_errors(definition)
        if errors:
            return Err("; ".join(errors), FailureKind.INVALID)
        if definition.name in self.fail_create_names:
            return Err(f"internal error creating {definition.name}", FailureKind.HTTP, 500)
        if self.on_create is not None:
            self.on_create(definition)
        key = category_key(definition)
        if any(category_key(r) == key for r in self._rows.values()):
            return Ok(CreateOutcome(None, already_existed=True))
        return Ok(CreateOutcome(self._store(definition)))

    async def update(self, category_id: str, changes: Mapping[str, Any]) -> Result[UserCategory]:
        self.update_calls += 1
        await self._pause()
        row = self._rows.get(category_id)
        if row is None:
            return Err(f"category {category_id} not found", FailureKind.HTTP, 404)
        unknown = set(changes) - _UPDATABLE
        if unknown:
            return Err(f"unsupported fields: {', '.join(sorted(unknown))}", FailureKind.INVALID)
        updated = replace(row, **dict(changes))
        self._rows[category_id] = updated
        return Ok(updated)

    async def delete(self, category_id: str) -> Result[None]:
        self.delete_calls += 1
        await self._pause()
        row = self._rows.get(category_id)
        if row is None:
            return Err(f"category {category_id} not found", FailureKind.HTTP, 404)
        if row.is_default:
            return Err("default categories cannot be deleted", FailureKind.HTTP, 400)
        del self._rows[category_id]
        return Ok(None)

    async def restore_defaults(self) -> Result[int]:
        self.restore_calls += 1
        await self._pause()
        if not self.supports_restore:
            return Err("Not Found", FailureKind.HTTP, 404)
        present = {category_key(r) for r in self._rows.values()}
        created = [self._store(d) for d in all_definitions() if category_key(d) not in present]
        return Ok(len(created))
