from __future__ import annotations

import pytest

from py_category_sync.application.use_cases_async.categories import (
    AsyncListCategories,
    filter_by_kind,
    find_by_id,
)
from py_category_sync.domain.categories import CategoryKind
from py_category_sync.domain.errors import ValidationError


@pytest.mark.asyncio
async def test_returns_remote_rows(repo, category_factory):
    seeded = type(repo)([category_factory("Mercado"), category_factory("Salário", CategoryKind.INCOME)])
    result = await AsyncListCategories(seeded)()
    assert result.fallback_used is False
    assert result.error is None
    assert [c.name for c in result.categories] == ["Salário", "Mercado"]


@pytest.mark.asyncio
async def test_kind_filter_is_forwarded(repo, category_factory):
    seeded = type(repo)([category_factory("Mercado"), category_factory("Salário", CategoryKind.INCOME)])
    result = await AsyncListCategories(seeded)("despesa")
    assert [c.name for c in result.categories] == ["Mercado"]


@pytest.mark.asyncio
async def test_empty_remote_is_not_a_failure(repo):
    result = await AsyncListCategories(repo)()
    assert result.categories == []
    assert result.fallback_used is False


@pytest.mark.asyncio
async def test_fallback_on_list_failure_for_expense(repo):
    repo.fail_list = True
    result = await AsyncListCategories(repo)(CategoryKind.EXPENSE)
    assert result.fallback_used is True
    assert len(result.categories) == 16
    assert all(c.kind is CategoryKind.EXPENSE for c in result.categories)
    assert all(c.id.startswith("fallback-expense-") for c in result.categories)
    assert "unreachable" in result.error
    assert repo.create_calls == 0


@pytest.mark.asyncio
async def test_fallback_on_exception():
    class BrokenRepo:
        async def list(self, kind=None):
            raise ConnectionError("down")

    result = await AsyncListCategories(BrokenRepo())()  # type: ignore[arg-type]
    assert result.fallback_used is True
    assert len(result.categories) == 23
    assert result.error == "down"


@pytest.mark.asyncio
async def test_unknown_kind_raises_validation_error(repo):
    with pytest.raises(ValidationError):
        await AsyncListCategories(repo)("transfer")


def test_filter_by_kind_and_find_by_id(category_factory):
    rows = [
        category_factory("Mercado", id="a"),
        category_factory("Salário", CategoryKind.INCOME, id="b"),
        category_factory("Lazer", id="c"),
    ]
    assert [c.id for c in filter_by_kind(rows, "expense")] == ["a", "c"]
    assert [c.id for c in filter_by_kind(rows, CategoryKind.INCOME)] == ["b"]
    assert find_by_id(rows, "c").name == "Lazer"
    assert find_by_id(rows, "zzz") is None
