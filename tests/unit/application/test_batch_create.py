from __future__ import annotations

import pytest

from py_category_sync.application.cancellation import CancellationToken
from py_category_sync.application.results import CreateOutcome, Err, FailureKind, Ok
from py_category_sync.application.use_cases_async.batch import AsyncCreateDefinitions
from py_category_sync.domain.catalog import all_definitions, find_by_name


@pytest.mark.asyncio
async def test_creates_every_definition(repo):
    report = await AsyncCreateDefinitions(repo)(all_definitions())
    assert report.attempted == 23
    assert report.created_count == 23
    assert report.failed_count == 0
    assert not report.cancelled
    assert repo.create_calls == 23


@pytest.mark.asyncio
async def test_failures_do_not_abort_batch(repo):
    repo.fail_create_names = {"Salário", "Pets"}
    report = await AsyncCreateDefinitions(repo)(all_definitions())
    assert report.attempted == 23
    assert report.created_count == 21
    assert sorted(f.name for f in report.failed) == ["Pets", "Salário"]
    assert report.failed[0].reason.startswith("internal error")


@pytest.mark.asyncio
async def test_duplicates_count_as_already_existing(repo):
    salary = find_by_name("Salário")
    await repo.create(salary)
    report = await AsyncCreateDefinitions(repo)([salary, find_by_name("Freelance")])
    assert report.already_existed == ["Salário"]
    assert report.created_count == 1
    assert report.failed_count == 0


@pytest.mark.asyncio
async def test_repository_exception_is_recorded_as_failure():
    class ExplodingRepo:
        calls = 0

        async def create(self, definition):
            self.calls += 1
            if definition.name == "Salário":
                raise RuntimeError("boom")
            return Ok(CreateOutcome(None, already_existed=True))

    repo = ExplodingRepo()
    report = await AsyncCreateDefinitions(repo)(all_definitions()[:3])  # type: ignore[arg-type]
    assert repo.calls == 3
    assert report.failed[0].name == "Salário"
    assert report.failed[0].reason == "boom"
    assert len(report.already_existed) == 2


@pytest.mark.asyncio
async def test_err_results_are_recorded():
    class RejectingRepo:
        async def create(self, definition):
            return Err("bad gateway", FailureKind.HTTP, 502)

    report = await AsyncCreateDefinitions(RejectingRepo())(all_definitions()[:2])  # type: ignore[arg-type]
    assert report.failed_count == 2
    assert report.failed[0].kind == "income"


@pytest.mark.asyncio
async def test_cancellation_stops_before_next_call(repo):
    token = CancellationToken()

    def cancel_after_three(definition):
        if repo.create_calls == 3:
            token.cancel("logout")

    repo.on_create = cancel_after_three
    report = await AsyncCreateDefinitions(repo)(all_definitions(), token)
    assert report.cancelled is True
    assert report.attempted == 3
    assert repo.create_calls == 3


@pytest.mark.asyncio
async def test_pre_cancelled_token_issues_no_calls(repo):
    token = CancellationToken()
    token.cancel()
    report = await AsyncCreateDefinitions(repo)(all_definitions(), token)
    assert report.cancelled is True
    assert report.attempted == 0
    assert repo.create_calls == 0


def test_token_cancel_is_idempotent():
    token = CancellationToken()
    token.cancel("first")
    token.cancel("second")
    assert token.cancelled
    assert token.reason == "first"
