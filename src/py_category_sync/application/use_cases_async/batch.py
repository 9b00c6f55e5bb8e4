from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from py_category_sync.application.cancellation import CancellationToken
from py_category_sync.application.dto.models import BatchCreateReportDTO, CreateFailureDTO
from py_category_sync.application.ports import CategoryRepository
from py_category_sync.application.results import Err
from py_category_sync.domain.categories import CanonicalCategoryDefinition

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AsyncCreateDefinitions:
    """Create a list of catalog definitions one by one, tolerating failures.

    Parameters:
        repository: CategoryRepository used for every create call.

    Call Args:
        definitions: Definitions to create, in order.
        token: Optional CancellationToken checked before each create.

    Behavior:
        - Duplicate responses are counted under ``already_existed`` (success).
        - Any other failure is logged and recorded; the batch continues.
        - Unexpected exceptions from the repository are treated like failures.
        - A cancelled token stops the batch before the next call.

    Returns:
        BatchCreateReportDTO with per-item outcomes.
    """

    repository: CategoryRepository

    async def __call__(
        self,
        definitions: Iterable[CanonicalCategoryDefinition],
        token: CancellationToken | None = None,
    ) -> BatchCreateReportDTO:
        report = BatchCreateReportDTO()
        for definition in definitions:
            if token is not None and token.cancelled:
                logger.info("Batch create cancelled after %s calls (%s)", report.attempted, token.reason)
                report.cancelled = True
                break
            report.attempted += 1
            try:
                result = await self.repository.create(definition)
            except Exception as exc:
                logger.exception("Unexpected error creating category %r", definition.name)
                report.failed.append(CreateFailureDTO(definition.name, definition.kind.value, str(exc)))
                continue
            if isinstance(result, Err):
                logger.warning(
                    "Failed to create category %r (%s): %s",
                    definition.name,
                    definition.kind.value,
                    result.reason,
                )
                report.failed.append(CreateFailureDTO(definition.name, definition.kind.value, result.reason))
                continue
            outcome = result.value
            if outcome.already_existed or outcome.category is None:
                logger.info("Category already exists: %r (%s)", definition.name, definition.kind.value)
                report.already_existed.append(definition.name)
            else:
                logger.debug("Category created: %r (%s)", definition.name, definition.kind.value)
                report.created.append(outcome.category)
        return report
