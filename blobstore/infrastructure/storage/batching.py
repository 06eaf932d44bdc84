"""Chunked bulk delete.

Groups are submitted one after another so that outstanding backend load is
bounded and every failure count belongs to exactly one group.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Iterator, Sequence
from typing import Generic, TypeVar

from blobstore.core.constants import SETTING_DELETE_BATCH_SIZE
from blobstore.domain.exceptions import ConfigurationError
from blobstore.domain.value_objects import BatchOutcome

logger = logging.getLogger(__name__)

T = TypeVar("T")


def chunk(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield ordered, non-overlapping slices of at most size items."""
    for start in range(0, len(items), size):
        yield items[start : start + size]


class BulkDeleteBatcher(Generic[T]):
    """Submits blob references to a batch-delete callable in fixed-size groups.

    submit_batch receives one group and returns the number of items in it
    that the backend reported as failed. Exceptions it raises propagate and
    abort the remaining groups; nothing is retried.
    """

    def __init__(self, submit_batch: Callable[[Sequence[T]], Awaitable[int]]) -> None:
        self._submit_batch = submit_batch

    async def delete_in_batches(
        self, items: Iterable[T], max_batch_size: int
    ) -> BatchOutcome:
        """Delete items in groups of at most max_batch_size.

        Args:
            items: Blob references, submitted in order.
            max_batch_size: Upper bound on group size; must be positive.

        Returns:
            BatchOutcome with requested, failed, and submitted-batch counts.

        Raises:
            ConfigurationError: max_batch_size <= 0.
        """
        if max_batch_size <= 0:
            raise ConfigurationError(
                f"Batch size must be positive, got {max_batch_size}",
                SETTING_DELETE_BATCH_SIZE,
            )
        pending = list(items)
        if not pending:
            return BatchOutcome()

        total_failed = 0
        batch_count = 0
        for group in chunk(pending, max_batch_size):
            group_failed = min(max(await self._submit_batch(group), 0), len(group))
            batch_count += 1
            if group_failed:
                logger.warning(
                    "Batch %s: %s of %s deletes failed",
                    batch_count,
                    group_failed,
                    len(group),
                )
            total_failed += group_failed

        return BatchOutcome(
            total_requested=len(pending),
            total_failed=total_failed,
            batch_count=batch_count,
        )
