"""Domain value objects for the blobstore adapter."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BatchOutcome:
    """Result of a chunked bulk delete.

    total_requested counts every item handed to the batcher; total_failed
    counts per-item failures reported inside successfully submitted batches.
    """

    total_requested: int = 0
    total_failed: int = 0
    batch_count: int = 0

    def __post_init__(self) -> None:
        if self.total_requested < 0 or self.total_failed < 0:
            raise ValueError("Batch outcome counts must not be negative")
        if self.total_failed > self.total_requested:
            raise ValueError("total_failed cannot exceed total_requested")

    @property
    def total_succeeded(self) -> int:
        return self.total_requested - self.total_failed

    @property
    def has_failures(self) -> bool:
        return self.total_failed > 0
