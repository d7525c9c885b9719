"""Progress reporting for batch classification."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BatchProgress:
    """Progress snapshot emitted after each batch."""

    batches_completed: int
    total_batches: int
    processed: int
    total: int
    percentage: int

    @classmethod
    def create(
        cls, batches_completed: int, total_batches: int, processed: int, total: int
    ) -> "BatchProgress":
        """Build a snapshot, deriving the percentage from the counts."""
        percentage = round(processed / total * 100) if total > 0 else 0
        return cls(
            batches_completed=batches_completed,
            total_batches=total_batches,
            processed=processed,
            total=total,
            percentage=max(0, min(100, percentage)),
        )

    def to_dict(self) -> dict:
        return {
            "batchesCompleted": self.batches_completed,
            "totalBatches": self.total_batches,
            "processed": self.processed,
            "total": self.total,
            "percentage": self.percentage,
        }
