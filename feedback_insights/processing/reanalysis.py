"""Re-analysis of stored feedback items in paced groups."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..analysis.aggregator import FeedbackAnalyzer
from ..config import BATCH_CONFIG
from ..models.analysis import AnalysisRecord

logger = logging.getLogger(__name__)

# Storage collaborator: receives the item id and its new analysis
PersistCallback = Callable[[Any, AnalysisRecord], Awaitable[Any] | Any]


@dataclass
class ReanalysisSummary:
    """Outcome counts for a re-analysis run."""

    total: int
    processed: int = 0
    failed: int = 0
    errors: list[dict[str, Any]] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.total == 0:
            return "No feedback found matching the specified criteria"
        return f"Successfully re-analyzed {self.processed}/{self.total} feedback entries"

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "total": self.total,
            "processed": self.processed,
            "failed": self.failed,
            "errors": list(self.errors),
            "message": self.message,
        }


def existing_history(item: Mapping[str, Any]) -> list:
    """Return the stored classification history, or [] if it isn't a list."""
    history = item.get("classificationHistory")
    return list(history) if isinstance(history, list) else []


async def reanalyze_feedback_items(
    items: Sequence[Mapping[str, Any]],
    analyzer: FeedbackAnalyzer,
    persist: PersistCallback,
    batch_size: int | None = None,
    delay_seconds: float | None = None,
) -> ReanalysisSummary:
    """Re-analyze stored feedback and hand each new record to storage.

    Items in a group run concurrently; groups run one after another with a
    pause between them. A failure on one item is counted and does not stop
    the run.

    Args:
        items: Stored feedback with ``id``, ``content`` and ``classificationHistory``
        analyzer: Analyzer used for each item
        persist: Storage collaborator called as ``persist(item_id, record)``
        batch_size: Items per group
        delay_seconds: Pause between groups

    Returns:
        ReanalysisSummary with processed/failed counts and per-item errors

    """
    batch_size = batch_size or BATCH_CONFIG["default_batch_size"]
    if delay_seconds is None:
        delay_seconds = BATCH_CONFIG["inter_batch_delay_ms"] / 1000

    summary = ReanalysisSummary(total=len(items))
    if not items:
        return summary

    logger.info(f"Re-analyzing {len(items)} feedback entries with AI categorization...")

    async def process(item: Mapping[str, Any]) -> None:
        item_id = item.get("id")
        try:
            record = await analyzer.reanalyze(item.get("content", ""), existing_history(item))
            stored = persist(item_id, record)
            if inspect.isawaitable(stored):
                await stored
            summary.processed += 1
        except Exception as e:
            logger.error(f"Failed to re-analyze feedback {item_id}: {e!s}")
            summary.failed += 1
            summary.errors.append({"feedbackId": item_id, "error": str(e)})

    for start in range(0, len(items), batch_size):
        group = items[start : start + batch_size]
        await asyncio.gather(*(process(item) for item in group))

        if start + batch_size < len(items) and delay_seconds > 0:
            await asyncio.sleep(delay_seconds)

    logger.info(
        f"Re-analysis complete: {summary.processed} processed, {summary.failed} failed"
    )
    return summary
