"""Batch classification of many feedback texts."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence

from ..analysis.fallback_classifier import classify_fallback
from ..config import BATCH_CONFIG
from ..exceptions import ValidationError
from ..models.classification import ClassificationOutcome
from ..models.progress import BatchProgress
from ..services.categorizer_client import ExternalCategorizerClient

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[BatchProgress], Awaitable[None] | None]


class BatchOrchestrator:
    """Splits texts into batches and classifies them one batch at a time.

    A batch that fails as a whole is retried item by item, so one bad batch
    never affects items outside it. Results always line up with the input.
    """

    def __init__(
        self,
        client: ExternalCategorizerClient | None = None,
        max_batch_size: int | None = None,
        max_batch_chars: int | None = None,
        inter_batch_delay_ms: int | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            client: Categorizer used for batch and per-item calls
            max_batch_size: Upper bound on items per batch
            max_batch_chars: Character budget per batch prompt
            inter_batch_delay_ms: Pause between batches
            sleep: Awaitable used for the pause

        """
        self.client = client or ExternalCategorizerClient()
        self.max_batch_size = max_batch_size or BATCH_CONFIG["max_batch_size"]
        self.max_batch_chars = max_batch_chars or BATCH_CONFIG["max_batch_chars"]
        self.inter_batch_delay_ms = (
            inter_batch_delay_ms
            if inter_batch_delay_ms is not None
            else BATCH_CONFIG["inter_batch_delay_ms"]
        )
        self._sleep = sleep

    def calculate_optimal_batch_size(self, texts: Sequence[str], max_batch_size: int) -> int:
        """Calculate a batch size that keeps each prompt inside the character budget.

        The size is the number of average-length items that fit the budget,
        capped at ``max_batch_size``. Longer feedback means smaller batches.
        """
        if not texts:
            return max(1, max_batch_size)

        average_length = sum(len(text) for text in texts) / len(texts)
        if average_length <= 0:
            return max(1, max_batch_size)

        fits = int(self.max_batch_chars // average_length)
        return max(1, min(max_batch_size, fits))

    @staticmethod
    def create_batches(texts: Sequence[str], batch_size: int) -> list[list[str]]:
        """Divide texts into consecutive batches."""
        return [list(texts[i : i + batch_size]) for i in range(0, len(texts), batch_size)]

    async def _classify_individually(self, batch: list[str]) -> list[ClassificationOutcome]:
        # Sequential so the rate limiter sees the calls one at a time
        results = []
        for text in batch:
            results.append(await self.client.classify(text))
        return results

    async def classify_batch(
        self,
        texts: Sequence[str | None],
        max_batch_size: int | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[ClassificationOutcome]:
        """Classify many texts, one outcome per input entry in input order.

        Blank or None entries are not sent anywhere; they get the keyword
        fallback result for empty text.

        Args:
            texts: Feedback texts
            max_batch_size: Upper bound on items per batch for this call
            on_progress: Called with a BatchProgress after every batch

        Returns:
            List of ClassificationOutcome aligned with ``texts``

        Raises:
            ValidationError: If no entry contains text

        """
        valid = [
            (position, text)
            for position, text in enumerate(texts or [])
            if isinstance(text, str) and text.strip()
        ]
        if not valid:
            raise ValidationError("No valid feedback texts to classify")

        limit = min(max_batch_size or self.max_batch_size, self.max_batch_size)
        valid_texts = [text for _, text in valid]
        batch_size = self.calculate_optimal_batch_size(valid_texts, limit)
        batches = self.create_batches(valid_texts, batch_size)

        logger.info(
            f"Classifying {len(valid_texts)} feedback texts in {len(batches)} "
            f"batches of up to {batch_size}"
        )

        classified: list[ClassificationOutcome] = []
        for number, batch in enumerate(batches, 1):
            try:
                results = await self.client.classify_batch(batch)
            except Exception as e:
                logger.warning(
                    f"Batch {number}/{len(batches)} failed ({e!s}), "
                    f"classifying {len(batch)} items individually"
                )
                results = await self._classify_individually(batch)

            classified.extend(results)

            if on_progress is not None:
                progress = BatchProgress.create(
                    batches_completed=number,
                    total_batches=len(batches),
                    processed=len(classified),
                    total=len(valid_texts),
                )
                maybe_awaitable = on_progress(progress)
                if inspect.isawaitable(maybe_awaitable):
                    await maybe_awaitable

            if number < len(batches) and self.inter_batch_delay_ms > 0:
                await self._sleep(self.inter_batch_delay_ms / 1000)

        outcomes: list[ClassificationOutcome | None] = [None] * len(texts)
        for (position, _), outcome in zip(valid, classified):
            outcomes[position] = outcome
        empty = ClassificationOutcome.fallback(classify_fallback(""))
        return [outcome if outcome is not None else empty for outcome in outcomes]
