"""Tests for batch classification orchestration."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from feedback_insights.analysis.fallback_classifier import classify_fallback
from feedback_insights.exceptions import BatchClassificationError, ValidationError
from feedback_insights.models.classification import (
    CategoryResult,
    ClassificationMethod,
    ClassificationOutcome,
    FeedbackCategory,
)
from feedback_insights.processing.batch_orchestrator import BatchOrchestrator
from feedback_insights.services.rate_limiter import RateLimiter

from .conftest import batch_reply


def echo(text: str) -> CategoryResult:
    """A result whose reasoning identifies the text it came from."""
    return CategoryResult(category=FeedbackCategory.GENERAL_INQUIRY, confidence=0.9, reasoning=text)


class FakeCategorizer:
    """Categorizer that records batches and can fail chosen batch numbers."""

    def __init__(self, failing_batches=()):
        self.failing_batches = set(failing_batches)
        self.batches = []
        self.single_calls = []

    async def classify_batch(self, texts):
        self.batches.append(list(texts))
        if len(self.batches) in self.failing_batches:
            raise BatchClassificationError("batch failed")
        return [ClassificationOutcome.ai(echo(text)) for text in texts]

    async def classify(self, text):
        self.single_calls.append(text)
        return ClassificationOutcome.fallback(echo(text))


@pytest.fixture
def categorizer():
    return FakeCategorizer()


@pytest.fixture
def orchestrator(categorizer):
    return BatchOrchestrator(categorizer, inter_batch_delay_ms=0)


@pytest.fixture
def texts():
    return [f"feedback number {i}" for i in range(37)]


class TestBatchOrchestrator:
    """Test suite for BatchOrchestrator."""

    def test_chunks_and_length(self, orchestrator, categorizer, texts):
        """37 texts with batch size 15 run as 15, 15 and 7."""
        results = asyncio.run(orchestrator.classify_batch(texts, 15))

        assert [len(batch) for batch in categorizer.batches] == [15, 15, 7]
        assert len(results) == 37

    def test_order_preserved(self, orchestrator, texts):
        """Results line up with the input."""
        results = asyncio.run(orchestrator.classify_batch(texts, 15))

        assert [r.reasoning for r in results] == texts

    def test_failed_batch_degrades_to_individual(self, texts):
        """A failed batch is classified item by item, leaving other batches alone."""
        categorizer = FakeCategorizer(failing_batches={2})
        orchestrator = BatchOrchestrator(categorizer, inter_batch_delay_ms=0)

        results = asyncio.run(orchestrator.classify_batch(texts, 15))

        assert categorizer.single_calls == texts[15:30]
        assert [r.reasoning for r in results] == texts
        assert all(r.method == ClassificationMethod.AI_CLASSIFICATION for r in results[:15])
        assert all(r.method == ClassificationMethod.FALLBACK for r in results[15:30])
        assert all(r.method == ClassificationMethod.AI_CLASSIFICATION for r in results[30:])

    def test_all_batches_fail(self, texts):
        """Order holds even when every batch degrades."""
        categorizer = FakeCategorizer(failing_batches={1, 2, 3})
        orchestrator = BatchOrchestrator(categorizer, inter_batch_delay_ms=0)

        results = asyncio.run(orchestrator.classify_batch(texts, 15))

        assert [r.reasoning for r in results] == texts
        assert categorizer.single_calls == texts

    @pytest.mark.parametrize("bad_input", [[], ["", "   ", None]])
    def test_no_valid_texts_rejected(self, orchestrator, bad_input):
        """Input with no text is the one error reported to the caller."""
        with pytest.raises(ValidationError):
            asyncio.run(orchestrator.classify_batch(bad_input, 10))

    def test_blank_entries_filtered(self, orchestrator, categorizer):
        """Blank entries never reach the service but keep their slot."""
        results = asyncio.run(
            orchestrator.classify_batch(["first", "  ", None, "second"], 10)
        )

        assert categorizer.batches == [["first", "second"]]
        assert len(results) == 4
        assert results[0].reasoning == "first"
        assert results[3].reasoning == "second"
        assert results[1].result == classify_fallback("")
        assert results[2].method == ClassificationMethod.FALLBACK

    def test_progress_reported_after_each_batch(self, orchestrator, texts):
        """Progress is emitted once per batch with cumulative counts."""
        updates = []

        asyncio.run(orchestrator.classify_batch(texts, 15, updates.append))

        assert [u.batches_completed for u in updates] == [1, 2, 3]
        assert [u.processed for u in updates] == [15, 30, 37]
        assert all(u.total == 37 and u.total_batches == 3 for u in updates)
        assert [u.percentage for u in updates] == [41, 81, 100]

    def test_progress_reported_for_degraded_batch(self, texts):
        """A degraded batch still reports progress."""
        categorizer = FakeCategorizer(failing_batches={1})
        orchestrator = BatchOrchestrator(categorizer, inter_batch_delay_ms=0)
        updates = []

        asyncio.run(orchestrator.classify_batch(texts[:5], 5, updates.append))

        assert len(updates) == 1
        assert updates[0].percentage == 100

    def test_async_progress_callback(self, orchestrator, texts):
        """Async callbacks are awaited."""
        callback = AsyncMock()

        asyncio.run(orchestrator.classify_batch(texts, 15, callback))

        assert callback.await_count == 3

    def test_delay_between_batches_only(self, categorizer, texts):
        """The pause happens between batches, not after the last one."""
        sleep = AsyncMock()
        orchestrator = BatchOrchestrator(categorizer, inter_batch_delay_ms=1000, sleep=sleep)

        asyncio.run(orchestrator.classify_batch(texts, 15))

        assert sleep.await_count == 2
        sleep.assert_awaited_with(1.0)

    def test_batch_size_clamped_to_maximum(self, categorizer, texts):
        """A requested size above the configured maximum is clamped."""
        orchestrator = BatchOrchestrator(categorizer, max_batch_size=10, inter_batch_delay_ms=0)

        asyncio.run(orchestrator.classify_batch(texts, 50))

        assert [len(batch) for batch in categorizer.batches] == [10, 10, 10, 7]


class TestOptimalBatchSize:
    """Test suite for batch sizing."""

    def test_short_texts_use_requested_size(self, orchestrator):
        """Short feedback fits the budget at full size."""
        assert orchestrator.calculate_optimal_batch_size(["short"] * 40, 15) == 15

    def test_long_texts_shrink_batches(self, categorizer):
        """Longer feedback means fewer items per batch."""
        orchestrator = BatchOrchestrator(categorizer, max_batch_chars=1000)

        assert orchestrator.calculate_optimal_batch_size(["x" * 200] * 10, 15) == 5
        assert orchestrator.calculate_optimal_batch_size(["x" * 400] * 10, 15) == 2

    def test_never_below_one(self, categorizer):
        """A single huge item still gets a batch of one."""
        orchestrator = BatchOrchestrator(categorizer, max_batch_chars=1000)

        assert orchestrator.calculate_optimal_batch_size(["x" * 5000], 15) == 1


class TestWithCategorizerClient:
    """Orchestrator driving the real client with a scripted model."""

    def test_mismatched_batch_degrades_through_client(self, make_client):
        """A short batch reply degrades to per-item calls that still succeed."""
        client, llm = make_client(
            batch_reply(1),
            '{"category": "bug_report", "confidence": 0.9}',
            '{"category": "compliment", "confidence": 0.8}',
        )
        orchestrator = BatchOrchestrator(client, inter_batch_delay_ms=0)

        results = asyncio.run(orchestrator.classify_batch(["it crashed", "love it"], 10))

        assert len(llm.calls) == 3
        assert [r.category for r in results] == [
            FeedbackCategory.BUG_REPORT,
            FeedbackCategory.COMPLIMENT,
        ]
        assert all(r.method == ClassificationMethod.AI_CLASSIFICATION for r in results)

    def test_rate_limited_batch_falls_back_without_calls(self, make_client):
        """With the limit exhausted nothing reaches the service."""
        client, llm = make_client(
            batch_reply(2), limiter=RateLimiter(max_requests=0, window_seconds=60)
        )
        orchestrator = BatchOrchestrator(client, inter_batch_delay_ms=0)

        results = asyncio.run(orchestrator.classify_batch(["it crashed", "refund please"], 10))

        assert llm.calls == []
        assert [r.method for r in results] == [ClassificationMethod.FALLBACK] * 2
        assert [r.category for r in results] == [
            FeedbackCategory.BUG_REPORT,
            FeedbackCategory.REFUND_REQUEST,
        ]
