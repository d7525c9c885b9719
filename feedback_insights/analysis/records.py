"""Builders for the persisted analysis record shape."""

from typing import Any

from ..models.analysis import AnalysisRecord, ClassificationHistoryEntry, utc_timestamp
from ..models.classification import ClassificationMethod, ClassificationOutcome
from ..models.sentiment import SentimentResult
from ..utils.error_handling import create_fallback_category


def sentiment_meta(sentiment: SentimentResult) -> dict[str, Any]:
    return {
        "method": ClassificationMethod.KEYWORD_BASED.value,
        "positiveWords": sentiment.positive_count,
        "negativeWords": sentiment.negative_count,
        "confidence": sentiment.confidence,
    }


def build_analysis_record(
    sentiment: SentimentResult, outcome: ClassificationOutcome, model: str
) -> AnalysisRecord:
    """Merge sentiment and category results into one record.

    The history entry records the method that actually produced the
    category, so fallbacks stay visible after persistence.
    """
    timestamp = utc_timestamp()
    history_entry = ClassificationHistoryEntry(
        category=outcome.category,
        confidence=outcome.confidence,
        method=outcome.method,
        reasoning=outcome.reasoning,
        timestamp=timestamp,
    )

    ai_meta: dict[str, Any] = {
        "method": outcome.method.value,
        "reasoning": outcome.reasoning,
        "confidence": outcome.confidence,
    }
    if outcome.method is ClassificationMethod.AI_CLASSIFICATION:
        ai_meta["model"] = model

    return AnalysisRecord(
        sentiment_score=sentiment.score,
        sentiment_label=sentiment.label.value,
        sentiment_confidence=sentiment.confidence,
        topics=list(sentiment.topics),
        ai_category=outcome.category,
        ai_category_confidence=outcome.confidence,
        ai_reasoning=outcome.reasoning,
        classification_meta={
            "sentimentAnalysis": sentiment_meta(sentiment),
            "aiClassification": ai_meta,
            "timestamp": timestamp,
        },
        history_entry=history_entry,
        classification_history=[history_entry],
        analysis_timestamp=timestamp,
    )


def build_degraded_record(sentiment: SentimentResult, error: Exception | str) -> AnalysisRecord:
    """Build the safe-default record used when analysis hits an unexpected error."""
    fallback = create_fallback_category(error)
    timestamp = utc_timestamp()
    history_entry = ClassificationHistoryEntry(
        category=fallback["category"],
        confidence=fallback["confidence"],
        method=fallback["method"],
        reasoning=fallback["reasoning"],
        timestamp=timestamp,
    )

    return AnalysisRecord(
        sentiment_score=sentiment.score,
        sentiment_label=sentiment.label.value,
        sentiment_confidence=sentiment.confidence,
        topics=list(sentiment.topics),
        ai_category=fallback["category"],
        ai_category_confidence=fallback["confidence"],
        ai_reasoning=fallback["ai_reasoning"],
        classification_meta={
            "sentimentAnalysis": sentiment_meta(sentiment),
            "aiClassification": {
                "method": fallback["method"].value,
                "reasoning": fallback["reasoning"],
                "confidence": fallback["confidence"],
            },
            "timestamp": timestamp,
            "error": fallback["error"],
        },
        history_entry=history_entry,
        classification_history=[history_entry],
        analysis_timestamp=timestamp,
    )
