"""Utility functions for calculating classification statistics."""

import json
from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..models.classification import FeedbackCategory


@dataclass
class ClassificationStatistics:
    """Container for AI classification statistics."""

    total: int
    ai_analyzed: int
    fallback_usage: float
    manual_override_rate: float
    average_confidence: float
    reclassified: int
    category_counts: dict[str, int] = field(default_factory=dict)

    def to_display_string(self) -> str:
        """Format statistics for display."""
        return (
            f"Total: {self.total} | AI: {self.ai_analyzed} | "
            f"Fallback: {self.fallback_usage:.0f}% | Overrides: {self.manual_override_rate:.0f}% | "
            f"Avg confidence: {self.average_confidence:.0%}"
        )


def _history(feedback: Mapping[str, Any]) -> list:
    history = feedback.get("classificationHistory") or []
    if isinstance(history, str):
        try:
            history = json.loads(history)
        except json.JSONDecodeError:
            return []
    return history if isinstance(history, list) else []


def _stored_category(feedback: Mapping[str, Any]) -> FeedbackCategory:
    # Manual category wins over the AI one; unknown labels count as general_inquiry
    return (
        FeedbackCategory.from_string(feedback.get("category"))
        or FeedbackCategory.from_string(feedback.get("aiCategory"))
        or FeedbackCategory.GENERAL_INQUIRY
    )


def calculate_classification_statistics(
    feedback_items: Sequence[Mapping[str, Any]],
) -> ClassificationStatistics:
    """Calculate statistics for a list of stored feedback items.

    Args:
        feedback_items: Persisted feedback dicts (``aiCategoryConfidence``,
            ``category``, ``manualOverride``, ``classificationHistory``)

    Returns:
        ClassificationStatistics object containing calculated statistics

    """
    total = len(feedback_items)

    if total == 0:
        return ClassificationStatistics(
            total=0,
            ai_analyzed=0,
            fallback_usage=0.0,
            manual_override_rate=0.0,
            average_confidence=0.0,
            reclassified=0,
        )

    confidences = [
        float(f["aiCategoryConfidence"])
        for f in feedback_items
        if f.get("aiCategoryConfidence") is not None
    ]
    ai_analyzed = len(confidences)

    overrides = sum(1 for f in feedback_items if f.get("manualOverride"))

    category_counts = Counter(_stored_category(f).value for f in feedback_items)

    reclassified = sum(1 for f in feedback_items if len(_history(f)) > 1)

    return ClassificationStatistics(
        total=total,
        ai_analyzed=ai_analyzed,
        fallback_usage=(total - ai_analyzed) / total * 100,
        manual_override_rate=overrides / total * 100,
        average_confidence=sum(confidences) / ai_analyzed if ai_analyzed else 0.0,
        reclassified=reclassified,
        category_counts=dict(category_counts),
    )
