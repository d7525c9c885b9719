"""Standardized error handling utilities for the feedback pipeline."""

from typing import Any

from ..constants import DEGRADED_AI_REASONING, DEGRADED_CONFIDENCE, DEGRADED_REASONING
from ..models.classification import ClassificationMethod, FeedbackCategory


def create_fallback_category(
    error: Exception | str,
    category: FeedbackCategory = FeedbackCategory.GENERAL_INQUIRY,
    confidence: float = DEGRADED_CONFIDENCE,
) -> dict[str, Any]:
    """Create the safe-default category block for a failed analysis.

    Args:
        error: The error that occurred
        category: Default category for errors
        confidence: Default confidence for errors

    Returns:
        Dictionary with error information and safe defaults

    """
    if isinstance(error, Exception):
        error_message = str(error) or type(error).__name__
    else:
        error_message = error

    return {
        "error": error_message,
        "category": category,
        "confidence": confidence,
        "method": ClassificationMethod.FALLBACK,
        "reasoning": DEGRADED_REASONING,
        "ai_reasoning": DEGRADED_AI_REASONING,
    }


def check_meta_for_errors(classification_meta: dict[str, Any]) -> bool:
    """Check if classification metadata records an error.

    Args:
        classification_meta: Metadata stored with an analysis record

    Returns:
        True if the analysis degraded because of an error, False otherwise

    """
    return bool(classification_meta.get("error"))
