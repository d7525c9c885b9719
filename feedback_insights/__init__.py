"""Feedback Insights - sentiment scoring and AI categorization for customer feedback."""

from .config import BATCH_CONFIG, MODEL_CONFIG, RATE_LIMIT_CONFIG
from .exceptions import (
    BatchClassificationError,
    ClassificationError,
    FeedbackInsightsError,
    RateLimitExceededError,
    ResponseParseError,
    ValidationError,
    WorkflowError,
)

__version__ = "0.1.0"
__all__ = [
    "BATCH_CONFIG",
    "MODEL_CONFIG",
    "RATE_LIMIT_CONFIG",
    "BatchClassificationError",
    "ClassificationError",
    "FeedbackInsightsError",
    "RateLimitExceededError",
    "ResponseParseError",
    "ValidationError",
    "WorkflowError",
]
