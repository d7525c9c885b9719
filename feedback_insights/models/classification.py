"""Classification types and enums for feedback processing."""

from dataclasses import dataclass
from enum import Enum


class FeedbackCategory(str, Enum):
    """Feedback categories. Order matters: it breaks keyword ties."""

    FEATURE_REQUEST = "feature_request"
    BUG_REPORT = "bug_report"
    SHIPPING_COMPLAINT = "shipping_complaint"
    PRODUCT_QUALITY = "product_quality"
    CUSTOMER_SERVICE = "customer_service"
    GENERAL_INQUIRY = "general_inquiry"
    REFUND_REQUEST = "refund_request"
    COMPLIMENT = "compliment"

    @classmethod
    def from_string(cls, value: str | None) -> "FeedbackCategory | None":
        """Create FeedbackCategory from string value."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class SentimentLabel(str, Enum):
    """Sentiment labels derived from the sentiment score."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class ClassificationMethod(str, Enum):
    """How a category was produced."""

    AI_CLASSIFICATION = "ai_classification"
    FALLBACK = "fallback"
    KEYWORD_BASED = "keyword_based"


@dataclass(frozen=True)
class CategoryResult:
    """A category with its confidence and the reasoning behind it."""

    category: FeedbackCategory
    confidence: float
    reasoning: str

    def to_dict(self) -> dict:
        """Convert result to dictionary for serialization."""
        return {
            "category": self.category.value,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
        }


@dataclass(frozen=True)
class ClassificationOutcome:
    """A category result tagged with the method that produced it."""

    result: CategoryResult
    method: ClassificationMethod

    @property
    def category(self) -> FeedbackCategory:
        return self.result.category

    @property
    def confidence(self) -> float:
        return self.result.confidence

    @property
    def reasoning(self) -> str:
        return self.result.reasoning

    @property
    def is_fallback(self) -> bool:
        return self.method is not ClassificationMethod.AI_CLASSIFICATION

    @classmethod
    def ai(cls, result: CategoryResult) -> "ClassificationOutcome":
        return cls(result=result, method=ClassificationMethod.AI_CLASSIFICATION)

    @classmethod
    def fallback(cls, result: CategoryResult) -> "ClassificationOutcome":
        return cls(result=result, method=ClassificationMethod.FALLBACK)
