"""Analysis record and classification history models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ..constants import ANALYSIS_VERSION
from .classification import ClassificationMethod, FeedbackCategory


def utc_timestamp() -> str:
    """Current time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ClassificationHistoryEntry:
    """One classification event in a feedback item's history.

    Entries are never edited once created; re-analysis appends a new one.
    """

    category: FeedbackCategory
    confidence: float
    method: ClassificationMethod
    reasoning: str
    timestamp: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> dict[str, Any]:
        """Convert entry to dictionary for serialization."""
        return {
            "timestamp": self.timestamp,
            "category": self.category.value,
            "confidence": self.confidence,
            "method": self.method.value,
            "reasoning": self.reasoning,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClassificationHistoryEntry":
        """Rebuild an entry from its stored form."""
        return cls(
            category=FeedbackCategory(data["category"]),
            confidence=float(data["confidence"]),
            method=ClassificationMethod(data["method"]),
            reasoning=data.get("reasoning", ""),
            timestamp=data["timestamp"],
        )


# Stored history may hold entries written by older versions; those stay dicts.
HistoryItem = ClassificationHistoryEntry | dict[str, Any]


@dataclass
class AnalysisRecord:
    """Combined sentiment and category analysis for one feedback text.

    The caller owns persistence: it stores the record fields and the
    ``classification_history`` list on the feedback item.
    """

    # Sentiment analysis results
    sentiment_score: float
    sentiment_label: str
    sentiment_confidence: float
    topics: list[str]

    # Categorization results
    ai_category: FeedbackCategory
    ai_category_confidence: float
    ai_reasoning: str

    classification_meta: dict[str, Any]
    history_entry: ClassificationHistoryEntry
    classification_history: list[HistoryItem] = field(default_factory=list)

    analysis_timestamp: str = field(default_factory=utc_timestamp)
    analysis_version: str = ANALYSIS_VERSION

    @property
    def method(self) -> ClassificationMethod:
        return self.history_entry.method

    @property
    def error(self) -> str | None:
        return self.classification_meta.get("error")

    def to_dict(self) -> dict[str, Any]:
        """Convert record to the persisted field names."""
        return {
            "sentimentScore": self.sentiment_score,
            "sentimentLabel": self.sentiment_label,
            "sentimentConfidence": self.sentiment_confidence,
            "topics": list(self.topics),
            "aiCategory": self.ai_category.value,
            "aiCategoryConfidence": self.ai_category_confidence,
            "aiReasoning": self.ai_reasoning,
            "analysisTimestamp": self.analysis_timestamp,
            "analysisVersion": self.analysis_version,
            "classificationMeta": self.classification_meta,
            "historyEntry": self.history_entry.to_dict(),
            "classificationHistory": [
                entry.to_dict() if isinstance(entry, ClassificationHistoryEntry) else dict(entry)
                for entry in self.classification_history
            ],
        }
