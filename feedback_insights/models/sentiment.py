from dataclasses import dataclass, field

from .classification import SentimentLabel


@dataclass(frozen=True)
class SentimentResult:
    """Keyword sentiment score and topics for one feedback text."""

    score: float
    label: SentimentLabel
    confidence: float
    topics: list[str] = field(default_factory=lambda: ["general"])

    # Matched sentiment word counts, reported in classification metadata
    positive_count: int = 0
    negative_count: int = 0

    def to_dict(self) -> dict:
        """Convert result to dictionary for serialization."""
        return {
            "score": self.score,
            "label": self.label.value,
            "confidence": self.confidence,
            "topics": list(self.topics),
        }
