"""Keyword-based sentiment scoring and topic extraction."""

from ..constants import (
    CONFIDENCE_PER_MATCH,
    DEFAULT_TOPIC,
    NEGATIVE_THRESHOLD,
    NEUTRAL_SCORE,
    NO_SIGNAL_CONFIDENCE,
    POSITIVE_THRESHOLD,
)
from ..models.classification import SentimentLabel
from ..models.sentiment import SentimentResult

POSITIVE_WORDS = frozenset({
    "amazing", "awesome", "excellent", "fantastic", "great", "good", "love", "perfect",
    "wonderful", "best", "outstanding", "brilliant", "satisfied", "happy", "pleased",
    "impressed", "recommend", "helpful", "fast", "quick", "easy", "smooth", "efficient",
})

NEGATIVE_WORDS = frozenset({
    "terrible", "awful", "bad", "worst", "hate", "horrible", "disgusting", "disappointing",
    "frustrated", "angry", "annoyed", "slow", "difficult", "hard", "confusing", "broken",
    "useless", "poor", "expensive", "overpriced", "delayed", "late", "rude", "unhelpful",
})

# Insertion order is the order topics are reported in
TOPIC_KEYWORDS: dict[str, tuple[str, ...]] = {
    "product": ("product", "item", "quality", "design", "feature"),
    "service": ("service", "support", "help", "staff", "team"),
    "delivery": ("delivery", "shipping", "arrived", "package", "fast", "slow"),
    "price": ("price", "cost", "expensive", "cheap", "value", "money"),
    "website": ("website", "app", "online", "interface", "login"),
    "payment": ("payment", "checkout", "card", "billing", "transaction"),
}


def tokenize(text: str) -> list[str]:
    """Lowercase and split on whitespace. Punctuation stays on the token."""
    return text.lower().split()


def label_for_score(score: float) -> SentimentLabel:
    """Map a sentiment score onto its label."""
    if score >= POSITIVE_THRESHOLD:
        return SentimentLabel.POSITIVE
    if score <= NEGATIVE_THRESHOLD:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


def extract_topics(tokens: list[str]) -> list[str]:
    """Return the topics whose keywords appear among the tokens."""
    token_set = set(tokens)
    topics = [
        topic
        for topic, keywords in TOPIC_KEYWORDS.items()
        if any(keyword in token_set for keyword in keywords)
    ]
    return topics or [DEFAULT_TOPIC]


def score_sentiment(text: str) -> SentimentResult:
    """Score the sentiment of a feedback text.

    The score is the share of matched sentiment words that are positive.
    Text without any sentiment words is neutral at 0.5 with low confidence.

    Args:
        text: The feedback text

    Returns:
        SentimentResult with score, label, confidence and topics

    """
    tokens = tokenize(text or "")

    positive_count = sum(1 for token in tokens if token in POSITIVE_WORDS)
    negative_count = sum(1 for token in tokens if token in NEGATIVE_WORDS)
    total = positive_count + negative_count

    if total == 0:
        score = NEUTRAL_SCORE
        label = SentimentLabel.NEUTRAL
        confidence = NO_SIGNAL_CONFIDENCE
    else:
        score = positive_count / total
        label = label_for_score(score)
        confidence = min(1.0, total * CONFIDENCE_PER_MATCH)

    return SentimentResult(
        score=score,
        label=label,
        confidence=confidence,
        topics=extract_topics(tokens),
        positive_count=positive_count,
        negative_count=negative_count,
    )
