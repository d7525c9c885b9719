"""Keyword classifier used whenever the classification service can't be.

This mirrors the categories the model is asked for, so callers get the same
result shape either way, just with lower confidence.
"""

from ..constants import CONFIDENCE_PER_MATCH, FALLBACK_CONFIDENCE_CAP
from ..models.classification import CategoryResult, FeedbackCategory

# Phrases are matched as substrings of the lowercased text
CATEGORY_KEYWORDS: dict[FeedbackCategory, tuple[str, ...]] = {
    FeedbackCategory.FEATURE_REQUEST: (
        "feature", "add", "request", "suggestion", "improve", "enhancement",
        "would like", "need",
    ),
    FeedbackCategory.BUG_REPORT: (
        "bug", "error", "broken", "crash", "issue", "problem", "not working",
        "fails", "glitch",
    ),
    FeedbackCategory.SHIPPING_COMPLAINT: (
        "delivery", "shipping", "arrived", "package", "late", "delayed",
        "damaged", "lost",
    ),
    FeedbackCategory.PRODUCT_QUALITY: (
        "quality", "material", "build", "durability", "defective", "cheap", "flimsy",
    ),
    FeedbackCategory.CUSTOMER_SERVICE: (
        "service", "support", "staff", "representative", "help", "rude",
        "unhelpful", "friendly",
    ),
    FeedbackCategory.GENERAL_INQUIRY: (
        "question", "wondering", "inquiry", "information", "curious", "how do",
    ),
    FeedbackCategory.REFUND_REQUEST: (
        "refund", "return", "money back", "cancel", "charge", "billing", "payment",
    ),
    FeedbackCategory.COMPLIMENT: (
        "great", "excellent", "amazing", "love", "perfect", "awesome",
        "fantastic", "thank you",
    ),
}


def count_keyword_matches(text: str) -> dict[FeedbackCategory, int]:
    """Count keyword hits per category, in enumeration order."""
    lowered = (text or "").lower()
    return {
        category: sum(1 for keyword in CATEGORY_KEYWORDS[category] if keyword in lowered)
        for category in FeedbackCategory
    }


def classify_fallback(text: str) -> CategoryResult:
    """Categorize feedback by keyword matching.

    The category with the most keyword hits wins. Ties go to the category
    listed first; no hits at all means general_inquiry.
    """
    best_category = FeedbackCategory.GENERAL_INQUIRY
    best_count = 0

    for category, count in count_keyword_matches(text).items():
        if count > best_count:
            best_category = category
            best_count = count

    return CategoryResult(
        category=best_category,
        confidence=min(best_count * CONFIDENCE_PER_MATCH, FALLBACK_CONFIDENCE_CAP),
        reasoning=(
            "Keyword-based classification (fallback method). "
            f"Found {best_count} matching keywords."
        ),
    )
