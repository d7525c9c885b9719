from typing import Any, TypedDict

from ..models.analysis import AnalysisRecord
from ..models.classification import ClassificationOutcome
from ..models.sentiment import SentimentResult


class AnalysisState(TypedDict):
    """State that flows through the analysis workflow."""

    # Input fields
    text: str
    use_ai: bool
    categorizer: Any  # ExternalCategorizerClient, or None for keyword-only

    # Branch results (written by parallel nodes, so each owns one key)
    sentiment: SentimentResult | None
    category: ClassificationOutcome | None

    # Merged output
    record: AnalysisRecord | None
