"""Combined sentiment and category analysis for single feedback items."""

import logging
from collections.abc import Iterable

from ..exceptions import ValidationError
from ..langgraph.workflow import run_analysis
from ..models.analysis import AnalysisRecord, HistoryItem
from ..services.categorizer_client import ExternalCategorizerClient
from .records import build_degraded_record
from .sentiment_scorer import score_sentiment

logger = logging.getLogger(__name__)


class FeedbackAnalyzer:
    """Analyzes feedback text into a record ready for persistence.

    Sentiment is always scored locally. The category comes from the
    categorizer client (which falls back to keywords on its own), or from
    keywords alone when ``use_ai`` is False.
    """

    def __init__(
        self,
        categorizer: ExternalCategorizerClient | None = None,
        use_ai: bool = True,
    ) -> None:
        if categorizer is None and use_ai:
            categorizer = ExternalCategorizerClient()
        self.categorizer = categorizer
        self.use_ai = use_ai

    async def analyze_and_categorize(self, text: str) -> AnalysisRecord:
        """Run sentiment scoring and categorization concurrently and merge them.

        Any unexpected error degrades the whole record to a safe default
        (general_inquiry at 0.3, method fallback) with the error message kept
        in ``classification_meta["error"]``.

        Args:
            text: Feedback text (must not be blank)

        Returns:
            AnalysisRecord with a fresh single-entry classification history

        Raises:
            ValidationError: If text is empty or blank

        """
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Invalid feedback text provided")

        try:
            return await run_analysis(text, self.categorizer, self.use_ai)
        except Exception as e:
            logger.exception(f"Enhanced analysis failed: {e!s}")
            return build_degraded_record(score_sentiment(text), e)

    async def reanalyze(
        self, text: str, existing_history: Iterable[HistoryItem] | None = None
    ) -> AnalysisRecord:
        """Re-analyze feedback, appending to its existing classification history.

        The returned record's ``classification_history`` is the existing
        entries followed by the new one. The caller's list is not modified.
        """
        record = await self.analyze_and_categorize(text)
        record.classification_history = [*(existing_history or []), record.history_entry]
        return record
