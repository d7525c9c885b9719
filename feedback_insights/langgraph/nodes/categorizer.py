import logging

from ...analysis.fallback_classifier import classify_fallback
from ...models.classification import ClassificationMethod, ClassificationOutcome
from ..state import AnalysisState

logger = logging.getLogger(__name__)


async def categorize_node(state: AnalysisState) -> dict:
    """Categorize the feedback with the configured client.

    In keyword-only mode, or without a client, the keyword classifier is used
    directly and the outcome is marked keyword_based rather than fallback,
    since nothing failed.
    """
    categorizer = state.get("categorizer")

    if not state.get("use_ai", True) or categorizer is None:
        result = classify_fallback(state["text"])
        return {
            "category": ClassificationOutcome(
                result=result, method=ClassificationMethod.KEYWORD_BASED
            )
        }

    outcome = await categorizer.classify(state["text"])
    if outcome.is_fallback:
        logger.debug(f"Categorizer fell back: {outcome.reasoning}")
    return {"category": outcome}
