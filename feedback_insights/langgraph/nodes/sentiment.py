from ...analysis.sentiment_scorer import score_sentiment
from ..state import AnalysisState


def score_sentiment_node(state: AnalysisState) -> dict:
    """Score sentiment locally. Cannot fail."""
    return {"sentiment": score_sentiment(state["text"])}
