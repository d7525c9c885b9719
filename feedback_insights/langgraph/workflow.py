from functools import lru_cache
from typing import TYPE_CHECKING

from langgraph.graph import END, START, StateGraph
from langgraph.graph.state import CompiledStateGraph

from ..models.analysis import AnalysisRecord
from .nodes.categorizer import categorize_node
from .nodes.record_builder import build_record_node
from .nodes.sentiment import score_sentiment_node
from .state import AnalysisState

if TYPE_CHECKING:
    from ..services.categorizer_client import ExternalCategorizerClient


@lru_cache(maxsize=1)
def get_compiled_workflow() -> CompiledStateGraph:
    """Get or create the compiled workflow.

    Sentiment scoring and categorization have no dependency on each other,
    so both start from the entry point and run in the same step. The record
    builder waits for both.

    Returns:
        Compiled LangGraph workflow

    """
    workflow = StateGraph(AnalysisState)

    # Add nodes
    workflow.add_node("score_sentiment", score_sentiment_node)
    workflow.add_node("categorize", categorize_node)
    workflow.add_node("build_record", build_record_node)

    # Fan out, then join
    workflow.add_edge(START, "score_sentiment")
    workflow.add_edge(START, "categorize")
    workflow.add_edge(["score_sentiment", "categorize"], "build_record")
    workflow.add_edge("build_record", END)

    return workflow.compile()


def create_initial_state(
    text: str,
    categorizer: "ExternalCategorizerClient | None" = None,
    use_ai: bool = True,
) -> AnalysisState:
    """Create initial state for analyzing one feedback text.

    Args:
        text: Feedback text to analyze
        categorizer: Client used for AI categorization
        use_ai: False to categorize with keywords only

    Returns:
        Initial analysis state

    """
    return {
        "text": text,
        "use_ai": use_ai,
        "categorizer": categorizer,
        "sentiment": None,
        "category": None,
        "record": None,
    }


async def run_analysis(
    text: str,
    categorizer: "ExternalCategorizerClient | None" = None,
    use_ai: bool = True,
) -> AnalysisRecord:
    """Run one feedback text through the workflow.

    Returns:
        The merged AnalysisRecord

    """
    app = get_compiled_workflow()
    result = await app.ainvoke(create_initial_state(text, categorizer, use_ai))
    return result["record"]
