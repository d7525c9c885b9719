from ...analysis.records import build_analysis_record
from ...config import MODEL_CONFIG
from ...exceptions import WorkflowError
from ..state import AnalysisState


def build_record_node(state: AnalysisState) -> dict:
    """Merge both branch results into an AnalysisRecord."""
    sentiment = state.get("sentiment")
    outcome = state.get("category")
    if sentiment is None or outcome is None:
        raise WorkflowError("Analysis branches did not both complete")

    categorizer = state.get("categorizer")
    model = categorizer.model if categorizer is not None else str(MODEL_CONFIG["classification_model"])
    return {"record": build_analysis_record(sentiment, outcome, model)}
