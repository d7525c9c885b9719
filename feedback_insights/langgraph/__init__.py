"""LangGraph workflow components for feedback analysis."""

from .state import AnalysisState
from .workflow import get_compiled_workflow, run_analysis

__all__ = ["AnalysisState", "get_compiled_workflow", "run_analysis"]
