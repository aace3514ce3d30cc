from .analysis_service import AnalysisOutcome, AnalysisService, StrategyResult
from .chat_service import normalize_messages, open_chat_stream
from .comparison_engine import calculate_comparison_scores
from .history_service import (
    clear_entries,
    delete_entry,
    get_entry,
    get_latest,
    list_entries,
    save_entry,
)
from .llm_client import LLMClient, ProviderAuthError, ProviderError, ProviderModelNotFound
from .mock_analysis import compute_mock_scores, generate_mock_analysis
from .signal_extractor import calculate_similarity, extract_keywords, extract_signals

__all__ = [
    "AnalysisOutcome",
    "AnalysisService",
    "StrategyResult",
    "normalize_messages",
    "open_chat_stream",
    "calculate_comparison_scores",
    "clear_entries",
    "delete_entry",
    "get_entry",
    "get_latest",
    "list_entries",
    "save_entry",
    "LLMClient",
    "ProviderAuthError",
    "ProviderError",
    "ProviderModelNotFound",
    "compute_mock_scores",
    "generate_mock_analysis",
    "calculate_similarity",
    "extract_keywords",
    "extract_signals",
]
