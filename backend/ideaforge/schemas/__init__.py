# Schemas package
from .analysis_schema import (
    AnalysisReport,
    AudienceSegment,
    MonetizationStrategy,
    PartialScoreVector,
    RoadmapPhase,
    ScoreVector,
    Swot,
)
from .chat_schema import ChatErrorResponse, ChatMessage
from .comparison_schema import ComparisonMetrics, ComparisonRequest
from .history_schema import ValidationEntryCreate, ValidationEntryResponse
from .idea_schema import IdeaSubmission
from .market_schema import (
    Competitor,
    ExistingProduct,
    FundingInfo,
    FundingRound,
    IndustryInsights,
    MarketSnapshot,
    MarketValidation,
    NewsItem,
    RealWorldData,
    RealWorldDataInput,
    TechnicalFeasibility,
    format_billions,
    parse_leading_float,
    real_world_from_snapshot,
    snapshot_from_real_world,
)

__all__ = [
    "AnalysisReport",
    "AudienceSegment",
    "ChatErrorResponse",
    "ChatMessage",
    "ComparisonMetrics",
    "ComparisonRequest",
    "Competitor",
    "ExistingProduct",
    "FundingInfo",
    "FundingRound",
    "IdeaSubmission",
    "IndustryInsights",
    "MarketSnapshot",
    "MarketValidation",
    "MonetizationStrategy",
    "NewsItem",
    "PartialScoreVector",
    "RealWorldData",
    "RealWorldDataInput",
    "RoadmapPhase",
    "ScoreVector",
    "Swot",
    "TechnicalFeasibility",
    "ValidationEntryCreate",
    "ValidationEntryResponse",
    "format_billions",
    "parse_leading_float",
    "real_world_from_snapshot",
    "snapshot_from_real_world",
]
