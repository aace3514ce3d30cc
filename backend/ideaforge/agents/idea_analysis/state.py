import operator
from typing import Annotated, Optional, TypedDict

from ...schemas.idea_schema import IdeaSubmission
from ...schemas.market_schema import (
    Competitor,
    FundingInfo,
    IndustryInsights,
    MarketSnapshot,
    MarketValidation,
    NewsItem,
    TechnicalFeasibility,
)
from ...services.data_sources import MarketSizeEstimate
from ...services.signal_extractor import SolutionSignals


class SnapshotState(TypedDict, total=False):
    submission: IdeaSubmission

    # Populated by extract_signals
    signals: Optional[SolutionSignals]

    # Intermediate results (populated by the parallel fetch nodes)
    market_size: Optional[MarketSizeEstimate]
    competitors: Optional[list[Competitor]]
    market_validation: Optional[MarketValidation]
    industry_insights: Optional[IndustryInsights]
    funding_landscape: Optional[FundingInfo]
    technical_feasibility: Optional[TechnicalFeasibility]
    recent_news: Optional[list[NewsItem]]

    # Final output (populated by assemble_snapshot)
    snapshot: Optional[MarketSnapshot]

    # Fetch nodes run in the same super-step, so errors are merged, not overwritten
    processing_errors: Annotated[list[str], operator.add]
