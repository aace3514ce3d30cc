from typing import Optional

from pydantic import Field

from .analysis_schema import PartialScoreVector
from .base import CamelModel
from .idea_schema import IdeaSubmission
from .market_schema import RealWorldDataInput


class ComparisonMetrics(CamelModel):
    """Alignment between a submission and the market data gathered for it."""

    market_alignment_score: int = Field(..., ge=0, le=100)
    competition_fit_score: int = Field(..., ge=0, le=100)
    technical_feasibility_score: int = Field(..., ge=0, le=100)
    market_validation_score: int = Field(..., ge=0, le=100)
    overall_comparison_score: int = Field(..., ge=0, le=100)
    insights: list[str] = Field(default_factory=list)


class ComparisonRequest(CamelModel):
    form_data: IdeaSubmission
    real_world_data: Optional[RealWorldDataInput] = None
    analysis_data: Optional[PartialScoreVector] = None
