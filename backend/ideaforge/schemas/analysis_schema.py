from typing import Any, Optional

from pydantic import Field, field_validator

from ..score_math import round_half_up
from .base import CamelModel
from .market_schema import RealWorldData


def _round_fractional(value: Any) -> Any:
    """LLMs occasionally return 72.5 for an integer axis; round it half-up.

    NaN and infinities raise ValueError so pydantic reports a validation error.
    """
    if isinstance(value, float):
        return round_half_up(value)
    return value


class ScoreVector(CamelModel):
    """Six bounded axes of a validation report.

    ``competition`` and ``risk_level`` are higher = worse; the other four are
    higher = better.  Every axis is an integer in [0, 100].
    """

    overall_score: int = Field(..., ge=0, le=100, description="Overall startup validation score")
    market_potential: int = Field(..., ge=0, le=100, description="Market potential score")
    feasibility: int = Field(..., ge=0, le=100, description="Technical and business feasibility score")
    competition: int = Field(..., ge=0, le=100, description="Competition intensity (higher = more competition)")
    risk_level: int = Field(..., ge=0, le=100, description="Risk level (higher = more risky)")
    innovation_index: int = Field(..., ge=0, le=100, description="Innovation and uniqueness score")

    @field_validator(
        "overall_score",
        "market_potential",
        "feasibility",
        "competition",
        "risk_level",
        "innovation_index",
        mode="before",
    )
    @classmethod
    def round_fractional(cls, v: Any) -> Any:
        return _round_fractional(v)


class PartialScoreVector(CamelModel):
    """Any subset of the score axes, e.g. what the dashboard has on hand."""

    overall_score: Optional[float] = Field(None, ge=0, le=100)
    market_potential: Optional[float] = Field(None, ge=0, le=100)
    feasibility: Optional[float] = Field(None, ge=0, le=100)
    competition: Optional[float] = Field(None, ge=0, le=100)
    risk_level: Optional[float] = Field(None, ge=0, le=100)
    innovation_index: Optional[float] = Field(None, ge=0, le=100)


class Swot(CamelModel):
    strengths: list[str]
    weaknesses: list[str]
    opportunities: list[str]
    threats: list[str]


class AudienceSegment(CamelModel):
    name: str
    age: str
    description: str


class MonetizationStrategy(CamelModel):
    name: str
    fit: int = Field(..., ge=0, le=100)

    @field_validator("fit", mode="before")
    @classmethod
    def round_fit(cls, v: Any) -> Any:
        return _round_fractional(v)


class RoadmapPhase(CamelModel):
    phase: str
    title: str
    duration: str


class AnalysisReport(ScoreVector):
    """Full validation report.

    The LLM output and the deterministic fallback must both validate against
    this one schema; callers cannot tell them apart by shape.
    """

    swot: Swot
    target_audience: list[AudienceSegment]
    monetization_strategies: list[MonetizationStrategy]
    pitch_tips: list[str] = Field(..., description="Tips to improve the pitch")
    roadmap: list[RoadmapPhase]
    real_world_data: RealWorldData
