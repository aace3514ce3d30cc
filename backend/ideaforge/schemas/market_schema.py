"""Market Snapshot records.

Two shapes of the same data live here:

- ``MarketSnapshot`` is the typed, numeric record the scoring code consumes.
  Every field is optional and consumers must handle ``None``.
- ``RealWorldData`` is the string-typed echo embedded in analysis reports
  (``"5200"``, ``"520.0"``, ``"13.2%"``) and stored by the frontend.
  ``RealWorldDataInput`` is its lenient counterpart for request bodies.
"""

from __future__ import annotations

import re
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from .base import CamelModel

Complexity = Literal["low", "medium", "high"]

_LEADING_NUMBER = re.compile(r"^\s*\$?\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+))")


def parse_leading_float(value: Union[str, float, int, None]) -> Optional[float]:
    """Parse the leading number of *value*.

    ``"520.0B"`` → 520.0, ``"13.2%"`` → 13.2, ``"abc"`` → None.
    Numbers pass through unchanged.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = _LEADING_NUMBER.match(value.replace(",", ""))
    if not match:
        return None
    return float(match.group(1))


# ── Shared sub-records ──────────────────────────────────────────────────

class Competitor(CamelModel):
    """A discovered competitor and how closely it overlaps the submission."""

    name: str
    description: str
    similarity: Optional[float] = Field(
        None,
        ge=0.0,
        le=100.0,
        description="0-100, higher = more overlap with the submitted solution",
    )
    website: Optional[str] = None
    funding: Optional[str] = None


class ExistingProduct(CamelModel):
    name: str
    platform: str
    url: Optional[str] = None


class MarketValidation(CamelModel):
    search_trends: Optional[str] = None
    discussion_activity: Optional[str] = None
    existing_products: Optional[list[ExistingProduct]] = None


class IndustryInsights(CamelModel):
    trends: list[str] = Field(default_factory=list)
    challenges: list[str] = Field(default_factory=list)
    opportunities: list[str] = Field(default_factory=list)


class FundingRound(CamelModel):
    company: str
    amount: str
    date: str


class FundingInfo(CamelModel):
    average_funding: str
    typical_investors: list[str] = Field(default_factory=list)
    recent_rounds: Optional[list[FundingRound]] = None


class TechnicalFeasibility(CamelModel):
    complexity: Complexity
    required_resources: list[str] = Field(default_factory=list)
    similar_tech_stack: list[str] = Field(default_factory=list)


class NewsItem(CamelModel):
    title: str
    source: str
    date: str
    url: Optional[str] = None


# ── Typed snapshot ──────────────────────────────────────────────────────

class MarketSnapshot(BaseModel):
    """External-data bundle for one submission.  Derived fresh per request."""

    total_market_size: Optional[float] = Field(None, description="USD billions")
    addressable_market: Optional[float] = Field(None, description="USD billions (TAM)")
    growth_rate: Optional[float] = Field(None, description="Annual growth, percent")
    competitors: Optional[list[Competitor]] = None
    market_validation: Optional[MarketValidation] = None
    industry_insights: Optional[IndustryInsights] = None
    funding_landscape: Optional[FundingInfo] = None
    technical_feasibility: Optional[TechnicalFeasibility] = None
    recent_news: Optional[list[NewsItem]] = None
    industry_trends: Optional[list[str]] = None


# ── Wire echo ───────────────────────────────────────────────────────────

class RealWorldData(CamelModel):
    """Market Snapshot echo returned inside every analysis report."""

    market_size: str = Field(..., description="Total industry market size in USD billions")
    addressable_market: Optional[str] = Field(
        None, description="Addressable market (TAM) for this solution in USD billions"
    )
    market_growth: str = Field(..., description="Market growth rate percentage")
    competitors: list[Competitor] = Field(default_factory=list)
    market_validation: Optional[MarketValidation] = None
    industry_insights: Optional[IndustryInsights] = None
    funding_info: FundingInfo
    technical_feasibility: Optional[TechnicalFeasibility] = None
    industry_trends: Optional[list[str]] = None
    recent_news: Optional[list[NewsItem]] = None


class RealWorldDataInput(CamelModel):
    """Lenient ``realWorldData`` as posted back by the dashboard."""

    market_size: Optional[Union[str, float]] = None
    addressable_market: Optional[Union[str, float]] = None
    market_growth: Optional[Union[str, float]] = None
    competitors: Optional[list[Competitor]] = None
    market_validation: Optional[MarketValidation] = None
    industry_insights: Optional[IndustryInsights] = None
    funding_info: Optional[FundingInfo] = None
    technical_feasibility: Optional[TechnicalFeasibility] = None
    industry_trends: Optional[list[str]] = None
    recent_news: Optional[list[NewsItem]] = None


# ── Converters ──────────────────────────────────────────────────────────

def format_billions(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"


def snapshot_from_real_world(data: Union[RealWorldData, RealWorldDataInput]) -> MarketSnapshot:
    """Parse a string-typed echo back into a typed snapshot."""
    return MarketSnapshot(
        total_market_size=parse_leading_float(data.market_size),
        addressable_market=parse_leading_float(data.addressable_market),
        growth_rate=parse_leading_float(data.market_growth),
        competitors=data.competitors,
        market_validation=data.market_validation,
        industry_insights=data.industry_insights,
        funding_landscape=data.funding_info,
        technical_feasibility=data.technical_feasibility,
        recent_news=data.recent_news,
        industry_trends=data.industry_trends,
    )


def real_world_from_snapshot(
    snapshot: MarketSnapshot,
    *,
    default_total: float = 1000.0,
    default_growth: float = 10.0,
    default_funding: Optional[FundingInfo] = None,
) -> RealWorldData:
    """Render a typed snapshot as the report echo, filling required fields."""
    total = snapshot.total_market_size if snapshot.total_market_size is not None else default_total
    growth = snapshot.growth_rate if snapshot.growth_rate is not None else default_growth
    addressable = (
        f"{snapshot.addressable_market:.1f}" if snapshot.addressable_market is not None else None
    )
    funding = snapshot.funding_landscape or default_funding or FundingInfo(
        average_funding="$1M", typical_investors=["Angel Investors"], recent_rounds=[]
    )
    return RealWorldData(
        market_size=format_billions(total),
        addressable_market=addressable,
        market_growth=f"{growth:.1f}%",
        competitors=list(snapshot.competitors or []),
        market_validation=snapshot.market_validation,
        industry_insights=snapshot.industry_insights,
        funding_info=funding,
        technical_feasibility=snapshot.technical_feasibility,
        industry_trends=snapshot.industry_trends,
        recent_news=snapshot.recent_news,
    )
