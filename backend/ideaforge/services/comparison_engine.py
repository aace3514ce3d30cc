"""Comparison / Alignment Calculator.

Scores how well a submission lines up with the Market Snapshot gathered for
it, optionally blended with an existing score vector.

Rules
-----
- Pure: NO I/O, NO randomness, NO LLMs
- Absent inputs skip their rule; the sub-score keeps its base value
- Each sub-score is clamped to [0, 100] then rounded half-up
- The overall score is the exact decimal weighted sum of the four final
  sub-scores, rounded half-up
- Insights follow rule order, with the summary line first
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..constants import (
    COMPARISON_BASE_SCORE,
    COMPARISON_WEIGHTS,
    COMPLEXITY_FEASIBILITY,
    DEFAULT_SIMILARITY,
    EMPTY_COMPETITOR_LIST_SCORE,
    STAGE_FEASIBILITY_BONUS,
)
from ..schemas.analysis_schema import PartialScoreVector
from ..schemas.comparison_schema import ComparisonMetrics
from ..schemas.idea_schema import IdeaSubmission
from ..schemas.market_schema import MarketSnapshot
from ..score_math import mean, round_half_up, to_score

_STAGE_FEASIBILITY_INSIGHTS = {
    "growing": "You're already in growth stage - technical feasibility proven",
    "launched": "Product is launched - technical barriers overcome",
    "idea": "Early stage - technical feasibility needs validation",
}

_COMPLEXITY_INSIGHTS = {
    "low": "Low technical complexity - faster to market",
    "medium": "Medium technical complexity - standard development timeline",
    "high": "High technical complexity - requires expert team and significant resources",
}

# (minimum overall score, summary line), highest first
SUMMARY_LADDER: list[tuple[int, str]] = [
    (80, "Excellent alignment with real-world market data - strong opportunity"),
    (65, "Good alignment with market data - viable opportunity with proper execution"),
    (50, "Moderate alignment - validate assumptions and refine strategy"),
]
_SUMMARY_FLOOR = "Lower alignment with market data - consider pivoting or addressing gaps"


def _pct(value: float) -> str:
    return f"{value:g}%"


def _blend(score: float, other: Optional[float]) -> float:
    """Arithmetic mean of *score* and *other*, or *score* when *other* is absent."""
    if other is None:
        return score
    return (score + other) / 2


def weighted_comparison_score(
    market_alignment: int,
    competition_fit: int,
    technical_feasibility: int,
    market_validation: int,
) -> int:
    total = (
        COMPARISON_WEIGHTS["market_alignment"] * Decimal(market_alignment)
        + COMPARISON_WEIGHTS["competition_fit"] * Decimal(competition_fit)
        + COMPARISON_WEIGHTS["technical_feasibility"] * Decimal(technical_feasibility)
        + COMPARISON_WEIGHTS["market_validation"] * Decimal(market_validation)
    )
    return round_half_up(total)


def summary_insight(overall: int) -> str:
    for threshold, line in SUMMARY_LADDER:
        if overall >= threshold:
            return line
    return _SUMMARY_FLOOR


# ── Sub-scores ──────────────────────────────────────────────────────────

def _market_alignment(snapshot: MarketSnapshot, analysis: PartialScoreVector, insights: list[str]) -> int:
    score: float = COMPARISON_BASE_SCORE

    addressable = snapshot.addressable_market
    if addressable is not None:
        if addressable > 100:
            score += 20
            insights.append("Your solution targets a large addressable market (>$100B)")
        elif addressable > 50:
            score += 10
            insights.append("Your solution targets a substantial addressable market (>$50B)")
        elif addressable < 10:
            score -= 15
            insights.append("Your solution targets a niche market - validate demand carefully")

    growth = snapshot.growth_rate
    if growth is not None:
        if growth > 15:
            score += 15
            insights.append(f"Market is growing rapidly ({_pct(growth)})")
        elif growth > 10:
            score += 8
            insights.append(f"Market shows healthy growth ({_pct(growth)})")
        elif growth < 5:
            score -= 10
            insights.append("Market growth is slow - ensure strong product-market fit")

    return to_score(_blend(score, analysis.market_potential))


def competition_fit_base(similarities: list[Optional[float]]) -> float:
    """Competition fit for a present competitor list, before blending."""
    count = len(similarities)
    if count == 0:
        return EMPTY_COMPETITOR_LIST_SCORE

    avg = mean(s if s is not None else DEFAULT_SIMILARITY for s in similarities)
    if avg > 70:
        score = 40 - 3 * count
    elif avg > 50:
        score = 55
    else:
        score = 70 + (10 if count < 3 else 0)

    if count > 5:
        score -= 15
    elif count < 3:
        score += 10
    return score


def _competition_fit(snapshot: MarketSnapshot, analysis: PartialScoreVector, insights: list[str]) -> int:
    score: float = COMPARISON_BASE_SCORE
    competitors = snapshot.competitors

    if competitors is not None:
        similarities = [c.similarity for c in competitors]
        score = competition_fit_base(similarities)
        if not competitors:
            insights.append("Limited competitor data - market may be untapped or unvalidated")
        else:
            avg = mean(s if s is not None else DEFAULT_SIMILARITY for s in similarities)
            if avg > 70:
                insights.append(
                    f"Strong competition detected - {len(competitors)} similar competitors "
                    f"with {round_half_up(avg)}% average similarity"
                )
            elif avg > 50:
                insights.append("Moderate competition - differentiate your solution clearly")
            else:
                insights.append("Lower competition - opportunity for market differentiation")

    inverted = None if analysis.competition is None else 100 - analysis.competition
    return to_score(_blend(score, inverted))


def _technical_feasibility(
    submission: IdeaSubmission,
    snapshot: MarketSnapshot,
    analysis: PartialScoreVector,
    insights: list[str],
) -> int:
    score: float = COMPARISON_BASE_SCORE
    feasibility = snapshot.technical_feasibility

    if feasibility is not None:
        score = COMPLEXITY_FEASIBILITY[feasibility.complexity]
        insights.append(_COMPLEXITY_INSIGHTS[feasibility.complexity])

        score += STAGE_FEASIBILITY_BONUS.get(submission.stage, STAGE_FEASIBILITY_BONUS["idea"])
        stage_insight = _STAGE_FEASIBILITY_INSIGHTS.get(submission.stage)
        if stage_insight:
            insights.append(stage_insight)

    return to_score(_blend(score, analysis.feasibility))


def _market_validation(snapshot: MarketSnapshot, insights: list[str]) -> int:
    score: float = COMPARISON_BASE_SCORE
    validation = snapshot.market_validation
    if validation is None:
        return to_score(score)

    if validation.search_trends is not None:
        trends = validation.search_trends.lower()
        if "high" in trends:
            score += 20
            insights.append("High search interest indicates validated market demand")
        elif "moderate" in trends:
            score += 10
            insights.append("Moderate search interest - emerging market opportunity")
        else:
            score -= 10
            insights.append("Low search interest - validate market demand before proceeding")

    if validation.discussion_activity is not None:
        discussion = validation.discussion_activity.lower()
        if "high" in discussion or "strong" in discussion:
            score += 15
            insights.append("High discussion activity - strong market signal")
        elif "limited" in discussion or "low" in discussion:
            score -= 15
            insights.append("Limited discussion - market may be unvalidated")

    products = validation.existing_products
    if products is not None:
        if len(products) == 0:
            score += 10
            insights.append("No existing similar products - blue ocean opportunity (validate demand)")
        elif len(products) > 5:
            score -= 15
            insights.append(f"{len(products)} existing products found - highly competitive market")
        else:
            score += 5
            insights.append(f"{len(products)} existing products - moderate competition")

    return to_score(score)


# ── Public entry point ──────────────────────────────────────────────────

def calculate_comparison_scores(
    submission: IdeaSubmission,
    snapshot: Optional[MarketSnapshot] = None,
    analysis: Optional[PartialScoreVector] = None,
) -> ComparisonMetrics:
    """Compute the four alignment sub-scores, the weighted overall and insights.

    Parameters
    ----------
    submission : IdeaSubmission
        Only ``stage`` is read.
    snapshot : MarketSnapshot, optional
        Any field may be absent.
    analysis : PartialScoreVector, optional
        ``market_potential``, ``competition`` and ``feasibility`` are
        blended in when present.
    """
    snapshot = snapshot or MarketSnapshot()
    analysis = analysis or PartialScoreVector()
    insights: list[str] = []

    market_alignment = _market_alignment(snapshot, analysis, insights)
    competition_fit = _competition_fit(snapshot, analysis, insights)
    technical_feasibility = _technical_feasibility(submission, snapshot, analysis, insights)
    market_validation = _market_validation(snapshot, insights)

    overall = weighted_comparison_score(
        market_alignment, competition_fit, technical_feasibility, market_validation
    )
    insights.insert(0, summary_insight(overall))

    return ComparisonMetrics(
        market_alignment_score=market_alignment,
        competition_fit_score=competition_fit,
        technical_feasibility_score=technical_feasibility,
        market_validation_score=market_validation,
        overall_comparison_score=overall,
        insights=insights,
    )
