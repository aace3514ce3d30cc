"""Deterministic Scoring Engine.

Builds a complete AnalysisReport from a submission and its Market Snapshot
without any LLM.  Used when no provider is configured, when the provider
rejects our credentials, and as the last rung of the analysis ladder.

Rules
-----
- NO API calls
- NO randomness
- Never raises; every missing snapshot field falls back to a default
- Score adjustments run in a fixed order and later steps overwrite earlier ones
- Every score is clamped to [0, 100] and rounded half-up
"""

from __future__ import annotations

from typing import Optional

from ..constants import (
    BASE_SCORES,
    COMPETITION_CAP,
    DEFAULT_ADDRESSABLE_MARKET,
    DEFAULT_AVERAGE_RAISE,
    DEFAULT_COMPLEXITY,
    DEFAULT_GROWTH_RATE,
    DEFAULT_INVESTORS,
    DEFAULT_SIMILARITY,
    DEFAULT_TOTAL_MARKET,
    INNOVATION_FLOOR,
    STAGE_OVERRIDES,
    SWOT_LIST_CAP,
)
from ..schemas.analysis_schema import (
    AnalysisReport,
    AudienceSegment,
    MonetizationStrategy,
    RoadmapPhase,
    Swot,
)
from ..schemas.idea_schema import IdeaSubmission
from ..schemas.market_schema import (
    FundingInfo,
    IndustryInsights,
    MarketSnapshot,
    MarketValidation,
    RealWorldData,
    TechnicalFeasibility,
    format_billions,
    parse_leading_float,
)
from .data_sources import get_fallback_competitors
from ..score_math import mean, to_score

# (keywords, overrides); first matching row wins, AI before blockchain.
COMPLEXITY_OVERRIDES: list[tuple[tuple[str, ...], dict[str, int]]] = [
    (("ai", "machine learning", "ml"),
     {"feasibility": 55, "innovation_index": 80, "risk_level": 60}),
    (("blockchain", "crypto"),
     {"feasibility": 45, "innovation_index": 75, "risk_level": 70}),
    (("app", "mobile"),
     {"feasibility": 80, "innovation_index": 65}),
]


# Addressable market (USD billions) → market potential.  None = unchanged.
def _market_potential_for(addressable: float) -> Optional[int]:
    if addressable > 100:
        return 85
    if addressable > 50:
        return 75
    if addressable < 10:
        return 55
    return None


MONETIZATION_TEMPLATE = [("Subscription", 75), ("Freemium", 65), ("Transaction Fees", 55)]

ROADMAP_TEMPLATE = [
    ("Phase 1", "Validate Market Need", "3-6 months"),
    ("Phase 2", "Build MVP", "6-9 months"),
    ("Phase 3", "Launch & Iterate", "9-12 months"),
    ("Phase 4", "Scale", "12+ months"),
]


def compute_mock_scores(submission: IdeaSubmission, snapshot: Optional[MarketSnapshot]) -> dict[str, int]:
    """Score vector only, keyed by snake_case axis name."""
    snapshot = snapshot or MarketSnapshot()
    scores: dict[str, float] = dict(BASE_SCORES)
    solution_lower = submission.solution.lower()

    # 1. Complexity
    for keywords, overrides in COMPLEXITY_OVERRIDES:
        if any(k in solution_lower for k in keywords):
            scores.update(overrides)
            break

    # 2. Stage
    risk, overall = STAGE_OVERRIDES.get(submission.stage, STAGE_OVERRIDES["idea"])
    scores["risk_level"] = risk
    scores["overall_score"] = overall

    # 3. Competition
    competitors = snapshot.competitors or []
    if competitors:
        avg_similarity = mean(
            c.similarity if c.similarity is not None else DEFAULT_SIMILARITY for c in competitors
        )
        scores["competition"] = min(COMPETITION_CAP, 40 + avg_similarity * 0.5 + len(competitors) * 5)
        scores["innovation_index"] = max(INNOVATION_FLOOR, 100 - avg_similarity)

    # 4. Market potential
    addressable = snapshot.addressable_market
    if addressable is None:
        addressable = parse_leading_float(DEFAULT_ADDRESSABLE_MARKET)
    potential = _market_potential_for(addressable)
    if potential is not None:
        scores["market_potential"] = potential

    return {axis: to_score(value) for axis, value in scores.items()}


def _echo(submission: IdeaSubmission, snapshot: MarketSnapshot) -> RealWorldData:
    """Snapshot echo with the fallback values the deterministic report reports."""
    competitors = snapshot.competitors or get_fallback_competitors(submission.solution, submission.industry)
    return RealWorldData(
        market_size=(
            format_billions(snapshot.total_market_size)
            if snapshot.total_market_size is not None
            else DEFAULT_TOTAL_MARKET
        ),
        addressable_market=(
            f"{snapshot.addressable_market:.1f}"
            if snapshot.addressable_market is not None
            else DEFAULT_ADDRESSABLE_MARKET
        ),
        market_growth=(
            f"{snapshot.growth_rate:.1f}%" if snapshot.growth_rate is not None else DEFAULT_GROWTH_RATE
        ),
        competitors=list(competitors)[:6],
        market_validation=snapshot.market_validation or MarketValidation(
            search_trends="Moderate interest",
            discussion_activity="Moderate discussion",
            existing_products=[],
        ),
        industry_insights=snapshot.industry_insights or IndustryInsights(
            trends=list(snapshot.industry_trends or []), challenges=[], opportunities=[]
        ),
        funding_info=FundingInfo(
            average_funding=(
                snapshot.funding_landscape.average_funding
                if snapshot.funding_landscape
                else DEFAULT_AVERAGE_RAISE
            ),
            typical_investors=(
                list(snapshot.funding_landscape.typical_investors)
                if snapshot.funding_landscape
                else list(DEFAULT_INVESTORS)
            ),
            recent_rounds=(
                list(snapshot.funding_landscape.recent_rounds or [])
                if snapshot.funding_landscape
                else []
            ),
        ),
        technical_feasibility=snapshot.technical_feasibility or TechnicalFeasibility(
            complexity=DEFAULT_COMPLEXITY,
            required_resources=["Development Team"],
            similar_tech_stack=["React", "Node.js"],
        ),
        industry_trends=list(snapshot.industry_trends or []),
        recent_news=list(snapshot.recent_news or []),
    )


def _swot(submission: IdeaSubmission, snapshot: MarketSnapshot, echo: RealWorldData) -> Swot:
    has_competitors = bool(snapshot.competitors)
    complexity = (
        snapshot.technical_feasibility.complexity if snapshot.technical_feasibility else DEFAULT_COMPLEXITY
    )
    insights = snapshot.industry_insights

    strengths = [
        f"Targeting {submission.target_market} with {submission.solution[:50]}",
        f"Market size of ${echo.addressable_market}B addressable market",
        (
            f"Already at {submission.stage} stage - proven concept"
            if submission.stage != "idea"
            else "Early stage opportunity"
        ),
    ]

    weaknesses = [
        f"{len(snapshot.competitors)} competitors identified" if has_competitors else "Market validation needed",
        "Early stage - no market validation yet" if submission.stage == "idea" else "",
        "High technical complexity" if complexity == "high" else "",
    ]
    weaknesses = [w for w in weaknesses if w]

    opportunities = list((insights.opportunities if insights else [])[:2])
    opportunities.append(f"Market growing at {echo.market_growth}")

    threats = ["Strong competition in market" if has_competitors else "Unvalidated market demand"]
    threats.extend((insights.challenges if insights else [])[:2])

    return Swot(
        strengths=strengths[:SWOT_LIST_CAP],
        weaknesses=weaknesses[:SWOT_LIST_CAP],
        opportunities=opportunities[:SWOT_LIST_CAP],
        threats=threats[:SWOT_LIST_CAP],
    )


def generate_mock_analysis(
    submission: IdeaSubmission,
    snapshot: Optional[MarketSnapshot] = None,
) -> AnalysisReport:
    """Complete deterministic report for *submission*.

    Same inputs always give the same report; the output validates against the
    same schema an LLM response must satisfy.
    """
    snapshot = snapshot or MarketSnapshot()
    scores = compute_mock_scores(submission, snapshot)
    echo = _echo(submission, snapshot)

    print(
        f"🧮 [MOCK] Deterministic scores for '{submission.startup_name}': "
        f"overall={scores['overall_score']} risk={scores['risk_level']} "
        f"competition={scores['competition']}"
    )

    return AnalysisReport(
        **scores,
        swot=_swot(submission, snapshot, echo),
        target_audience=[
            AudienceSegment(
                name=submission.target_market.split(" ")[0] or "Primary Users",
                age="25-45",
                description=submission.target_market or "Target market users",
            )
        ],
        monetization_strategies=[
            MonetizationStrategy(name=name, fit=fit) for name, fit in MONETIZATION_TEMPLATE
        ],
        pitch_tips=[
            f"Clearly articulate how {submission.solution[:40]} solves {submission.problem[:30]}",
            "Highlight your target market and addressable market size",
            "Demonstrate technical feasibility",
            "Address competitive landscape",
        ],
        roadmap=[
            RoadmapPhase(phase=phase, title=title, duration=duration)
            for phase, title, duration in ROADMAP_TEMPLATE
        ],
        real_world_data=echo,
    )
