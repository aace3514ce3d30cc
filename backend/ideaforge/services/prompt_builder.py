"""Prompt construction for the analysis ladder.

``build_full_prompt`` embeds the Market Snapshot and the extracted solution
signals; ``build_reduced_prompt`` carries the submission only and is used
when the full attempt fails for a non-auth reason.
"""

from __future__ import annotations

from typing import Optional

from ..schemas.idea_schema import IdeaSubmission
from ..schemas.market_schema import MarketSnapshot
from ..score_math import mean, round_half_up
from .signal_extractor import SolutionSignals

RESPONSE_FORMAT = """
Respond with ONE JSON object (no markdown, no prose) with exactly these keys:
{
  "overallScore": int 0-100,
  "marketPotential": int 0-100,
  "feasibility": int 0-100,
  "competition": int 0-100 (higher = more competition),
  "riskLevel": int 0-100 (higher = more risky),
  "innovationIndex": int 0-100,
  "swot": {"strengths": [str], "weaknesses": [str], "opportunities": [str], "threats": [str]},
  "targetAudience": [{"name": str, "age": str, "description": str}],
  "monetizationStrategies": [{"name": str, "fit": int 0-100}],
  "pitchTips": [str],
  "roadmap": [{"phase": str, "title": str, "duration": str}],
  "realWorldData": {"marketSize": str, "marketGrowth": str, "competitors": [],
                    "fundingInfo": {"averageFunding": str, "typicalInvestors": [str]}}
}
""".strip()

_SEPARATOR = "=" * 63


def fingerprint(submission: IdeaSubmission) -> str:
    """Request id that differs for every distinct solution/problem/market triple."""
    parts = (
        submission.solution[:50],
        submission.problem[:30],
        submission.target_market[:20],
    )
    return "-".join("-".join(p.split()) for p in parts)


def _startup_details(submission: IdeaSubmission) -> str:
    return "\n".join([
        "=== STARTUP DETAILS ===",
        f'Startup Name: "{submission.startup_name}"',
        f'Full Description: "{submission.description}"',
        f'Specific Problem Being Solved: "{submission.problem}"',
        f'Exact Proposed Solution: "{submission.solution}"',
        f'Target Market: "{submission.target_market}"',
        f'Industry: "{submission.industry}"',
        f'Current Development Stage: "{submission.stage}"',
    ])


def _fmt(value: Optional[float], unit: str = "") -> str:
    return "unknown" if value is None else f"{value:g}{unit}"


def render_snapshot(submission: IdeaSubmission, snapshot: MarketSnapshot) -> str:
    lines = [
        _SEPARATOR,
        "REAL-WORLD DATA ANALYSIS",
        _SEPARATOR,
        "",
        "MARKET SIZE:",
        f"- Total Industry Market: {_fmt(snapshot.total_market_size)} billion USD",
        f"- Addressable Market (TAM) for THIS solution: {_fmt(snapshot.addressable_market)} billion USD",
        f"- Market Growth Rate: {_fmt(snapshot.growth_rate, '%')}",
        "",
        "COMPETITORS:",
    ]

    competitors = snapshot.competitors or []
    if competitors:
        for idx, c in enumerate(competitors, start=1):
            similarity = "n/a" if c.similarity is None else f"{c.similarity:g}%"
            lines.append(f"{idx}. {c.name} (Similarity: {similarity}) - {c.description}")
            if c.funding:
                lines.append(f"   Funding: {c.funding}")
            if c.website:
                lines.append(f"   Website: {c.website}")
        avg = mean(c.similarity if c.similarity is not None else 50 for c in competitors)
        lines.append(f"Average competitor similarity: {round_half_up(avg)}%")
    else:
        lines.append(
            f'NO DIRECT COMPETITORS FOUND for "{submission.solution[:80]}". '
            "Decide whether this is a blue ocean or an unvalidated market."
        )

    validation = snapshot.market_validation
    if validation:
        products = validation.existing_products or []
        lines += [
            "",
            "MARKET VALIDATION SIGNALS:",
            f"- Search Interest Trends: {validation.search_trends or 'unknown'}",
            f"- Discussion Activity: {validation.discussion_activity or 'unknown'}",
            f"- Existing Products Found: {len(products)}",
        ]
        for idx, p in enumerate(products, start=1):
            suffix = f" - {p.url}" if p.url else ""
            lines.append(f"   {idx}. {p.name} ({p.platform}){suffix}")

    insights = snapshot.industry_insights
    if insights:
        lines += ["", "INDUSTRY INSIGHTS:"]
        for label, items in (
            ("Trends", insights.trends),
            ("Challenges", insights.challenges),
            ("Opportunities", insights.opportunities),
        ):
            lines.append(f"{label}:")
            lines += [f"  {i}. {item}" for i, item in enumerate(items, start=1)]

    funding = snapshot.funding_landscape
    if funding:
        lines += [
            "",
            "FUNDING LANDSCAPE:",
            f"- Average Raise for {submission.stage} stage: {funding.average_funding}",
            f"- Typical Investors: {', '.join(funding.typical_investors)}",
        ]
        for i, r in enumerate(funding.recent_rounds or [], start=1):
            lines.append(f"  {i}. {r.company}: {r.amount} ({r.date})")

    feasibility = snapshot.technical_feasibility
    if feasibility:
        lines += [
            "",
            "TECHNICAL FEASIBILITY:",
            f"- Complexity Level: {feasibility.complexity.upper()}",
            f"- Required Resources: {', '.join(feasibility.required_resources)}",
            f"- Similar Tech Stack Used: {', '.join(feasibility.similar_tech_stack)}",
        ]

    if snapshot.recent_news:
        lines += ["", "RECENT NEWS:"]
        lines += [f"- {n.title} ({n.source}, {n.date})" for n in snapshot.recent_news]

    lines.append(_SEPARATOR)
    return "\n".join(lines)


def build_full_prompt(
    submission: IdeaSubmission,
    snapshot: MarketSnapshot,
    signals: SolutionSignals,
) -> str:
    request_id = fingerprint(submission)
    characteristics = "\n".join(f"- {line}" for line in signals.describe())

    return f"""ANALYSIS REQUEST ID: {request_id}

You are analyzing a SPECIFIC startup idea: "{submission.startup_name}".
Each startup idea is unique and must receive scores that reflect its own
characteristics. Do not use generic or default scores.

SOLUTION CHARACTERISTICS ANALYSIS:
{characteristics}

{_startup_details(submission)}

=== REAL-WORLD MARKET CONTEXT (USE THIS DATA) ===
{render_snapshot(submission, snapshot)}

=== SCORING GUIDELINES ===
- Market potential follows the addressable market: large TAM (>100B) 70-90,
  medium (>50B) 55-75, niche 40-65; add a few points for growth above 10%.
- Feasibility follows technical complexity: high 35-60, medium 60-80, low 75-95;
  idea stage lowers it, launched / growing raise it.
- Competition (higher = more competition) follows the number of competitors
  and their average similarity.
- Risk by stage: idea 65-85, mvp 45-65, launched 25-45, growing 15-35.
- Innovation follows competitor similarity: >70% similar 25-45, 40-70% 45-70,
  <40% 65-85.
- SWOT entries must reference the competitors, industry insights and market
  data above.

{RESPONSE_FORMAT}"""


def build_reduced_prompt(submission: IdeaSubmission) -> str:
    return f"""Analyze this startup idea and provide a comprehensive validation assessment:

{_startup_details(submission)}

Note: Some real-world data could not be fetched. Base the analysis on the
startup details and general industry knowledge.

{RESPONSE_FORMAT}"""
