"""Centralized constants shared across the analysis pipeline and routes.

Industry and stage enums are mirrored in the validation wizard on the
frontend; changes here must be mirrored there.
"""

from __future__ import annotations

from decimal import Decimal

# ── Form enums ──────────────────────────────────────────────────────────
INDUSTRIES: list[str] = [
    "Technology",
    "Healthcare",
    "Finance",
    "E-commerce",
    "Education",
    "Entertainment",
    "Food & Beverage",
    "Real Estate",
    "Transportation",
    "Other",
]

STAGES: list[str] = ["idea", "mvp", "launched", "growing"]

# ── Deterministic scoring engine ────────────────────────────────────────
BASE_SCORES: dict[str, int] = {
    "overall_score": 65,
    "market_potential": 70,
    "feasibility": 75,
    "competition": 50,
    "risk_level": 45,
    "innovation_index": 70,
}

COMPETITION_CAP: int = 95
INNOVATION_FLOOR: int = 30
DEFAULT_SIMILARITY: int = 50

# Stage → (risk_level, overall_score)
STAGE_OVERRIDES: dict[str, tuple[int, int]] = {
    "idea": (65, 60),
    "mvp": (50, 68),
    "launched": (35, 75),
    "growing": (25, 80),
}

# ── Comparison calculator ───────────────────────────────────────────────
# Weights must sum to exactly 1.00.
COMPARISON_WEIGHTS: dict[str, Decimal] = {
    "market_alignment": Decimal("0.30"),
    "competition_fit": Decimal("0.25"),
    "technical_feasibility": Decimal("0.25"),
    "market_validation": Decimal("0.20"),
}

COMPARISON_BASE_SCORE: int = 50
EMPTY_COMPETITOR_LIST_SCORE: int = 60

COMPLEXITY_FEASIBILITY: dict[str, int] = {
    "low": 85,
    "medium": 65,
    "high": 45,
}

STAGE_FEASIBILITY_BONUS: dict[str, int] = {
    "growing": 15,
    "launched": 10,
    "mvp": 5,
    "idea": -10,
}

# ── Fallback market snapshot values ─────────────────────────────────────
DEFAULT_TOTAL_MARKET: str = "1000"
DEFAULT_ADDRESSABLE_MARKET: str = "100"
DEFAULT_GROWTH_RATE: str = "10%"
DEFAULT_COMPLEXITY: str = "medium"
DEFAULT_AVERAGE_RAISE: str = "$1M"
DEFAULT_INVESTORS: list[str] = ["Angel Investors"]

# ── History ─────────────────────────────────────────────────────────────
DEFAULT_HISTORY_LIMIT: int = 50

SWOT_LIST_CAP: int = 4
