"""Signal Extractor.

Turns the free text of a submission into qualitative tiers through ordered
keyword rule tables, plus the keyword / similarity helpers the data
fetchers share.

Rules
-----
- Pure: NO I/O, NO randomness, never raises
- Case-insensitive substring matching (``"ai"`` matches ``"maintain"``)
- Rule tables are ordered; the first matching rule wins
- Empty text yields MODERATE on every tier
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ComplexityTier(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    MODERATE = "MODERATE"


class InnovationTier(str, Enum):
    HIGH = "HIGH"
    MODERATE = "MODERATE"


class MarketScope(str, Enum):
    NICHE = "NICHE"
    BROAD = "BROAD"
    MODERATE = "MODERATE"


class ProblemSolutionFit(str, Enum):
    STRONG = "STRONG"
    MODERATE = "MODERATE"


# ── Rule tables (order matters) ─────────────────────────────────────────

# (domain label, keywords, tier, description)
COMPLEXITY_RULES: list[tuple[str, tuple[str, ...], ComplexityTier, str]] = [
    ("ai_ml", ("ai", "machine learning", "ml"), ComplexityTier.HIGH,
     "Requires AI/ML expertise and infrastructure"),
    ("blockchain", ("blockchain", "crypto", "web3"), ComplexityTier.HIGH,
     "Requires blockchain technology and expertise"),
    ("app", ("app", "mobile", "software"), ComplexityTier.MEDIUM,
     "Software development required"),
    ("platform", ("platform", "saas", "marketplace"), ComplexityTier.MEDIUM,
     "Platform/marketplace requires network effects"),
]

_DEFAULT_COMPLEXITY = ("standard", ComplexityTier.MODERATE, "Standard development approach")

INNOVATION_KEYWORDS: tuple[str, ...] = (
    "revolutionary", "breakthrough", "first", "only",
    "new", "unique", "novel", "innovative",
)

# Words that mark a solution as derivative of something existing.
DERIVATIVE_KEYWORDS: tuple[str, ...] = ("similar", "like")

MARKET_SCOPE_RULES: list[tuple[tuple[str, ...], MarketScope]] = [
    (("niche", "specific", "targeted"), MarketScope.NICHE),
    (("global", "everyone", "all"), MarketScope.BROAD),
]

# (industry, solution keywords, note)
INDUSTRY_NOTE_RULES: list[tuple[str, tuple[str, ...], str]] = [
    ("Healthcare", ("tele", "remote"),
     "Healthcare remote solutions: High demand post-COVID, but regulatory considerations"),
    ("Finance", ("payment", "fintech"),
     "Fintech solution: Highly competitive but large market opportunity"),
    ("Education", ("online", "learn"),
     "EdTech solution: Growing market but requires user engagement"),
]

STOP_WORDS: frozenset[str] = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "is", "are", "was", "were", "be", "been", "being", "have", "has", "had", "do", "does", "did",
    "will", "would", "could", "should", "may", "might", "must", "can", "this", "that", "these",
    "those", "i", "you", "he", "she", "it", "we", "they", "what", "which", "who", "when", "where",
    "why", "how", "all", "each", "every", "both", "few", "more", "most", "other", "some", "such",
})

MAX_KEYWORDS = 10


@dataclass
class SolutionSignals:
    complexity: ComplexityTier
    complexity_domain: str
    complexity_note: str
    innovation: InnovationTier
    market_scope: MarketScope
    problem_solution_fit: ProblemSolutionFit
    industry_notes: list[str] = field(default_factory=list)

    def describe(self) -> list[str]:
        """Human-readable characteristic lines, as fed into the LLM prompt."""
        lines = [f"{self.complexity.value} complexity: {self.complexity_note}"]
        if self.innovation is InnovationTier.HIGH:
            lines.append("HIGH innovation potential: Novel approach or first-mover advantage possible")
        else:
            lines.append("MODERATE innovation: Incremental improvement on existing solutions")
        lines.append({
            MarketScope.NICHE: "NICHE market scope: Targets specific segment",
            MarketScope.BROAD: "BROAD market scope: Targets large addressable market",
            MarketScope.MODERATE: "MODERATE market scope: Standard market approach",
        }[self.market_scope])
        if self.problem_solution_fit is ProblemSolutionFit.STRONG:
            lines.append("STRONG problem-solution fit: Solution directly addresses stated problem")
        else:
            lines.append(
                "MODERATE problem-solution fit: Solution addresses problem but connection may need validation"
            )
        lines.extend(self.industry_notes)
        return lines


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


def _first_word(text: str) -> str:
    parts = text.split(" ")
    return parts[0] if parts else ""


def match_complexity(text: str) -> tuple[str, ComplexityTier, str]:
    """Return ``(domain, tier, note)`` for the first complexity rule matching *text*."""
    lowered = (text or "").lower()
    for domain, keywords, tier, note in COMPLEXITY_RULES:
        if _contains_any(lowered, keywords):
            return domain, tier, note
    return _DEFAULT_COMPLEXITY


def extract_signals(solution: Optional[str], problem: Optional[str], industry: Optional[str]) -> SolutionSignals:
    solution_lower = (solution or "").lower()
    problem_lower = (problem or "").lower()

    domain, complexity, note = match_complexity(solution_lower)

    # Innovation
    innovative = _contains_any(solution_lower, INNOVATION_KEYWORDS) or _contains_any(
        problem_lower, INNOVATION_KEYWORDS
    )
    if solution_lower and not _contains_any(solution_lower, DERIVATIVE_KEYWORDS):
        innovative = True
    innovation = InnovationTier.HIGH if innovative else InnovationTier.MODERATE

    # Market scope
    scope = MarketScope.MODERATE
    for keywords, tier in MARKET_SCOPE_RULES:
        if _contains_any(solution_lower, keywords):
            scope = tier
            break

    # Problem-solution fit; an empty first word never matches
    problem_head = _first_word(problem_lower)
    solution_head = _first_word(solution_lower)
    strong_fit = (bool(problem_head) and problem_head in solution_lower) or (
        bool(solution_head) and solution_head in problem_lower
    )
    fit = ProblemSolutionFit.STRONG if strong_fit else ProblemSolutionFit.MODERATE

    notes: list[str] = []
    for rule_industry, keywords, industry_note in INDUSTRY_NOTE_RULES:
        if industry == rule_industry and _contains_any(solution_lower, keywords):
            notes.append(industry_note)
            break

    return SolutionSignals(
        complexity=complexity,
        complexity_domain=domain,
        complexity_note=note,
        innovation=innovation,
        market_scope=scope,
        problem_solution_fit=fit,
        industry_notes=notes,
    )


# ── Keyword helpers ─────────────────────────────────────────────────────

def extract_keywords(text: Optional[str]) -> list[str]:
    """Up to ten lowercase words longer than three characters, stop words removed."""
    words = (text or "").lower().split()
    return [w for w in words if len(w) > 3 and w not in STOP_WORDS][:MAX_KEYWORDS]


def _word_set(text: Optional[str]) -> set[str]:
    return {w for w in (text or "").lower().split() if len(w) > 3}


def calculate_similarity(a: Optional[str], b: Optional[str]) -> float:
    """Jaccard similarity of the two texts' word sets, in [0, 1]."""
    words_a = _word_set(a)
    words_b = _word_set(b)
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)
