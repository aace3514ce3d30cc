"""Signal Extractor tests: complexity, innovation, scope, fit, keywords, similarity."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from ideaforge.services.signal_extractor import (
    ComplexityTier,
    InnovationTier,
    MarketScope,
    ProblemSolutionFit,
    calculate_similarity,
    extract_keywords,
    extract_signals,
    match_complexity,
)


class TestComplexity:
    def test_ai_solution_is_high(self):
        signals = extract_signals("An AI-powered tutor for kids", "Homework is hard", "Education")
        assert signals.complexity is ComplexityTier.HIGH
        assert signals.complexity_domain == "ai_ml"

    def test_crypto_solution_is_blockchain(self):
        domain, tier, _ = match_complexity("crypto wallet for web3 payments")
        assert domain == "blockchain"
        assert tier is ComplexityTier.HIGH

    def test_ai_checked_before_blockchain(self):
        domain, _, _ = match_complexity("AI-powered blockchain ledger")
        assert domain == "ai_ml"

    def test_mobile_is_medium(self):
        domain, tier, _ = match_complexity("mobile budgeting tool")
        assert domain == "app"
        assert tier is ComplexityTier.MEDIUM

    def test_no_keyword_defaults_to_moderate(self):
        domain, tier, note = match_complexity("a bakery delivering bread")
        assert tier is ComplexityTier.MODERATE
        assert domain == "standard"
        assert note == "Standard development approach"

    def test_matching_is_case_insensitive(self):
        assert match_complexity("MOBILE budgeting")[0] == "app"


class TestInnovation:
    def test_derivative_solution_is_moderate(self):
        signals = extract_signals("Just like Uber for dogs", "Dog walkers are hard to book", "Other")
        assert signals.innovation is InnovationTier.MODERATE

    def test_innovation_keyword_beats_derivative_marker(self):
        signals = extract_signals("A novel take, similar to Uber", "Booking is slow", "Other")
        assert signals.innovation is InnovationTier.HIGH

    def test_solution_without_derivative_marker_is_high(self):
        signals = extract_signals("Parking spot sharing", "Parking is scarce", "Other")
        assert signals.innovation is InnovationTier.HIGH


class TestScopeAndFit:
    def test_niche_scope(self):
        assert extract_signals("a niche tool for dentists", "", None).market_scope is MarketScope.NICHE

    def test_broad_scope(self):
        assert extract_signals("global marketplace", "", None).market_scope is MarketScope.BROAD

    def test_first_word_overlap_is_strong_fit(self):
        signals = extract_signals("parking spot sharing", "Parking is hard downtown", "Other")
        assert signals.problem_solution_fit is ProblemSolutionFit.STRONG

    def test_no_overlap_is_moderate_fit(self):
        signals = extract_signals("bread subscription", "Mornings are rushed", "Other")
        assert signals.problem_solution_fit is ProblemSolutionFit.MODERATE

    def test_empty_inputs_default_to_moderate(self):
        signals = extract_signals("", "", None)
        assert signals.complexity is ComplexityTier.MODERATE
        assert signals.innovation is InnovationTier.MODERATE
        assert signals.market_scope is MarketScope.MODERATE
        assert signals.problem_solution_fit is ProblemSolutionFit.MODERATE

    def test_industry_note(self):
        signals = extract_signals("remote consultations", "Clinics are far", "Healthcare")
        assert len(signals.industry_notes) == 1
        assert signals.industry_notes[0].startswith("Healthcare remote solutions")

    def test_describe_lists_every_signal(self):
        lines = extract_signals("remote consultations", "Clinics are far", "Healthcare").describe()
        assert len(lines) == 5


class TestKeywords:
    def test_stop_words_and_short_words_removed(self):
        assert extract_keywords("The quick brown foxes jumped over lazy dogs") == [
            "quick", "brown", "foxes", "jumped", "over", "lazy", "dogs",
        ]

    def test_capped_at_ten(self):
        text = " ".join(f"word{i}" for i in range(20))
        assert len(extract_keywords(text)) == 10

    def test_none_is_empty(self):
        assert extract_keywords(None) == []


class TestSimilarity:
    def test_jaccard(self):
        assert calculate_similarity("smart parking finder", "parking finder app") == pytest.approx(2 / 3)

    def test_identical_texts(self):
        assert calculate_similarity("parking finder", "Parking Finder") == 1.0

    def test_empty_texts(self):
        assert calculate_similarity("", "a an") == 0.0
