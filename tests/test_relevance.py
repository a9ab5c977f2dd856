# tests/test_relevance.py
"""
Tests for relevance scoring.

Covers the string helpers, the composite scorer (default) and the
heat x success scorer.
"""

import pytest

from mercury_evolution.models import (
    IntentAnalysis,
    IntentCategory,
    ScoreReason,
    ScoringStrategy,
)
from mercury_evolution.relevance import (
    CompositeRelevanceScorer,
    CompositeScorerConfig,
    HeatSuccessScorer,
    RelevanceScorer,
    get_scorer,
    levenshtein_distance,
    string_similarity,
    word_overlap,
)
from tests.helpers import make_heat_map, make_path


class TestStringHelpers:
    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ("", "", 0),
            ("abc", "", 3),
            ("", "abc", 3),
            ("kitten", "sitting", 3),
            ("flaw", "lawn", 2),
            ("same", "same", 0),
        ],
    )
    def test_levenshtein(self, a, b, expected):
        assert levenshtein_distance(a, b) == expected

    def test_similarity_identical(self):
        assert string_similarity("Debug", "debug") == 1.0

    def test_similarity_both_empty(self):
        assert string_similarity("", "") == 1.0

    def test_similarity_partial(self):
        assert string_similarity("kitten", "sitting") == pytest.approx(4 / 7)

    def test_similarity_disjoint(self):
        assert string_similarity("abc", "xyz") == 0.0

    def test_overlap(self):
        assert word_overlap("fix the bug", "fix bug now") == pytest.approx(2 / 3)

    def test_overlap_case_insensitive(self):
        assert word_overlap("Fix Bug", "fix bug") == 1.0

    def test_overlap_none(self):
        assert word_overlap("alpha beta", "gamma") == 0.0

    def test_overlap_empty(self):
        assert word_overlap("", "") == 0.0


class TestCompositeScorer:
    def test_default_strategy(self):
        assert isinstance(get_scorer(), CompositeRelevanceScorer)
        assert isinstance(get_scorer(), RelevanceScorer)

    def test_exact_match_included(self):
        analysis = IntentAnalysis(intent=IntentCategory.IMPLEMENTATION, confidence=0.6)
        heat_map = make_heat_map(make_path("p1", intent="implementation", success=0.9))

        ranked = CompositeRelevanceScorer().rank(analysis, "implement", heat_map)

        assert len(ranked) == 1
        assert ranked[0].score >= 1.0
        assert ScoreReason.INTENT_MATCH in ranked[0].reasons

    def test_score_components(self):
        scorer = CompositeRelevanceScorer()
        analysis = IntentAnalysis(intent=IntentCategory.IMPLEMENTATION, confidence=0.6)
        path = make_path(intent="implement heat decay")

        scored = scorer.score_path(analysis, "implement the heat decay", path)

        expected = 0.8 * (20 / 24) + 0.6 * (3 / 4) + 0.5
        assert scored.score == pytest.approx(expected)
        assert scored.reasons == [
            ScoreReason.SIMILAR_INTENT,
            ScoreReason.KEYWORD_OVERLAP,
            ScoreReason.SAME_CATEGORY,
        ]

    def test_no_category_bonus_for_general(self):
        scorer = CompositeRelevanceScorer()
        analysis = IntentAnalysis(intent=IntentCategory.GENERAL)
        scored = scorer.score_path(analysis, "notes", make_path(intent="hello notes"))
        assert ScoreReason.SAME_CATEGORY not in scored.reasons

    def test_low_success_excluded(self):
        analysis = IntentAnalysis(intent=IntentCategory.IMPLEMENTATION)
        heat_map = make_heat_map(
            make_path("p1", intent="implementation", success=0.5),
            make_path("p2", intent="implementation", success=0.1),
        )
        assert CompositeRelevanceScorer().rank(analysis, "implementation", heat_map) == []

    def test_irrelevant_excluded(self):
        analysis = IntentAnalysis(intent=IntentCategory.GENERAL)
        heat_map = make_heat_map(make_path("p1", intent="zzzzzzzz"))
        assert CompositeRelevanceScorer().rank(analysis, "hello", heat_map) == []

    def test_sorted_descending(self):
        analysis = IntentAnalysis(intent=IntentCategory.DEBUG)
        heat_map = make_heat_map(
            make_path("weak", intent="research the bug"),
            make_path("strong", intent="debug"),
        )

        ranked = CompositeRelevanceScorer().rank(analysis, "debug", heat_map)

        assert [s.path.id for s in ranked] == ["strong", "weak"]
        assert ranked[0].score >= ranked[1].score

    def test_ties_keep_stored_order(self):
        analysis = IntentAnalysis(intent=IntentCategory.DEBUG)
        heat_map = make_heat_map(*(make_path(f"p{i}", intent="debug") for i in range(5)))

        ranked = CompositeRelevanceScorer().rank(analysis, "debug", heat_map)

        assert [s.path.id for s in ranked] == [f"p{i}" for i in range(5)]

    def test_custom_config(self):
        config = CompositeScorerConfig(min_score=10.0)
        analysis = IntentAnalysis(intent=IntentCategory.DEBUG)
        heat_map = make_heat_map(make_path(intent="debug"))
        assert CompositeRelevanceScorer(config).rank(analysis, "debug", heat_map) == []

    def test_empty_heat_map(self):
        analysis = IntentAnalysis(intent=IntentCategory.DEBUG)
        assert CompositeRelevanceScorer().rank(analysis, "debug", make_heat_map()) == []


class TestHeatSuccessScorer:
    def test_strategy(self):
        assert isinstance(get_scorer(ScoringStrategy.HEAT_SUCCESS), HeatSuccessScorer)
        assert isinstance(get_scorer("heat_success"), HeatSuccessScorer)

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            get_scorer("bogus")

    def test_exact_matches_only(self):
        analysis = IntentAnalysis(intent=IntentCategory.DEBUG)
        heat_map = make_heat_map(
            make_path("p1", intent="debug", success=0.9),
            make_path("p2", intent="debug the bug", success=0.9),
        )

        ranked = HeatSuccessScorer().rank(analysis, "debug", heat_map)

        assert [s.path.id for s in ranked] == ["p1"]
        assert ranked[0].reasons == [ScoreReason.HEAT_SUCCESS]

    def test_ranked_by_heat_times_success(self):
        analysis = IntentAnalysis(intent=IntentCategory.DEBUG)
        heat_map = make_heat_map(
            make_path("p1", intent="debug", success=0.6, heat=1.0),
            make_path("p2", intent="debug", success=0.9, heat=1.0),
            make_path("p3", intent="debug", success=0.4, heat=1.0),
        )

        ranked = HeatSuccessScorer().rank(analysis, "", heat_map)

        assert [s.path.id for s in ranked] == ["p2", "p1"]
        assert ranked[0].score == pytest.approx(0.9)
