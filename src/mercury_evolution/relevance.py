# mercury_evolution/relevance.py
"""
Relevance scoring of stored knowledge paths against a new intent.

Provides swappable scorers. The default (CompositeRelevanceScorer) combines
four signals; HeatSuccessScorer keeps the simpler ``heat x success`` ranking
over exact intent matches.

Usage::

    from mercury_evolution.relevance import get_scorer

    scorer = get_scorer()  # composite
    ranked = scorer.rank(analysis, "how do I fix the sync bug", heat_map)
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from mercury_evolution.constants import (
    CATEGORY_WEIGHT,
    EXACT_MATCH_WEIGHT,
    MIN_RELEVANCE,
    MIN_SIMILARITY,
    MIN_SUCCESS,
    OVERLAP_WEIGHT,
    SIMILARITY_WEIGHT,
)
from mercury_evolution.intent_classifier import IntentClassifier
from mercury_evolution.models import (
    HeatMap,
    IntentAnalysis,
    IntentCategory,
    KnowledgePath,
    ScoredPath,
    ScoreReason,
    ScoringStrategy,
)

logger = logging.getLogger(__name__)

# =============================================================================
# String helpers
# =============================================================================


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character edits turning ``a`` into ``b``."""
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + cost,  # substitution
                )
            )
        previous = current
    return previous[-1]


def string_similarity(a: str, b: str) -> float:
    """Case-insensitive edit-distance similarity in [0, 1]."""
    a, b = a.lower(), b.lower()
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return (max_len - levenshtein_distance(a, b)) / max_len


def _word_set(text: str) -> set[str]:
    return set(text.lower().split())


def word_overlap(a: str, b: str) -> float:
    """Shared words divided by the size of the larger word set."""
    words_a, words_b = _word_set(a), _word_set(b)
    shared = words_a & words_b
    if not shared:
        return 0.0
    return len(shared) / max(len(words_a), len(words_b))


# =============================================================================
# Protocol
# =============================================================================


@runtime_checkable
class RelevanceScorer(Protocol):
    """
    Protocol for swappable relevance scorers.

    Implementations return paths worth loading, most relevant first.
    Ties MUST keep the stored order.
    """

    def rank(
        self,
        analysis: IntentAnalysis,
        raw_text: str,
        heat_map: HeatMap,
    ) -> list[ScoredPath]: ...


# =============================================================================
# Implementations
# =============================================================================


class CompositeScorerConfig(BaseModel):
    """Weights and thresholds for CompositeRelevanceScorer."""

    min_success: float = MIN_SUCCESS
    min_score: float = MIN_RELEVANCE
    min_similarity: float = MIN_SIMILARITY
    exact_match_weight: float = EXACT_MATCH_WEIGHT
    similarity_weight: float = SIMILARITY_WEIGHT
    overlap_weight: float = OVERLAP_WEIGHT
    category_weight: float = CATEGORY_WEIGHT


class CompositeRelevanceScorer:
    """
    Default scorer.

    Only paths with success above 0.5 are considered. The score is the sum of:
    - exact_match_weight when the path intent equals the analyzed category
    - similarity_weight * edit-distance similarity of raw text and path intent
      (when above min_similarity)
    - overlap_weight * word overlap (when any word is shared)
    - category_weight when the path intent re-classifies into the same
      non-general category
    Paths below min_score are dropped.
    """

    def __init__(
        self,
        config: CompositeScorerConfig | None = None,
        classifier: IntentClassifier | None = None,
    ) -> None:
        self.config = config or CompositeScorerConfig()
        self.classifier = classifier or IntentClassifier()

    def score_path(
        self,
        analysis: IntentAnalysis,
        raw_text: str,
        path: KnowledgePath,
    ) -> ScoredPath:
        cfg = self.config
        score = 0.0
        reasons: list[ScoreReason] = []

        if path.intent == analysis.intent.value:
            score += cfg.exact_match_weight
            reasons.append(ScoreReason.INTENT_MATCH)

        similarity = string_similarity(raw_text, path.intent)
        if similarity > cfg.min_similarity:
            score += cfg.similarity_weight * similarity
            reasons.append(ScoreReason.SIMILAR_INTENT)

        overlap = word_overlap(raw_text, path.intent)
        if overlap > 0:
            score += cfg.overlap_weight * overlap
            reasons.append(ScoreReason.KEYWORD_OVERLAP)

        if analysis.intent != IntentCategory.GENERAL and self.classifier.classify(path.intent) == analysis.intent:
            score += cfg.category_weight
            reasons.append(ScoreReason.SAME_CATEGORY)

        return ScoredPath(path=path, score=score, reasons=reasons)

    def rank(
        self,
        analysis: IntentAnalysis,
        raw_text: str,
        heat_map: HeatMap,
    ) -> list[ScoredPath]:
        scored = [
            self.score_path(analysis, raw_text, path)
            for path in heat_map.paths
            if path.success > self.config.min_success
        ]
        relevant = [s for s in scored if s.score >= self.config.min_score]
        # list.sort is stable: equal scores keep stored order
        relevant.sort(key=lambda s: s.score, reverse=True)

        logger.debug(f"Ranked {len(relevant)} of {len(heat_map.paths)} paths for {analysis.intent.value}")
        return relevant


class HeatSuccessScorer:
    """
    Simple scorer.

    Exact intent matches with success above 0.5, ranked by heat * success.
    """

    def __init__(self, min_success: float = MIN_SUCCESS) -> None:
        self.min_success = min_success

    def rank(
        self,
        analysis: IntentAnalysis,
        raw_text: str,  # noqa: ARG002 - part of RelevanceScorer protocol
        heat_map: HeatMap,
    ) -> list[ScoredPath]:
        ranked = [
            ScoredPath(path=path, score=path.heat * path.success, reasons=[ScoreReason.HEAT_SUCCESS])
            for path in heat_map.paths
            if path.intent == analysis.intent.value and path.success > self.min_success
        ]
        ranked.sort(key=lambda s: s.score, reverse=True)
        return ranked


def get_scorer(strategy: ScoringStrategy | str = ScoringStrategy.COMPOSITE) -> RelevanceScorer:
    """Build the scorer for ``strategy``."""
    strategy = ScoringStrategy(strategy)
    if strategy == ScoringStrategy.HEAT_SUCCESS:
        return HeatSuccessScorer()
    return CompositeRelevanceScorer()
