# mercury_evolution/intent_classifier.py
"""
Rule-based intent classification.

Maps free text onto a closed set of categories, tested in priority order:
debug, implementation, research, documentation, planning. The first match
wins; no match is ``general``.

Confidence uses a broader keyword set per category and grows with the number
of keyword hits. Signals are independent of the category.

Pure heuristic, no model calls.
"""

from __future__ import annotations

import re

from mercury_evolution.constants import (
    ALTERNATIVE_THRESHOLD,
    BASE_CONFIDENCE,
    CONFIDENCE_STEP,
    MAX_ALTERNATIVES,
    MAX_CONFIDENCE,
)
from mercury_evolution.models import (
    SCORED_CATEGORIES,
    IntentAnalysis,
    IntentCategory,
    IntentSignal,
)


def _words(*words: str) -> re.Pattern[str]:
    return re.compile(r"\b(" + "|".join(words) + r")\b", re.IGNORECASE)


# Classification patterns, in priority order
CATEGORY_PATTERNS: dict[IntentCategory, re.Pattern[str]] = {
    IntentCategory.DEBUG: _words("debug", "fix", "error", "issue", "problem", "bug"),
    IntentCategory.IMPLEMENTATION: _words("create", "build", "implement", "develop", "make"),
    IntentCategory.RESEARCH: _words("analyze", "research", "explore", "investigate", "find", "learn"),
    IntentCategory.DOCUMENTATION: _words("document", "explain", "describe", "write"),
    IntentCategory.PLANNING: _words("plan", "design", "architect", "structure"),
}

# Broader keyword sets used for confidence
CONFIDENCE_PATTERNS: dict[IntentCategory, re.Pattern[str]] = {
    IntentCategory.DEBUG: _words("debug", "fix", "error", "issue", "problem", "bug", "broken", "fail"),
    IntentCategory.IMPLEMENTATION: _words("create", "build", "implement", "develop", "make", "code", "program"),
    IntentCategory.RESEARCH: _words(
        "analyze", "research", "explore", "investigate", "find", "learn", "what", "how", "why"
    ),
    IntentCategory.DOCUMENTATION: _words("document", "explain", "describe", "write", "summarize", "outline"),
    IntentCategory.PLANNING: _words("plan", "design", "architect", "structure", "organize", "strategy"),
}

# Signal checks, evaluated in order
SIGNAL_PATTERNS: list[tuple[IntentSignal, re.Pattern[str]]] = [
    (IntentSignal.QUESTION, _words("how", "what", "why", "when", "where", "who")),
    (IntentSignal.PROBLEM_SOLVING, _words("debug", "fix", "error", "issue", "problem")),
    (IntentSignal.CREATION, _words("create", "build", "implement", "develop")),
    (IntentSignal.RESEARCH, _words("analyze", "research", "explore", "investigate")),
]


class IntentClassifier:
    """Keyword-pattern classifier over the fixed intent categories."""

    def classify(self, text: str) -> IntentCategory:
        """Primary category of ``text``."""
        for category, pattern in CATEGORY_PATTERNS.items():
            if pattern.search(text):
                return category
        return IntentCategory.GENERAL

    def confidence(self, text: str, category: IntentCategory | str) -> float:
        """
        Confidence that ``text`` belongs to ``category``.

        0.5 plus 0.1 per keyword hit, capped at 0.95. ``general`` and
        texts without hits get 0.5.
        """
        pattern = CONFIDENCE_PATTERNS.get(IntentCategory(category))
        if pattern is None:
            return BASE_CONFIDENCE

        matches = len(pattern.findall(text))
        if not matches:
            return BASE_CONFIDENCE
        return min(BASE_CONFIDENCE + matches * CONFIDENCE_STEP, MAX_CONFIDENCE)

    def signals(self, text: str) -> list[IntentSignal]:
        return [signal for signal, pattern in SIGNAL_PATTERNS if pattern.search(text)]

    def alternatives(self, text: str, primary: IntentCategory) -> list[IntentCategory]:
        """Up to two other categories with confidence above 0.6."""
        found = [
            category
            for category in SCORED_CATEGORIES
            if category != primary and self.confidence(text, category) > ALTERNATIVE_THRESHOLD
        ]
        return found[:MAX_ALTERNATIVES]

    def analyze(self, text: str) -> IntentAnalysis:
        """Full analysis: category, confidence, signals and alternatives."""
        intent = self.classify(text)
        return IntentAnalysis(
            intent=intent,
            confidence=self.confidence(text, intent),
            signals=self.signals(text),
            alternatives=self.alternatives(text, intent),
        )
