# mercury_evolution/engine.py
"""
EvolutionEngine - high-level API over the heat/relevance engine.

Ties the components into one object:
- Session tracking (start, step, end, note-access adapter)
- Intent analysis
- Heat map summaries and vault statistics
- Adaptive context loading (analyze -> rank -> plan)

This is what the tool dispatch layer and the CLI talk to.
"""

from __future__ import annotations

import logging
from pathlib import Path

from mercury_evolution.config import OBSIDIAN_VAULT_PATH
from mercury_evolution.constants import (
    DEFAULT_HEAT_MAP_LIMIT,
    DEFAULT_MAX_TOKENS,
    VAULT_STATS_HOTTEST,
)
from mercury_evolution.heat_store import HeatStore
from mercury_evolution.intent_classifier import IntentClassifier
from mercury_evolution.loading_planner import LoadingPlanner
from mercury_evolution.models import (
    EvolutionResult,
    HeatMapSummary,
    HotNode,
    Interaction,
    InteractionType,
    IntentAnalysis,
    NavigationSession,
    NoteAction,
    ScoringStrategy,
    TrackingResult,
    VaultStats,
)
from mercury_evolution.relevance import RelevanceScorer, get_scorer
from mercury_evolution.session_tracker import SessionTracker

logger = logging.getLogger(__name__)


class EvolutionEngine:
    """
    Facade over HeatStore, SessionTracker, IntentClassifier, scorer and planner.

    Examples:
        ```python
        engine = EvolutionEngine("/tmp/mercury")
        session = await engine.start_tracking("implement heat decay")
        await engine.record_step("notes/heat.md", "note")
        await engine.end_tracking(0.9)

        result = await engine.evolve_context("implement heat decay", max_tokens=5000)
        ```
    """

    def __init__(
        self,
        root: str | Path | None = None,
        store: HeatStore | None = None,
        strict: bool | None = None,
        scoring: ScoringStrategy | str = ScoringStrategy.COMPOSITE,
        scorer: RelevanceScorer | None = None,
        planner: LoadingPlanner | None = None,
        vault_path: str | None = None,
    ) -> None:
        """
        Args:
            root: Persistence root (ignored when ``store`` is given).
            store: Pre-built HeatStore.
            strict: Strict heat-map loading (ignored when ``store`` is given).
            scoring: Scorer to build when ``scorer`` is not given.
            scorer: Custom relevance scorer.
            planner: Custom loading planner.
            vault_path: Note vault reported by vault statistics.
        """
        self._store = store or HeatStore(root, strict=strict)
        self._tracker = SessionTracker(self._store)
        self._classifier = IntentClassifier()
        self._scorer = scorer or get_scorer(scoring)
        self._planner = planner or LoadingPlanner()
        self._vault_path = vault_path or OBSIDIAN_VAULT_PATH

    @property
    def store(self) -> HeatStore:
        return self._store

    @property
    def tracker(self) -> SessionTracker:
        return self._tracker

    @property
    def classifier(self) -> IntentClassifier:
        return self._classifier

    # --- Tracking ---

    async def start_tracking(self, intent: str, replace: bool = False) -> NavigationSession:
        return await self._tracker.start_tracking(intent, replace=replace)

    async def record_step(
        self,
        path: str,
        interaction_type: InteractionType | str = InteractionType.NOTE,
        session_id: str | None = None,
    ) -> Interaction:
        return await self._tracker.record_step(path, interaction_type, session_id=session_id)

    async def end_tracking(self, success: float, session_id: str | None = None) -> TrackingResult:
        return await self._tracker.end_tracking(success, session_id=session_id)

    async def track_note_access(self, action: NoteAction | str, note_path: str) -> Interaction:
        return await self._tracker.track_note_access(action, note_path)

    # --- Analysis ---

    async def analyze_intent(self, text: str) -> IntentAnalysis:
        return self._classifier.analyze(text)

    async def get_heat_map(self, limit: int = DEFAULT_HEAT_MAP_LIMIT) -> HeatMapSummary:
        """Top ``limit`` nodes and ``limit // 2`` edges by heat."""
        heat_map = await self._store.load()
        return HeatMapSummary(
            hot_nodes=[HotNode.from_node(path, node) for path, node in heat_map.hottest_nodes(limit)],
            strong_edges=heat_map.strongest_edges(limit // 2),
            total_paths=len(heat_map.paths),
        )

    async def evolve_context(
        self,
        intent: str,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> EvolutionResult:
        """
        Pick previously successful paths to load for a stated intent.

        Args:
            intent: Free-text description of the current task
            max_tokens: Token budget for the loading plan

        Returns:
            EvolutionResult with the analyzed intent and the loading plan
        """
        analysis = self._classifier.analyze(intent)
        heat_map = await self._store.load()
        ranked = self._scorer.rank(analysis, intent, heat_map)
        plan = self._planner.plan(ranked, max_tokens)

        logger.info(
            f"Evolved context for {analysis.intent.value}: "
            f"{len(plan.loaded_paths)} path(s), {plan.total_tokens} tokens"
        )
        return EvolutionResult(
            intent=analysis.intent,
            confidence=analysis.confidence,
            loaded_paths=plan.loaded_paths,
            total_tokens=plan.total_tokens,
        )

    async def get_vault_stats(self) -> VaultStats:
        """Totals for the heat map plus its three hottest nodes."""
        heat_map = await self._store.load()
        return VaultStats(
            vault_path=str(self._vault_path),
            mercury_path=str(self._store.root),
            total_notes=len(heat_map.nodes),
            total_connections=len(heat_map.edges),
            total_sessions=len(heat_map.paths),
            hottest=[
                HotNode.from_node(path, node) for path, node in heat_map.hottest_nodes(VAULT_STATS_HOTTEST)
            ],
        )
