# mercury_evolution/models/__init__.py
"""
Core models for the evolution engine.
"""

from mercury_evolution.models.analysis import (
    EvolutionResult,
    HeatMapSummary,
    HotNode,
    IntentAnalysis,
    LoadingPlan,
    PlannedPath,
    ScoredPath,
    SyncResult,
    VaultStats,
)
from mercury_evolution.models.enums import (
    NOTE_ACTION_TYPES,
    SCORED_CATEGORIES,
    IntentCategory,
    IntentSignal,
    InteractionType,
    NoteAction,
    ScoreReason,
    ScoringStrategy,
    SessionStatus,
    SyncDirection,
)
from mercury_evolution.models.heat_map import (
    HeatEdge,
    HeatMap,
    HeatNode,
    KnowledgePath,
    PathMetadata,
    clamp_heat,
    edge_key,
)
from mercury_evolution.models.session import (
    Interaction,
    NavigationSession,
    TrackingResult,
)

__all__ = [
    # Enums
    "IntentCategory",
    "IntentSignal",
    "InteractionType",
    "NoteAction",
    "ScoreReason",
    "ScoringStrategy",
    "SessionStatus",
    "SyncDirection",
    "NOTE_ACTION_TYPES",
    "SCORED_CATEGORIES",
    # Heat map
    "HeatEdge",
    "HeatMap",
    "HeatNode",
    "KnowledgePath",
    "PathMetadata",
    "clamp_heat",
    "edge_key",
    # Sessions
    "Interaction",
    "NavigationSession",
    "TrackingResult",
    # Results
    "EvolutionResult",
    "HeatMapSummary",
    "HotNode",
    "IntentAnalysis",
    "LoadingPlan",
    "PlannedPath",
    "ScoredPath",
    "SyncResult",
    "VaultStats",
]
