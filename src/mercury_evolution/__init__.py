# mercury_evolution/__init__.py
"""
Mercury Evolution - heat/relevance engine for knowledge navigation.

Records navigation sessions through a body of notes, aggregates them into a
heat map over notes and transitions, and ranks previously successful paths
for a new stated intent under a token budget.

Usage:
    from mercury_evolution import EvolutionEngine

    engine = EvolutionEngine("/tmp/mercury")
    session = await engine.start_tracking("debug the sync job")
    await engine.record_step("notes/sync.md", "note")
    await engine.end_tracking(0.8)

    result = await engine.evolve_context("debug the sync job")
"""

from mercury_evolution.brain_sync import BrainMemory, BrainSync
from mercury_evolution.engine import EvolutionEngine
from mercury_evolution.exceptions import (
    ErrorKind,
    EvolutionError,
    SessionNotFound,
    StateError,
    StorageError,
    UnknownOperationError,
    ValidationError,
)
from mercury_evolution.heat_store import HeatStore
from mercury_evolution.intent_classifier import IntentClassifier
from mercury_evolution.loading_planner import LoadingPlanner, LoadingPlannerConfig
from mercury_evolution.relevance import (
    CompositeRelevanceScorer,
    HeatSuccessScorer,
    RelevanceScorer,
    get_scorer,
)
from mercury_evolution.session_tracker import SessionTracker
from mercury_evolution.tools import EvolutionToolHandler, ToolResponse

__version__ = "0.1.0"

__all__ = [
    # Engine
    "EvolutionEngine",
    "HeatStore",
    "SessionTracker",
    "IntentClassifier",
    "LoadingPlanner",
    "LoadingPlannerConfig",
    # Scoring
    "RelevanceScorer",
    "CompositeRelevanceScorer",
    "HeatSuccessScorer",
    "get_scorer",
    # Sync and tools
    "BrainMemory",
    "BrainSync",
    "EvolutionToolHandler",
    "ToolResponse",
    # Errors
    "ErrorKind",
    "EvolutionError",
    "SessionNotFound",
    "StateError",
    "StorageError",
    "UnknownOperationError",
    "ValidationError",
]
