# mercury_evolution/models/analysis.py
"""Transient results computed from the heat map."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from mercury_evolution.models.enums import (
    IntentCategory,
    IntentSignal,
    ScoreReason,
    SyncDirection,
)
from mercury_evolution.models.heat_map import HeatEdge, HeatNode, KnowledgePath


class IntentAnalysis(BaseModel):
    """Classification of a free-text goal statement."""

    intent: IntentCategory = IntentCategory.GENERAL
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    signals: list[IntentSignal] = Field(default_factory=list)
    alternatives: list[IntentCategory] = Field(default_factory=list)


class ScoredPath(BaseModel):
    """A stored knowledge path annotated with its relevance."""

    path: KnowledgePath
    score: float
    reasons: list[ScoreReason] = Field(default_factory=list)


class PlannedPath(BaseModel):
    """One entry of a loading plan."""

    path: str  # Entry point of the knowledge path
    gradient: float  # Relevance score that earned the slot
    tokens: int
    path_id: str = ""


class LoadingPlan(BaseModel):
    """Token-budgeted selection of ranked paths."""

    loaded_paths: list[PlannedPath] = Field(default_factory=list)
    total_tokens: int = 0
    max_tokens: int = 0
    skipped: list[str] = Field(default_factory=list, description="Path IDs omitted due to budget")


class EvolutionResult(BaseModel):
    """Result of evolving context for a stated intent."""

    intent: IntentCategory
    confidence: float
    loaded_paths: list[PlannedPath] = Field(default_factory=list)
    total_tokens: int = 0


class HotNode(BaseModel):
    """A heat node together with its resource id."""

    path: str
    heat: float
    access_count: int
    last_accessed: datetime

    @classmethod
    def from_node(cls, path: str, node: HeatNode) -> HotNode:
        return cls(
            path=path,
            heat=node.heat,
            access_count=node.access_count,
            last_accessed=node.last_accessed,
        )


class HeatMapSummary(BaseModel):
    """Top of the heat map."""

    hot_nodes: list[HotNode] = Field(default_factory=list)
    strong_edges: list[HeatEdge] = Field(default_factory=list)
    total_paths: int = 0


class VaultStats(BaseModel):
    """Totals for the persistence root and the note vault it tracks."""

    vault_path: str
    mercury_path: str
    total_notes: int = 0
    total_connections: int = 0
    total_sessions: int = 0
    hottest: list[HotNode] = Field(default_factory=list)


class SyncResult(BaseModel):
    """Summary of a sync with the external memory store."""

    direction: SyncDirection
    paths_synced: int = 0
    heat_map_updated: bool = False
    message: str = ""
