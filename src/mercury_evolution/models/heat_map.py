# mercury_evolution/models/heat_map.py
"""
Heat map records.

The heat map is the aggregate root of everything learned from navigation:
- HeatNode: per-resource heat, nudged up on each visit
- HeatEdge: per-transition heat between consecutive resources
- KnowledgePath: a finished session's sequence and outcome

On disk, nodes, edges and intents are stored as lists of ``[key, record]``
pairs with camelCase records (edges as ``{"from", "to", ...}``); in memory
they are plain dicts keyed by resource id / edge key.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    Field,
    SerializationInfo,
    field_serializer,
    field_validator,
)

from mercury_evolution.constants import (
    EDGE_SEPARATOR,
    HEAT_MAP_VERSION,
    INITIAL_PATH_HEAT,
    MAX_HEAT,
)
from mercury_evolution.models.base import DocumentModel, EpochMillis, utcnow


def clamp_heat(value: float) -> float:
    """Keep heat inside [0, MAX_HEAT]."""
    return max(0.0, min(MAX_HEAT, value))


def edge_key(source: str, target: str) -> str:
    """Directional key for the edge ``source -> target``."""
    return f"{source}{EDGE_SEPARATOR}{target}"


class HeatNode(DocumentModel):
    """Heat accumulated by a single resource."""

    heat: float = Field(default=0.0, ge=0.0, le=MAX_HEAT)
    last_accessed: EpochMillis = Field(default_factory=utcnow)
    access_count: int = 0
    avg_dwell_time: float = 0.0  # Reserved

    def nudge(self, increment: float, now: datetime | None = None) -> None:
        """Register a visit."""
        self.heat = clamp_heat(self.heat + increment)
        self.last_accessed = now or utcnow()
        self.access_count += 1


class HeatEdge(DocumentModel):
    """Heat accumulated by a transition between two resources."""

    source: str = Field(alias="from")
    target: str = Field(alias="to")
    heat: float = Field(default=0.0, ge=0.0, le=MAX_HEAT)
    traversal_count: int = 0
    last_traversed: EpochMillis = Field(default_factory=utcnow)

    @property
    def key(self) -> str:
        return edge_key(self.source, self.target)

    def nudge(self, increment: float, now: datetime | None = None) -> None:
        """Register a traversal."""
        self.heat = clamp_heat(self.heat + increment)
        self.last_traversed = now or utcnow()
        self.traversal_count += 1


class PathMetadata(DocumentModel):
    """Links a knowledge path back to where it came from."""

    session_id: str | None = None
    interaction_count: int = 0
    source: str = "session"  # "session" or "brain-sync"


class KnowledgePath(DocumentModel):
    """Finalized record of a completed session."""

    id: str
    sequence: list[str] = Field(default_factory=list)
    intent: str
    timestamp: EpochMillis = Field(default_factory=utcnow)
    duration: int = 0  # milliseconds
    success: float = 0.0  # Expected in [0, 1]; stored as given
    heat: float = INITIAL_PATH_HEAT
    last_accessed: EpochMillis = Field(default_factory=utcnow)
    access_count: int = 1
    metadata: PathMetadata = Field(default_factory=PathMetadata)

    @property
    def entry_point(self) -> str | None:
        """First resource visited, used as the path's handle in plans."""
        return self.sequence[0] if self.sequence else None


def _pairs_to_dict(value: Any) -> Any:
    """Accept either a mapping or a list of ``[key, record]`` pairs."""
    if isinstance(value, list):
        return {key: record for key, record in value}
    return value


class HeatMap(DocumentModel):
    """Aggregate root: paths, node heat and edge heat for one persistence root."""

    paths: list[KnowledgePath] = Field(default_factory=list)
    nodes: dict[str, HeatNode] = Field(default_factory=dict)
    edges: dict[str, HeatEdge] = Field(default_factory=dict)
    intents: dict[str, Any] = Field(default_factory=dict)  # Reserved
    last_maintenance: EpochMillis = Field(default_factory=utcnow)
    version: str = HEAT_MAP_VERSION

    @field_validator("nodes", "edges", "intents", mode="before")
    @classmethod
    def _accept_pairs(cls, value: Any) -> Any:
        if value is None:
            return {}
        return _pairs_to_dict(value)

    @field_validator("paths", mode="before")
    @classmethod
    def _paths_default(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("last_maintenance", mode="before")
    @classmethod
    def _maintenance_default(cls, value: Any) -> Any:
        return value or utcnow()

    @field_validator("version", mode="before")
    @classmethod
    def _version_default(cls, value: Any) -> Any:
        return value or HEAT_MAP_VERSION

    @field_serializer("nodes", "edges", "intents")
    def _as_pairs(self, value: dict[str, Any], info: SerializationInfo) -> list[list[Any]]:
        mode = "json" if info.mode_is_json() else "python"
        pairs: list[list[Any]] = []
        for key, record in value.items():
            if isinstance(record, BaseModel):
                record = record.model_dump(mode=mode, by_alias=bool(info.by_alias))
            pairs.append([key, record])
        return pairs

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> HeatMap:
        """Build from a parsed heat-map document."""
        return cls.model_validate(data)

    def to_document(self) -> dict[str, Any]:
        """Serialize to the on-disk document layout."""
        return self.model_dump(mode="json", by_alias=True)

    def hottest_nodes(self, limit: int) -> list[tuple[str, HeatNode]]:
        """Nodes ordered by heat, hottest first."""
        ranked = sorted(self.nodes.items(), key=lambda item: item[1].heat, reverse=True)
        return ranked[: max(0, limit)]

    def strongest_edges(self, limit: int) -> list[HeatEdge]:
        """Edges ordered by heat, strongest first."""
        ranked = sorted(self.edges.values(), key=lambda edge: edge.heat, reverse=True)
        return ranked[: max(0, limit)]
