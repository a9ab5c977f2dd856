# tests/helpers.py
"""Builders shared across test modules."""

from mercury_evolution.models import HeatMap, KnowledgePath


def make_path(
    path_id: str = "p1",
    intent: str = "implementation",
    success: float = 0.9,
    sequence: list[str] | None = None,
    heat: float = 1.0,
) -> KnowledgePath:
    """Knowledge path with sensible defaults."""
    return KnowledgePath(
        id=path_id,
        intent=intent,
        success=success,
        sequence=sequence if sequence is not None else ["a.md", "b.md"],
        heat=heat,
    )


def make_heat_map(*paths: KnowledgePath) -> HeatMap:
    return HeatMap(paths=list(paths))
