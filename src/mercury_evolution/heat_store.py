# mercury_evolution/heat_store.py
"""
Heat map persistence.

The HeatStore owns the single heat-map document under a persistence root:

    <root>/evolution/heat-map.json   nodes, edges, recorded paths
    <root>/sessions/<session_id>.json   live session documents

Every mutation is a load -> mutate -> save cycle. All cycles go through one
``asyncio.Lock``, so the store is the single writer for its document within a
process and concurrent steps cannot overwrite each other's updates.

Reads are lenient by default: a missing or corrupt document yields an empty
HeatMap (with a warning for corruption). Strict mode raises StorageError
instead, so corruption can be detected rather than masked.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from mercury_evolution.config import STRICT_LOAD, resolve_root
from mercury_evolution.constants import (
    EVOLUTION_DIR,
    HEAT_INCREMENT,
    HEAT_MAP_FILENAME,
    MAX_STORED_PATHS,
    SESSIONS_DIR,
)
from mercury_evolution.exceptions import StorageError
from mercury_evolution.models import (
    HeatEdge,
    HeatMap,
    HeatNode,
    KnowledgePath,
    NavigationSession,
    clamp_heat,
    edge_key,
)
from mercury_evolution.models.base import utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _write_json_atomic(path: Path, data: Any) -> None:
    """Write JSON next to ``path`` and swap it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2, ensure_ascii=False)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class HeatStore:
    """
    Persistence and serialized read-modify-write for the heat map.

    Usage::

        store = HeatStore("/tmp/mercury")
        await store.upsert_node("notes/a.md")
        heat_map = await store.load()
    """

    def __init__(
        self,
        root: str | Path | None = None,
        strict: bool | None = None,
        max_paths: int = MAX_STORED_PATHS,
    ) -> None:
        """
        Args:
            root: Persistence root. Defaults to MERCURY_VAULT_PATH or the per-user location.
            strict: Raise StorageError on corrupt documents instead of starting empty.
            max_paths: Number of most recent knowledge paths kept.
        """
        self._root = resolve_root(root)
        self._strict = STRICT_LOAD if strict is None else strict
        self._max_paths = max_paths
        self._lock = asyncio.Lock()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def heat_map_path(self) -> Path:
        return self._root / EVOLUTION_DIR / HEAT_MAP_FILENAME

    @property
    def sessions_dir(self) -> Path:
        return self._root / SESSIONS_DIR

    # --- Document I/O ---

    async def load(self) -> HeatMap:
        """Read the heat map, or an empty default when there is none."""
        return await asyncio.to_thread(self._read_heat_map)

    async def save(self, heat_map: HeatMap) -> None:
        """Overwrite the whole heat-map document."""
        async with self._lock:
            await self._write_heat_map(heat_map)

    async def update(self, mutator: Callable[[HeatMap], T]) -> T:
        """
        Run one serialized load -> mutate -> save cycle.

        Args:
            mutator: Called with the loaded HeatMap; may modify it in place.

        Returns:
            Whatever the mutator returned.
        """
        async with self._lock:
            heat_map = await asyncio.to_thread(self._read_heat_map)
            result = mutator(heat_map)
            await self._write_heat_map(heat_map)
            return result

    def _read_heat_map(self) -> HeatMap:
        path = self.heat_map_path
        if not path.exists():
            return HeatMap()

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("heat map document is not an object")
            return HeatMap.from_document(data)
        except (OSError, ValueError) as e:
            if self._strict:
                raise StorageError(f"Failed to read heat map {path}: {e}") from e
            logger.warning(f"Unreadable heat map at {path}, starting empty: {e}")
            return HeatMap()

    async def _write_heat_map(self, heat_map: HeatMap) -> None:
        path = self.heat_map_path
        try:
            await asyncio.to_thread(_write_json_atomic, path, heat_map.to_document())
        except OSError as e:
            raise StorageError(f"Failed to write heat map {path}: {e}") from e

    # --- Mutations ---

    async def upsert_node(self, node_id: str, increment: float = HEAT_INCREMENT) -> HeatNode:
        """Create a node or nudge its heat, clamped to [0, 1]."""

        def mutate(heat_map: HeatMap) -> HeatNode:
            now = utcnow()
            node = heat_map.nodes.get(node_id)
            if node is None:
                node = HeatNode(heat=clamp_heat(increment), last_accessed=now, access_count=1)
                heat_map.nodes[node_id] = node
            else:
                node.nudge(increment, now)
            return node.model_copy()

        node = await self.update(mutate)
        logger.debug(f"Node heat {node_id}: {node.heat:.2f} ({node.access_count} accesses)")
        return node

    async def upsert_edge(
        self,
        source: str,
        target: str,
        increment: float = HEAT_INCREMENT,
    ) -> HeatEdge:
        """Create an edge or nudge its heat, clamped to [0, 1]."""
        key = edge_key(source, target)

        def mutate(heat_map: HeatMap) -> HeatEdge:
            now = utcnow()
            edge = heat_map.edges.get(key)
            if edge is None:
                edge = HeatEdge(
                    source=source,
                    target=target,
                    heat=clamp_heat(increment),
                    traversal_count=1,
                    last_traversed=now,
                )
                heat_map.edges[key] = edge
            else:
                edge.nudge(increment, now)
            return edge.model_copy()

        edge = await self.update(mutate)
        logger.debug(f"Edge heat {key}: {edge.heat:.2f} ({edge.traversal_count} traversals)")
        return edge

    async def append_path(self, record: KnowledgePath) -> bool:
        """Append a knowledge path, keeping only the most recent ``max_paths``."""

        def mutate(heat_map: HeatMap) -> int:
            heat_map.paths.append(record)
            evicted = len(heat_map.paths) - self._max_paths
            if evicted > 0:
                heat_map.paths = heat_map.paths[-self._max_paths :]
            return max(0, evicted)

        evicted = await self.update(mutate)
        if evicted:
            logger.debug(f"Evicted {evicted} oldest knowledge path(s)")
        return True

    # --- Session documents ---

    def session_path(self, session_id: str) -> Path:
        return self.sessions_dir / f"{session_id}.json"

    async def save_session(self, session: NavigationSession) -> None:
        """Write the live session document."""
        path = self.session_path(session.id)
        try:
            await asyncio.to_thread(_write_json_atomic, path, session.model_dump(mode="json", by_alias=True))
        except OSError as e:
            raise StorageError(f"Failed to write session {session.id}: {e}") from e

    async def load_session(self, session_id: str) -> NavigationSession | None:
        """Read a session document, or None when missing or unreadable."""
        path = self.session_path(session_id)

        def read() -> NavigationSession | None:
            if not path.exists():
                return None
            try:
                return NavigationSession.model_validate_json(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                if self._strict:
                    raise StorageError(f"Failed to read session {session_id}: {e}") from e
                logger.warning(f"Unreadable session document {path}: {e}")
                return None

        return await asyncio.to_thread(read)
