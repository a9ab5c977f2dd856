# mercury_evolution/brain_sync.py
"""
Sync between the evolution engine and an external memory store ("Brain").

The store itself is an external collaborator. Without a memory source the
brain-to-mercury direction reports that nothing was synced; with one, the
memories are segmented into sessions and appended as knowledge paths.
mercury-to-brain only reports what would be exported.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from pydantic import BaseModel, Field

from mercury_evolution.config import BRAIN_DB_PATH
from mercury_evolution.constants import (
    INFERRED_SUCCESS,
    NEUTRAL_SUCCESS,
    SESSION_GAP_MS,
    SYNC_EXPORT_LIMIT,
)
from mercury_evolution.engine import EvolutionEngine
from mercury_evolution.exceptions import UnknownOperationError
from mercury_evolution.models import (
    IntentCategory,
    KnowledgePath,
    PathMetadata,
    SyncDirection,
    SyncResult,
)
from mercury_evolution.session_tracker import generate_id

logger = logging.getLogger(__name__)

SUCCESS_MARKER = "success"


class BrainMemory(BaseModel):
    """One memory entry read from the external store."""

    key: str
    timestamp: datetime
    type: str | None = None
    context: str | None = None
    value: str | None = None


class ExtractedSession(BaseModel):
    """A run of memories close enough in time to count as one session."""

    paths: list[str] = Field(default_factory=list)
    intent: IntentCategory = IntentCategory.GENERAL
    start_time: datetime
    last_timestamp: datetime
    success: float = NEUTRAL_SUCCESS

    def to_knowledge_path(self) -> KnowledgePath:
        duration = int((self.last_timestamp - self.start_time).total_seconds() * 1000)
        return KnowledgePath(
            id=generate_id(),
            sequence=list(self.paths),
            intent=self.intent.value,
            timestamp=self.start_time,
            duration=duration,
            success=self.success,
            last_accessed=self.last_timestamp,
            metadata=PathMetadata(interaction_count=len(self.paths), source="brain-sync"),
        )


MemorySource = Callable[[], Awaitable[list[BrainMemory]]]


def infer_intent(memory: BrainMemory) -> IntentCategory:
    """Guess the intent of a memory from its type and context."""
    if memory.type == "error" or memory.context == "debugging":
        return IntentCategory.DEBUG
    if memory.type == "code" or memory.context == "implementation":
        return IntentCategory.IMPLEMENTATION
    if memory.type == "research" or memory.context == "analysis":
        return IntentCategory.RESEARCH
    if memory.type == "documentation":
        return IntentCategory.DOCUMENTATION
    return IntentCategory.GENERAL


def extract_sessions(memories: list[BrainMemory], gap_ms: int = SESSION_GAP_MS) -> list[ExtractedSession]:
    """
    Split memories into sessions at gaps longer than ``gap_ms``.

    Single-memory sessions are dropped. A session whose memories mention
    "success" is rated 0.8, otherwise 0.5.
    """
    sessions: list[ExtractedSession] = []
    current: ExtractedSession | None = None

    for memory in memories:
        if current is None or _gap_ms(current.last_timestamp, memory.timestamp) > gap_ms:
            if current is not None and len(current.paths) > 1:
                sessions.append(current)
            current = ExtractedSession(
                intent=infer_intent(memory),
                start_time=memory.timestamp,
                last_timestamp=memory.timestamp,
            )

        current.paths.append(memory.key)
        current.last_timestamp = memory.timestamp
        if memory.value and SUCCESS_MARKER in memory.value:
            current.success = INFERRED_SUCCESS

    if current is not None and len(current.paths) > 1:
        sessions.append(current)

    return sessions


def _gap_ms(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() * 1000


class BrainSync:
    """Moves learned navigation between the engine and the external store."""

    def __init__(
        self,
        engine: EvolutionEngine,
        memory_source: MemorySource | None = None,
        db_path: str = BRAIN_DB_PATH,
    ) -> None:
        self._engine = engine
        self._memory_source = memory_source
        self.db_path = db_path

    async def sync(self, direction: SyncDirection | str = SyncDirection.BRAIN_TO_MERCURY) -> SyncResult:
        """
        Sync in the given direction.

        Raises:
            UnknownOperationError: ``direction`` is not a SyncDirection
        """
        try:
            direction = SyncDirection(direction)
        except ValueError as e:
            raise UnknownOperationError(f"Unknown sync direction: {direction}") from e

        if direction == SyncDirection.BRAIN_TO_MERCURY:
            return await self._brain_to_mercury()
        if direction == SyncDirection.MERCURY_TO_BRAIN:
            return await self._mercury_to_brain()

        b2m = await self._brain_to_mercury()
        m2b = await self._mercury_to_brain()
        return SyncResult(
            direction=SyncDirection.BIDIRECTIONAL,
            paths_synced=b2m.paths_synced + m2b.paths_synced,
            heat_map_updated=True,
            message=f"{b2m.message}; {m2b.message}",
        )

    async def _brain_to_mercury(self) -> SyncResult:
        if self._memory_source is None:
            logger.info(f"Brain to Mercury sync has no memory source for {self.db_path}")
            return SyncResult(
                direction=SyncDirection.BRAIN_TO_MERCURY,
                paths_synced=0,
                heat_map_updated=False,
                message="Brain sync not yet implemented - requires Brain API",
            )

        memories = await self._memory_source()
        sessions = extract_sessions(memories)
        for session in sessions:
            await self._engine.store.append_path(session.to_knowledge_path())

        logger.info(f"Imported {len(sessions)} session(s) from {len(memories)} Brain memories")
        return SyncResult(
            direction=SyncDirection.BRAIN_TO_MERCURY,
            paths_synced=len(sessions),
            heat_map_updated=bool(sessions),
            message=f"Imported {len(sessions)} sessions from Brain",
        )

    async def _mercury_to_brain(self) -> SyncResult:
        summary = await self._engine.get_heat_map(SYNC_EXPORT_LIMIT)
        count = len(summary.hot_nodes)
        logger.info(f"Mercury to Brain sync would export {count} hot nodes")
        return SyncResult(
            direction=SyncDirection.MERCURY_TO_BRAIN,
            paths_synced=count,
            heat_map_updated=False,
            message=f"Would export to Brain: {count} hot nodes",
        )
