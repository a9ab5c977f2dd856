# mercury_evolution/session_tracker.py
"""
Session Tracker - turns navigation steps into knowledge paths.

Handles:
- Starting a session for a stated intent (Idle -> Active)
- Recording steps and driving node/edge heat as they happen
- Ending a session with a success rating (Active -> Idle), which appends a
  KnowledgePath to the heat map
- The note-access adapter that auto-starts a session when none is active

At most one session is active. ``start_tracking`` returns the session as a
handle; passing its id to the step and end calls guards against writing into
a session that has since been replaced or ended.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import secrets
import time

from mercury_evolution.constants import (
    AUTO_START_INTENT,
    HEAT_INCREMENT,
    SESSION_ID_LENGTH,
)
from mercury_evolution.exceptions import SessionNotFound, StateError, ValidationError
from mercury_evolution.heat_store import HeatStore
from mercury_evolution.models import (
    NOTE_ACTION_TYPES,
    Interaction,
    InteractionType,
    KnowledgePath,
    NavigationSession,
    NoteAction,
    PathMetadata,
    SessionStatus,
    TrackingResult,
)
from mercury_evolution.models.base import utcnow

logger = logging.getLogger(__name__)

NO_ACTIVE_SESSION = "No active tracking session"


def generate_id(length: int = SESSION_ID_LENGTH) -> str:
    """Short hex id from the current time and a random value."""
    seed = f"{time.time_ns()}{secrets.randbits(64)}"
    return hashlib.sha256(seed.encode()).hexdigest()[:length]


class SessionTracker:
    """
    Owns the active navigation session.

    Usage::

        tracker = SessionTracker(HeatStore(root))
        session = await tracker.start_tracking("fix the sync bug")
        await tracker.record_step("notes/sync.md", "note", session_id=session.id)
        result = await tracker.end_tracking(0.9, session_id=session.id)
    """

    def __init__(self, store: HeatStore, heat_increment: float = HEAT_INCREMENT) -> None:
        self._store = store
        self._heat_increment = heat_increment
        self._session: NavigationSession | None = None
        self._retired: set[str] = set()
        self._lock = asyncio.Lock()

    @property
    def store(self) -> HeatStore:
        return self._store

    @property
    def active_session(self) -> NavigationSession | None:
        return self._session

    @property
    def is_active(self) -> bool:
        return self._session is not None

    # --- Lifecycle ---

    async def start_tracking(self, intent: str, replace: bool = False) -> NavigationSession:
        """
        Start a session for ``intent``.

        Args:
            intent: What the navigation is trying to accomplish
            replace: Abandon an already-active session instead of failing

        Returns:
            The new active session (its ``id`` is the session handle)

        Raises:
            StateError: A session is already active and ``replace`` is False
        """
        async with self._lock:
            return await self._start(intent, replace)

    async def _start(self, intent: str, replace: bool) -> NavigationSession:
        if self._session is not None:
            if not replace:
                raise StateError(
                    f"Session {self._session.id} is already active; end it or start with replace=True"
                )
            await self._abandon(self._session)

        session_id = generate_id()
        while session_id in self._retired:
            session_id = generate_id()

        session = NavigationSession(id=session_id, intent=intent)
        self._session = session
        await self._store.save_session(session)

        logger.info(f"Started tracking session {session_id}: {intent}")
        return session

    async def _abandon(self, session: NavigationSession) -> None:
        session.status = SessionStatus.ABANDONED
        session.ended_at = utcnow()
        self._retired.add(session.id)
        self._session = None
        await self._store.save_session(session)
        logger.warning(f"Abandoned session {session.id} after {len(session.paths)} step(s)")

    def _require_active(self, session_id: str | None) -> NavigationSession:
        if session_id is not None and session_id in self._retired:
            raise SessionNotFound(session_id)
        if self._session is None:
            raise StateError(NO_ACTIVE_SESSION)
        if session_id is not None and session_id != self._session.id:
            raise SessionNotFound(session_id)
        return self._session

    async def record_step(
        self,
        path: str,
        interaction_type: InteractionType | str = InteractionType.NOTE,
        session_id: str | None = None,
    ) -> Interaction:
        """
        Record a navigation step in the active session.

        Nudges the node heat of ``path`` and, after the first step, the edge
        heat from the previous path. The step joins the session only once
        every write has succeeded.

        Raises:
            StateError: No active session
            SessionNotFound: ``session_id`` is not the active session
            StorageError: A heat or session write failed
        """
        async with self._lock:
            session = self._require_active(session_id)

            previous = session.last_path
            type_value = (
                interaction_type.value if isinstance(interaction_type, InteractionType) else interaction_type
            )
            interaction = Interaction(type=type_value, path=path)

            await self._store.upsert_node(path, self._heat_increment)
            if previous is not None:
                await self._store.upsert_edge(previous, path, self._heat_increment)

            await self._store.save_session(
                session.model_copy(
                    update={
                        "paths": [*session.paths, path],
                        "interactions": [*session.interactions, interaction],
                    }
                )
            )
            session.paths.append(path)
            session.interactions.append(interaction)

            logger.debug(f"Recorded {type_value}: {path} (session {session.id})")
            return interaction

    async def end_tracking(self, success: float, session_id: str | None = None) -> TrackingResult:
        """
        End the active session with a success rating.

        Args:
            success: How well the session went, expected in [0, 1]
            session_id: Optional handle of the session being ended

        Returns:
            TrackingResult with the path length and duration in milliseconds

        Raises:
            StateError: No active session
            SessionNotFound: ``session_id`` is not the active session
        """
        async with self._lock:
            session = self._require_active(session_id)

            now = utcnow()
            duration = session.elapsed_ms(now)

            record = KnowledgePath(
                id=generate_id(),
                sequence=list(session.paths),
                intent=session.intent,
                timestamp=session.start_time,
                duration=duration,
                success=success,
                last_accessed=now,
                access_count=1,
                metadata=PathMetadata(
                    session_id=session.id,
                    interaction_count=len(session.interactions),
                ),
            )

            # Idle from here on, even if the writes below fail
            self._session = None
            self._retired.add(session.id)
            session.status = SessionStatus.ENDED
            session.ended_at = now

            heat_updated = await self._store.append_path(record)
            await self._store.save_session(session)

            logger.info(
                f"Ended session {session.id}: {len(session.paths)} step(s), "
                f"{duration}ms, success={success}"
            )
            return TrackingResult(
                session_id=session.id,
                path_length=len(session.paths),
                duration=duration,
                heat_updated=heat_updated,
            )

    # --- Note-access adapter ---

    async def track_note_access(self, action: NoteAction | str, note_path: str) -> Interaction:
        """
        Record a note access reported by the notes system.

        Starts a ``brain-navigation`` session when none is active, then maps
        the action onto an interaction type and records the step.

        Raises:
            ValidationError: Missing/unknown action or empty path
        """
        if not action:
            raise ValidationError("action is required")
        if not note_path or not note_path.strip():
            raise ValidationError("path is required")
        try:
            note_action = NoteAction(action)
        except ValueError as e:
            allowed = ", ".join(a.value for a in NoteAction)
            raise ValidationError(f"Unknown action: {action} (expected one of {allowed})") from e

        clean_path = note_path[1:] if note_path.startswith("/") else note_path

        async with self._lock:
            if self._session is None:
                await self._start(AUTO_START_INTENT, replace=False)

        interaction = await self.record_step(clean_path, NOTE_ACTION_TYPES[note_action])
        logger.info(f"Tracked note access: {note_action.value} {clean_path}")
        return interaction
