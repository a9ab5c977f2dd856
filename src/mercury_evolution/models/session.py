# mercury_evolution/models/session.py
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from mercury_evolution.models.base import DocumentModel, EpochMillis, utcnow
from mercury_evolution.models.enums import SessionStatus


class Interaction(DocumentModel):
    """A single step recorded in a session."""

    type: str
    path: str
    timestamp: EpochMillis = Field(default_factory=utcnow)


class NavigationSession(DocumentModel):
    """
    One bounded episode of navigation carrying a stated intent.

    Returned by ``SessionTracker.start_tracking`` and usable as a handle
    for the step and end calls.
    """

    id: str
    intent: str
    start_time: EpochMillis = Field(default_factory=utcnow)
    paths: list[str] = Field(default_factory=list)
    interactions: list[Interaction] = Field(default_factory=list)
    status: SessionStatus = SessionStatus.ACTIVE
    ended_at: EpochMillis | None = None

    @property
    def last_path(self) -> str | None:
        return self.paths[-1] if self.paths else None

    def elapsed_ms(self, now: datetime | None = None) -> int:
        """Milliseconds since the session started."""
        now = now or utcnow()
        return int((now - self.start_time).total_seconds() * 1000)


class TrackingResult(BaseModel):
    """Outcome of ending a session."""

    session_id: str
    path_length: int
    duration: int  # milliseconds
    heat_updated: bool
