# mercury_evolution/exceptions.py
"""
Exception hierarchy for the evolution engine.

Every error carries a machine-checkable ``kind`` so the dispatch layer can
report failures uniformly without inspecting messages.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure kinds."""

    VALIDATION = "validation"
    STATE = "state"
    STORAGE = "storage"
    UNKNOWN_OPERATION = "unknown_operation"


class EvolutionError(Exception):
    """Base class for all engine errors."""

    kind: ErrorKind = ErrorKind.STATE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}


class ValidationError(EvolutionError):
    """A required argument is missing or malformed."""

    kind = ErrorKind.VALIDATION


class StateError(EvolutionError):
    """An operation needs an active session and none is available."""

    kind = ErrorKind.STATE


class SessionNotFound(StateError):
    """The given session handle is not the active session."""

    def __init__(self, session_id: str):
        super().__init__(f"Session not active: {session_id}")
        self.session_id = session_id


class StorageError(EvolutionError):
    """The persistence layer could not complete a write (or a strict read)."""

    kind = ErrorKind.STORAGE


class UnknownOperationError(EvolutionError):
    """Unrecognized tool name or sync direction."""

    kind = ErrorKind.UNKNOWN_OPERATION
