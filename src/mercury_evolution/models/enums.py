# mercury_evolution/models/enums.py
"""Enums for the evolution engine."""

from enum import Enum


class IntentCategory(str, Enum):
    """Closed set of intent categories, in classification priority order."""

    DEBUG = "debug"
    IMPLEMENTATION = "implementation"
    RESEARCH = "research"
    DOCUMENTATION = "documentation"
    PLANNING = "planning"
    GENERAL = "general"


class IntentSignal(str, Enum):
    """Non-exclusive tags describing the shape of a request."""

    QUESTION = "question"
    PROBLEM_SOLVING = "problem-solving"
    CREATION = "creation"
    RESEARCH = "research"


class InteractionType(str, Enum):
    """How a resource was reached during a session."""

    NOTE = "note"
    SEARCH = "search"
    LINK = "link"
    CREATE = "create"


class NoteAction(str, Enum):
    """Actions reported by the note-access adapter."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    LIST = "list"


class SessionStatus(str, Enum):
    """Lifecycle of a navigation session."""

    ACTIVE = "active"
    ENDED = "ended"
    ABANDONED = "abandoned"  # Replaced by a newer session before ending


class SyncDirection(str, Enum):
    """Direction of a sync with the external memory store."""

    BRAIN_TO_MERCURY = "brain-to-mercury"
    MERCURY_TO_BRAIN = "mercury-to-brain"
    BIDIRECTIONAL = "bidirectional"


class ScoreReason(str, Enum):
    """Contributions to a composite relevance score."""

    INTENT_MATCH = "intent-match"
    SIMILAR_INTENT = "similar-intent"
    KEYWORD_OVERLAP = "keyword-overlap"
    SAME_CATEGORY = "same-category"
    HEAT_SUCCESS = "heat-success"


class ScoringStrategy(str, Enum):
    """Available relevance scorers."""

    COMPOSITE = "composite"  # Multi-factor score (default)
    HEAT_SUCCESS = "heat_success"  # heat x success over exact intent matches


# Note actions map onto interaction types
NOTE_ACTION_TYPES: dict[NoteAction, InteractionType] = {
    NoteAction.CREATE: InteractionType.CREATE,
    NoteAction.READ: InteractionType.NOTE,
    NoteAction.UPDATE: InteractionType.NOTE,
    NoteAction.DELETE: InteractionType.NOTE,
    NoteAction.LIST: InteractionType.SEARCH,
}

# Categories that carry keyword patterns (GENERAL is the fallback)
SCORED_CATEGORIES: list[IntentCategory] = [c for c in IntentCategory if c != IntentCategory.GENERAL]
