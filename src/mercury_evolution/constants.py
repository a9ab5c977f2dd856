# mercury_evolution/constants.py
"""Shared constants for the evolution engine.

Centralizes the heat, budget and layout numbers so every component agrees.
"""

from __future__ import annotations

# Heat map
HEAT_INCREMENT = 0.1
MAX_HEAT = 1.0
INITIAL_PATH_HEAT = 1.0
MAX_STORED_PATHS = 1000
HEAT_MAP_VERSION = "1.0.0"
EDGE_SEPARATOR = "→"

# Persistence layout (relative to the root)
EVOLUTION_DIR = "evolution"
SESSIONS_DIR = "sessions"
HEAT_MAP_FILENAME = "heat-map.json"

# Sessions
SESSION_ID_LENGTH = 12
AUTO_START_INTENT = "brain-navigation"

# Loading plans
TOKENS_PER_STEP = 500
DEFAULT_MAX_TOKENS = 30000
PLAN_STOP_RATIO = 0.8

# Relevance
MIN_SUCCESS = 0.5
MIN_RELEVANCE = 0.3
MIN_SIMILARITY = 0.3
EXACT_MATCH_WEIGHT = 1.0
SIMILARITY_WEIGHT = 0.8
OVERLAP_WEIGHT = 0.6
CATEGORY_WEIGHT = 0.5

# Intent confidence
BASE_CONFIDENCE = 0.5
CONFIDENCE_STEP = 0.1
MAX_CONFIDENCE = 0.95
ALTERNATIVE_THRESHOLD = 0.6
MAX_ALTERNATIVES = 2

# Heat map summaries
DEFAULT_HEAT_MAP_LIMIT = 10
SYNC_EXPORT_LIMIT = 20
VAULT_STATS_HOTTEST = 3

# Brain sync session segmentation
SESSION_GAP_MS = 30 * 60 * 1000
INFERRED_SUCCESS = 0.8
NEUTRAL_SUCCESS = 0.5
