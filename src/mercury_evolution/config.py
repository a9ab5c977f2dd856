# mercury_evolution/config.py
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Persistence root for the heat map and session documents
DEFAULT_VAULT_PATH = Path.home() / ".claude-brain" / "mercury-evolution"
MERCURY_VAULT_PATH = os.getenv("MERCURY_VAULT_PATH")

# Note vault reported by vault statistics
OBSIDIAN_VAULT_PATH = os.getenv("OBSIDIAN_VAULT_PATH", "./vault")

# External memory store read by the sync adapter
BRAIN_DB_PATH = os.getenv(
    "BRAIN_DB_PATH",
    str(Path.home() / "mcp" / "brain-data" / "brain.db"),
)

# Strict loading raises on a corrupt heat map instead of starting empty
STRICT_LOAD = os.getenv("MERCURY_STRICT_LOAD", "").strip().lower() in ("1", "true", "yes")


def resolve_root(explicit: str | Path | None = None) -> Path:
    """Resolve the persistence root: explicit argument, then environment, then default."""
    if explicit:
        return Path(explicit).expanduser()
    if MERCURY_VAULT_PATH:
        return Path(MERCURY_VAULT_PATH).expanduser()
    return DEFAULT_VAULT_PATH
