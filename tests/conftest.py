# tests/conftest.py
"""
Shared pytest fixtures and configuration for mercury_evolution tests.

Every fixture writes under pytest's ``tmp_path`` so tests never touch the
real persistence root.
"""

import logging

import pytest

from mercury_evolution.engine import EvolutionEngine
from mercury_evolution.heat_store import HeatStore
from mercury_evolution.session_tracker import SessionTracker

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)
logging.getLogger("mercury_evolution").setLevel(logging.DEBUG)


@pytest.fixture
def root(tmp_path):
    """Persistence root for a single test."""
    return tmp_path / "mercury"


@pytest.fixture
def store(root):
    """Lenient heat store."""
    return HeatStore(root, strict=False)


@pytest.fixture
def strict_store(root):
    """Strict heat store."""
    return HeatStore(root, strict=True)


@pytest.fixture
def tracker(store):
    return SessionTracker(store)


@pytest.fixture
def engine(store):
    return EvolutionEngine(store=store, vault_path="/vault")


