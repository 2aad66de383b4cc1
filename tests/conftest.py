"""
Pytest configuration and shared fixtures for histree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_tree = importlib.import_module("fixtures.history_tree")
_log = importlib.import_module("fixtures.memory_log")

HistoryTree = _tree.HistoryTree
InMemoryLog = _log.InMemoryLog


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

_HISTREE_ENV = (
    "HISTREE_NAMESPACE",
    "HISTREE_ANCHOR_FILE",
    "HISTREE_ANCHOR_AUTOSAVE",
    "HISTREE_LOG_LEVEL",
    "HISTREE_LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_histree_env(monkeypatch):
    """Keep tests independent of HISTREE_* variables in the environment."""
    for name in _HISTREE_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def history_tree():
    """Provide an empty reference HistoryTree."""
    return HistoryTree()


@pytest.fixture
def seven_leaf_tree():
    """Provide a HistoryTree holding seven entries (positions 0..6)."""
    tree = HistoryTree()
    tree.extend(7)
    return tree


@pytest.fixture
def memory_log():
    """Provide an honest in-memory log server."""
    return InMemoryLog()


@pytest.fixture
def anchor_file(tmp_path):
    """Path for a persisted trust anchor blob inside a temp directory."""
    return tmp_path / "anchors" / "anchors.json"


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "e2e: marks end-to-end client tests"
    )
    config.addinivalue_line(
        "markers", "cli: marks tests that drive the command-line entry point"
    )
