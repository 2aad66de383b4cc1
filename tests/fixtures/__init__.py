"""
Test fixtures package for histree tests.

- history_tree.py: reference tree that generates valid proofs
- memory_log.py: in-memory LogTransport built on the reference tree

Usage:
    from fixtures import HistoryTree

    def test_something():
        tree = HistoryTree()
        tree.extend(5)
        proof = tree.proof(2)
"""

from .history_tree import (
    EMPTY_ROOT,
    HistoryTree,
    audit_path,
    consistency_path,
    flip_byte,
    tree_root,
)

from .memory_log import InMemoryLog

__all__ = [
    "EMPTY_ROOT",
    "HistoryTree",
    "audit_path",
    "consistency_path",
    "flip_byte",
    "tree_root",
    "InMemoryLog",
]
