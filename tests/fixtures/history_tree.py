"""
Reference history tree used to produce valid proof material.

The verifier never builds trees; tests need a server-side counterpart to
generate inclusion and consistency paths. This follows the RFC 6962
construction: a tree of n leaves splits at the largest power of two
below n, and paths are listed bottom-up.

Positions follow the wire convention: `at` is the index of the last leaf,
so a tree of n leaves is at n - 1.
"""

from __future__ import annotations

from histree.crypto.hashing import leaf_digest, node_digest, sha256
from histree.schemas.log import Anchor, Entry, Proof


EMPTY_ROOT: bytes = sha256(b"")


def _split(n: int) -> int:
    """Largest power of two strictly less than n (n >= 2)."""
    k = 1
    while k << 1 < n:
        k <<= 1
    return k


def tree_root(leaves: list[bytes]) -> bytes:
    if not leaves:
        return EMPTY_ROOT
    if len(leaves) == 1:
        return leaves[0]
    k = _split(len(leaves))
    return node_digest(tree_root(leaves[:k]), tree_root(leaves[k:]))


def audit_path(m: int, leaves: list[bytes]) -> list[bytes]:
    n = len(leaves)
    if n <= 1:
        return []
    k = _split(n)
    if m < k:
        return audit_path(m, leaves[:k]) + [tree_root(leaves[k:])]
    return audit_path(m - k, leaves[k:]) + [tree_root(leaves[:k])]


def _subproof(m: int, leaves: list[bytes], complete: bool) -> list[bytes]:
    n = len(leaves)
    if m == n:
        return [] if complete else [tree_root(leaves)]
    k = _split(n)
    if m <= k:
        return _subproof(m, leaves[:k], complete) + [tree_root(leaves[k:])]
    return _subproof(m - k, leaves[k:], False) + [tree_root(leaves[:k])]


def consistency_path(m: int, leaves: list[bytes]) -> list[bytes]:
    """Witness path from the first m leaves to all of them."""
    if m == 0 or m == len(leaves):
        return []
    return _subproof(m, leaves, True)


class HistoryTree:
    """Append-only list of entries with proof generation."""

    def __init__(self) -> None:
        self.entries: list[Entry] = []
        self.leaves: list[bytes] = []

    def append(self, key: bytes, value: bytes) -> Entry:
        entry = Entry(index=len(self.entries), key=key, value=value)
        self.entries.append(entry)
        self.leaves.append(leaf_digest(entry))
        return entry

    def extend(self, count: int, prefix: bytes = b"key") -> list[Entry]:
        return [
            self.append(prefix + str(len(self.entries)).encode(), b"value-%d" % len(self.entries))
            for _ in range(count)
        ]

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def at(self) -> int:
        return len(self.entries) - 1

    def root(self, at: int | None = None) -> bytes:
        at = self.at if at is None else at
        return tree_root(self.leaves[: at + 1])

    def anchor(self, at: int | None = None) -> Anchor:
        at = self.at if at is None else at
        return Anchor(root_digest=self.root(at), tree_size=at)

    def inclusion_path(self, index: int, at: int | None = None) -> list[bytes]:
        at = self.at if at is None else at
        return audit_path(index, self.leaves[: at + 1])

    def consistency_path(self, old_at: int, at: int | None = None) -> list[bytes]:
        at = self.at if at is None else at
        return consistency_path(old_at + 1, self.leaves[: at + 1])

    def proof(self, index: int, at: int | None = None, anchor_at: int | None = None) -> Proof:
        """
        Build the proof a server would return for entry `index` in the tree
        at `at`, with a consistency path from `anchor_at` when it is > 0.
        """
        at = self.at if at is None else at
        consistency = self.consistency_path(anchor_at, at) if anchor_at else []
        return Proof(
            leaf_digest=self.leaves[index],
            root_digest=self.root(at),
            tree_size_at=at,
            entry_index=index,
            inclusion_path=self.inclusion_path(index, at),
            consistency_path=consistency,
        )


def flip_byte(data: bytes, position: int = 0) -> bytes:
    """Return data with one byte inverted."""
    mutated = bytearray(data)
    mutated[position] ^= 0xFF
    return bytes(mutated)
