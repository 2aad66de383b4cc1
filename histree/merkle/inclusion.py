"""
Inclusion Verifier
Proves a single entry is present at a specific position in a tree.

Algorithm (audit path walk):
1. Reject if i > at, or if at > 0 and the path is empty
2. Start with current = leaf digest
3. For each path element p (bottom-up):
   - If i is even and i != at: current = node(current, p)
   - Otherwise:                current = node(p, current)
   - Halve both i and at
4. Accept only if i == at and current equals the claimed root

When i == at and i is even, the node is the rightmost one at its level
and has no right sibling; the path element is its left neighbour higher
up, so it is threaded through as the right-hand input.
"""
from __future__ import annotations

from histree.crypto.hashing import node_digest
from histree.schemas.errors import InclusionMismatchException
from histree.schemas.log import Proof


def verify_inclusion(proof: Proof) -> None:
    """
    Verify that proof.leaf_digest sits at proof.entry_index in the tree
    whose root is proof.root_digest.

    Args:
        proof: Proof carrying the leaf digest, audit path and claimed root

    Raises:
        InclusionMismatchException: If the preconditions fail or the path
            does not reconstruct the claimed root
    """
    i = proof.entry_index
    at = proof.tree_size_at

    if i > at:
        raise InclusionMismatchException(
            "Inclusion proof does not verify: entry index exceeds tree position",
            details={"entry_index": i, "tree_size_at": at},
        )
    if at > 0 and not proof.inclusion_path:
        raise InclusionMismatchException(
            "Inclusion proof does not verify: empty inclusion path",
            details={"entry_index": i, "tree_size_at": at},
        )

    current = proof.leaf_digest
    for sibling in proof.inclusion_path:
        if i % 2 == 0 and i != at:
            current = node_digest(current, sibling)
        else:
            current = node_digest(sibling, current)
        i //= 2
        at //= 2

    if i != at or current != proof.root_digest:
        raise InclusionMismatchException(
            "Inclusion proof does not verify: root mismatch",
            details={
                "entry_index": proof.entry_index,
                "tree_size_at": proof.tree_size_at,
                "path_length": len(proof.inclusion_path),
            },
        )


__all__ = ["verify_inclusion"]
