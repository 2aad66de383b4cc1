"""
Consistency Verifier
Proves a newer tree is an append-only extension of a trusted older tree.

Both the trusted root (fr) and the claimed new root (sr) are rebuilt from
one shared witness path, using two cursors: fn for the anchored tree
position and sn for the claimed one.

Seeding rule: when anchor.tree_size + 1 is a power of two, the anchored
tree is itself a complete subtree of the new tree and its root is the
first witness. The server does not send it, so it is prepended here.
The condition is on the anchored position only.
"""
from __future__ import annotations

from histree.crypto.hashing import is_power_of_two, node_digest
from histree.schemas.errors import ConsistencyMismatchException
from histree.schemas.log import Anchor, Proof


def verify_consistency(proof: Proof, anchor: Anchor) -> None:
    """
    Verify that the tree claimed by proof extends the anchored tree.

    Only meaningful for a non-empty anchor (anchor.tree_size > 0); callers
    skip it otherwise.

    Args:
        proof: Proof carrying the claimed root, position and witness path
        anchor: Last trusted root and position for the namespace

    Raises:
        ConsistencyMismatchException: If the new tree does not strictly
            grow, no witness is supplied, or either root fails to rebuild
    """
    first_size = anchor.tree_size
    second_size = proof.tree_size_at
    first_hash = anchor.root_digest
    second_hash = proof.root_digest
    path = proof.consistency_path

    if first_size == second_size and first_hash == second_hash and not path:
        return

    details = {"anchor_tree_size": first_size, "tree_size_at": second_size}

    if first_size >= second_size:
        raise ConsistencyMismatchException(
            "Consistency proof does not verify: tree did not grow",
            details=details,
        )
    if not path:
        raise ConsistencyMismatchException(
            "Consistency proof does not verify: empty consistency path",
            details=details,
        )

    hashes: list[bytes] = []
    if is_power_of_two(first_size + 1):
        hashes.append(first_hash)
    hashes.extend(path)

    fn = first_size
    sn = second_size
    while fn % 2 == 1:
        fn >>= 1
        sn >>= 1

    fr = hashes[0]
    sr = hashes[0]

    for step_hash in hashes[1:]:
        if sn == 0:
            raise ConsistencyMismatchException(
                "Consistency proof does not verify: path longer than tree",
                details=details,
            )

        if fn % 2 == 1 or fn == sn:
            fr = node_digest(step_hash, fr)
            sr = node_digest(step_hash, sr)
            while fn % 2 == 0 and fn != 0:
                fn >>= 1
                sn >>= 1
        else:
            sr = node_digest(sr, step_hash)

        fn >>= 1
        sn >>= 1

    if fr != first_hash or sr != second_hash or sn != 0:
        raise ConsistencyMismatchException(
            "Consistency proof does not verify: root mismatch",
            details={**details, "path_length": len(path)},
        )


__all__ = ["verify_consistency"]
