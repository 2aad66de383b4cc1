"""
Consistency Verifier Unit Tests
Tests for histree/merkle/consistency.py

Tests:
- every (anchor, new) position pair from the reference tree verifies
- seeding when the anchored leaf count is a power of two
- non-strict growth, empty path and tampering are rejected
"""
import pytest

from histree.crypto.hashing import node_digest
from histree.merkle.consistency import verify_consistency
from histree.schemas.errors import ConsistencyMismatchException, VerificationFailure
from histree.schemas.log import Anchor

from fixtures import HistoryTree, flip_byte


def _tree(size: int) -> HistoryTree:
    tree = HistoryTree()
    tree.extend(size)
    return tree


class TestValidProofs:

    @pytest.mark.parametrize("size", [3, 4, 5, 8, 9, 12, 17])
    def test_all_position_pairs(self, size):
        tree = _tree(size)

        for old_at in range(1, size):
            for at in range(old_at + 1, size):
                proof = tree.proof(at, at=at, anchor_at=old_at)
                verify_consistency(proof, tree.anchor(old_at))

    def test_seeded_with_anchor_root(self):
        """
        Anchor at position 1 covers two leaves, a complete subtree; the
        server omits its root and the verifier seeds it.
        """
        tree = _tree(4)
        anchor = tree.anchor(1)
        proof = tree.proof(3, at=3, anchor_at=1)

        assert list(proof.consistency_path) == [node_digest(tree.leaves[2], tree.leaves[3])]
        verify_consistency(proof, anchor)

    def test_seeded_rejects_wrong_anchor_root(self):
        tree = _tree(4)
        anchor = tree.anchor(1)
        forged = Anchor(root_digest=flip_byte(anchor.root_digest), tree_size=1)
        proof = tree.proof(3, at=3, anchor_at=1)

        with pytest.raises(ConsistencyMismatchException):
            verify_consistency(proof, forged)

    def test_unseeded_path_includes_old_side(self):
        """Anchor at position 2 (three leaves) is not a complete subtree."""
        tree = _tree(5)
        proof = tree.proof(4, at=4, anchor_at=2)

        assert proof.consistency_path[0] == tree.leaves[2]
        verify_consistency(proof, tree.anchor(2))

    def test_identical_anchor_and_proof_accepted(self):
        tree = _tree(6)
        proof = tree.proof(2, at=5)

        assert proof.consistency_path == ()
        verify_consistency(proof, tree.anchor(5))


class TestRejections:

    def test_same_size_different_root_empty_path(self):
        tree = _tree(6)
        proof = tree.proof(2, at=5)
        anchor = Anchor(root_digest=flip_byte(proof.root_digest), tree_size=5)

        with pytest.raises(ConsistencyMismatchException, match="did not grow"):
            verify_consistency(proof, anchor)

    def test_tree_shrinks(self):
        tree = _tree(8)
        proof = tree.proof(1, at=3)

        with pytest.raises(ConsistencyMismatchException, match="did not grow"):
            verify_consistency(proof, tree.anchor(6))

    def test_growth_with_empty_path(self):
        tree = _tree(8)
        proof = tree.proof(5, at=5)

        with pytest.raises(ConsistencyMismatchException, match="empty consistency path"):
            verify_consistency(proof, tree.anchor(2))

    def test_forked_history(self):
        """A server that rewrote an early entry cannot extend the old anchor."""
        honest = _tree(3)
        anchor = honest.anchor(2)

        forked = HistoryTree()
        forked.append(b"key0", b"value-0")
        forked.append(b"key1", b"tampered")
        forked.extend(4)

        proof = forked.proof(5, at=5, anchor_at=2)

        with pytest.raises(ConsistencyMismatchException):
            verify_consistency(proof, anchor)

    @pytest.mark.parametrize("old_at,at", [(1, 5), (2, 6), (3, 8), (4, 11)])
    def test_tampered_path_element(self, old_at, at):
        tree = _tree(at + 1)
        proof = tree.proof(at, at=at, anchor_at=old_at)

        for position in range(len(proof.consistency_path)):
            path = list(proof.consistency_path)
            path[position] = flip_byte(path[position], 5)
            bad = proof.model_copy(update={"consistency_path": tuple(path)})

            with pytest.raises(ConsistencyMismatchException):
                verify_consistency(bad, tree.anchor(old_at))

    def test_tampered_new_root(self):
        tree = _tree(9)
        proof = tree.proof(8, anchor_at=4)
        bad = proof.model_copy(update={"root_digest": flip_byte(proof.root_digest)})

        with pytest.raises(ConsistencyMismatchException, match="root mismatch"):
            verify_consistency(bad, tree.anchor(4))

    def test_path_for_other_anchor(self):
        tree = _tree(9)
        proof = tree.proof(8, anchor_at=3)

        with pytest.raises(ConsistencyMismatchException):
            verify_consistency(proof, tree.anchor(4))

    def test_overlong_path(self):
        tree = _tree(4)
        proof = tree.proof(3, at=3, anchor_at=1)
        bad = proof.model_copy(
            update={"consistency_path": proof.consistency_path + (tree.leaves[0],) * 3}
        )

        with pytest.raises(ConsistencyMismatchException):
            verify_consistency(bad, tree.anchor(1))

    def test_exception_carries_reason(self):
        tree = _tree(4)

        with pytest.raises(ConsistencyMismatchException) as exc_info:
            verify_consistency(tree.proof(1, at=1), tree.anchor(3))

        assert exc_info.value.reason is VerificationFailure.CONSISTENCY_MISMATCH
        assert exc_info.value.details["anchor_tree_size"] == 3
        assert exc_info.value.details["tree_size_at"] == 1
