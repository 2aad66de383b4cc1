"""
Combined Verifier Unit Tests
Tests for histree/merkle/verifier.py
"""
import logging

import pytest

from histree.crypto.hashing import leaf_digest, sha256
from histree.merkle.verifier import ProofVerifier, needs_consistency, verify_entry, verify_leaf
from histree.schemas.errors import (
    ConsistencyMismatchException,
    InclusionMismatchException,
    LeafMismatchException,
    VerificationFailure,
)
from histree.schemas.log import Anchor, Entry

from fixtures import HistoryTree, flip_byte


@pytest.fixture
def tree():
    tree = HistoryTree()
    tree.extend(6)
    return tree


class TestVerifyLeaf:

    def test_matching_entry(self, tree):
        verify_leaf(tree.entries[4], tree.proof(4))

    def test_different_value(self, tree):
        entry = tree.entries[4].model_copy(update={"value": b"other"})

        with pytest.raises(LeafMismatchException, match="digest mismatch"):
            verify_leaf(entry, tree.proof(4))

    def test_index_differs_from_proof(self, tree):
        with pytest.raises(LeafMismatchException, match="index"):
            verify_leaf(tree.entries[3], tree.proof(4))


class TestNeedsConsistency:

    def test_no_anchor(self):
        assert needs_consistency(None) is False

    def test_empty_anchor(self):
        assert needs_consistency(Anchor(root_digest=sha256(b""), tree_size=0)) is False

    def test_anchor_with_history(self, tree):
        assert needs_consistency(tree.anchor(1)) is True


class TestVerifyEntry:

    def test_first_use_returns_proof_anchor(self, tree):
        new_anchor = verify_entry(tree.entries[2], tree.proof(2))

        assert new_anchor == tree.anchor()

    def test_with_anchor(self, tree):
        new_anchor = verify_entry(tree.entries[5], tree.proof(5, anchor_at=2), tree.anchor(2))

        assert new_anchor.tree_size == 5
        assert new_anchor.root_digest == tree.root()

    def test_empty_anchor_skips_consistency(self, tree):
        """Position 0 carries no prior knowledge, so no witness is required."""
        anchor = Anchor(root_digest=sha256(b"anything"), tree_size=0)

        new_anchor = verify_entry(tree.entries[1], tree.proof(1), anchor)

        assert new_anchor == tree.anchor()

    def test_leaf_checked_first(self, tree):
        entry = tree.entries[1].model_copy(update={"key": b"forged"})
        bad = tree.proof(1).model_copy(update={"inclusion_path": ()})

        with pytest.raises(LeafMismatchException):
            verify_entry(entry, bad)

    def test_inclusion_failure(self, tree):
        proof = tree.proof(1)
        bad = proof.model_copy(update={"root_digest": flip_byte(proof.root_digest)})

        with pytest.raises(InclusionMismatchException):
            verify_entry(tree.entries[1], bad)

    def test_consistency_failure(self, tree):
        other = HistoryTree()
        other.extend(3, prefix=b"other")

        with pytest.raises(ConsistencyMismatchException):
            verify_entry(tree.entries[5], tree.proof(5, anchor_at=2), other.anchor(2))


class TestProofVerifier:

    def test_verify_logs_failure(self, tree, caplog):
        proof = tree.proof(3)
        bad = proof.model_copy(update={"leaf_digest": flip_byte(proof.leaf_digest)})

        with caplog.at_level(logging.WARNING, logger="histree.merkle.verifier"):
            with pytest.raises(LeafMismatchException):
                ProofVerifier.verify(tree.entries[3], bad)

        assert "Verification failed for entry 3" in caplog.text

    def test_check_success_with_anchor(self, tree):
        result = ProofVerifier.check(tree.entries[5], tree.proof(5, anchor_at=3), tree.anchor(3))

        assert result.ok is True
        assert result.anchor == tree.anchor()
        assert result.error is None
        assert result.reason is None
        assert [c.check_id for c in result.checks] == ["leaf_digest", "inclusion", "consistency"]
        assert all(c.severity == "info" for c in result.checks)

    def test_check_without_anchor_marks_consistency_skipped(self, tree):
        result = ProofVerifier.check(tree.entries[0], tree.proof(0))

        assert result.ok is True
        skipped = result.checks[-1]
        assert skipped.check_id == "consistency"
        assert skipped.ok is True
        assert skipped.severity == "warn"

    def test_check_reports_reason_and_stops(self, tree):
        entry = Entry(index=2, key=b"key2", value=b"not what was logged")

        result = ProofVerifier.check(entry, tree.proof(2))

        assert result.ok is False
        assert result.anchor is None
        assert result.reason is VerificationFailure.LEAF_MISMATCH
        assert result.error.code == "LEAF_MISMATCH"
        assert [c.check_id for c in result.checks] == ["leaf_digest"]
        assert len(result.get_failed_checks()) == 1
        assert result.get_error_messages() == [result.checks[0].message]

    def test_check_consistency_failure(self, tree):
        anchor = Anchor(root_digest=flip_byte(tree.root(2)), tree_size=2)

        result = ProofVerifier.check(tree.entries[4], tree.proof(4, anchor_at=2), anchor)

        assert result.ok is False
        assert result.reason is VerificationFailure.CONSISTENCY_MISMATCH
        assert [c.ok for c in result.checks] == [True, True, False]

    def test_check_error_round_trips_to_exception(self, tree):
        proof = tree.proof(1)
        bad = proof.model_copy(update={"root_digest": flip_byte(proof.root_digest)})

        result = ProofVerifier.check(tree.entries[1], bad)

        assert isinstance(result.error.to_exception(), InclusionMismatchException)

    def test_leaf_digest_of_single_entry_is_first_anchor(self):
        tree = HistoryTree()
        entry = tree.append(b"k", b"v1")

        new_anchor = ProofVerifier.verify(entry, tree.proof(0))

        assert new_anchor.root_digest == leaf_digest(entry)
        assert new_anchor.tree_size == 0
