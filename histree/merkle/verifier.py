"""
Combined Verifier
Checks an entry and its proof against a trust anchor in one call.

Order of checks:
1. Leaf: the entry hashes to proof.leaf_digest and sits at proof.entry_index
2. Inclusion: the leaf is in the tree at proof.tree_size_at
3. Consistency: that tree extends the anchored one (skipped when there is
   no anchor or the anchor is at position 0)

On success the caller receives the anchor to persist. On failure nothing
is returned and nothing should be persisted.
"""
from __future__ import annotations

import logging

from histree.crypto.hashing import leaf_digest, to_hex
from histree.schemas.errors import LeafMismatchException, VerificationException
from histree.schemas.log import Anchor, Entry, Proof
from histree.schemas.verification import CheckResult, VerificationResult

from .consistency import verify_consistency
from .inclusion import verify_inclusion


logger = logging.getLogger(__name__)


def verify_leaf(entry: Entry, proof: Proof) -> None:
    """
    Check that the entry is the one the proof talks about.

    Raises:
        LeafMismatchException: If the recomputed digest differs from
            proof.leaf_digest or the entry index differs from proof.entry_index
    """
    if entry.index != proof.entry_index:
        raise LeafMismatchException(
            "Proof does not verify: entry index differs from proven index",
            details={"entry_index": entry.index, "proof_entry_index": proof.entry_index},
        )
    digest = leaf_digest(entry)
    if digest != proof.leaf_digest:
        raise LeafMismatchException(
            "Proof does not verify: entry digest mismatch",
            details={"expected": to_hex(proof.leaf_digest), "actual": to_hex(digest)},
        )


def needs_consistency(anchor: Anchor | None) -> bool:
    """True when the anchor carries prior knowledge to check against."""
    return anchor is not None and not anchor.is_empty


def verify_entry(entry: Entry, proof: Proof, anchor: Anchor | None = None) -> Anchor:
    """
    Verify an entry and proof against the current trust anchor.

    Args:
        entry: The entry being confirmed
        proof: Proof returned by the server
        anchor: Current trust anchor for the namespace, or None on first use

    Returns:
        The new anchor (proof root and position)

    Raises:
        VerificationException: One of the LeafMismatch, InclusionMismatch or
            ConsistencyMismatch subclasses
    """
    verify_leaf(entry, proof)
    verify_inclusion(proof)
    if needs_consistency(anchor):
        verify_consistency(proof, anchor)
    return Anchor.from_proof(proof)


class ProofVerifier:
    """
    Convenience class for verifying entries against trust anchors.

    `verify` raises on failure; `check` reports every stage in a
    VerificationResult and never raises a verification exception.

    Example:
        >>> new_anchor = ProofVerifier.verify(entry, proof, anchor)
        >>> result = ProofVerifier.check(entry, proof, anchor)
        >>> result.ok
        True
    """

    @staticmethod
    def verify(entry: Entry, proof: Proof, anchor: Anchor | None = None) -> Anchor:
        """Verify and return the new anchor, logging the outcome."""
        try:
            new_anchor = verify_entry(entry, proof, anchor)
        except VerificationException as e:
            logger.warning(
                "Verification failed for entry %d at position %d: %s",
                entry.index, proof.tree_size_at, e.message,
            )
            raise
        logger.debug(
            "Verified entry %d at position %d (anchor position %s)",
            entry.index, proof.tree_size_at,
            anchor.tree_size if anchor is not None else "none",
        )
        return new_anchor

    @staticmethod
    def check(entry: Entry, proof: Proof, anchor: Anchor | None = None) -> VerificationResult:
        """
        Run every verification stage and collect the results.

        Stages after a failed one are not run.
        """
        checks: list[CheckResult] = []

        stages = [
            ("leaf_digest", "Entry matches proof leaf", lambda: verify_leaf(entry, proof)),
            ("inclusion", "Entry included in claimed root", lambda: verify_inclusion(proof)),
        ]
        if needs_consistency(anchor):
            stages.append((
                "consistency",
                "Claimed tree extends trusted anchor",
                lambda: verify_consistency(proof, anchor),
            ))

        for check_id, message, run in stages:
            try:
                run()
            except VerificationException as e:
                checks.append(CheckResult.failed(check_id, e.message, details=e.details))
                return VerificationResult.failure(checks, error=e.to_error_model())
            checks.append(CheckResult.passed(check_id, message))

        if not needs_consistency(anchor):
            checks.append(CheckResult.skipped(
                "consistency",
                "No prior anchor; consistency not checked",
            ))

        return VerificationResult.success(Anchor.from_proof(proof), checks=checks)


__all__ = [
    "verify_leaf",
    "needs_consistency",
    "verify_entry",
    "ProofVerifier",
]
