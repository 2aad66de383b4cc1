"""
History Tree Proof Verification

This package provides:
- verify_inclusion: check an audit path against a claimed root
- verify_consistency: check a newer tree extends a trusted one
- verify_entry: leaf + inclusion + consistency in one call
- ProofVerifier: class-based wrapper with logging and result reports

Usage:
    from histree.merkle import verify_entry

    new_anchor = verify_entry(entry, proof, anchor)
    store.set(namespace, new_anchor)
"""
from .inclusion import verify_inclusion
from .consistency import verify_consistency
from .verifier import (
    ProofVerifier,
    needs_consistency,
    verify_entry,
    verify_leaf,
)


__all__ = [
    "verify_inclusion",
    "verify_consistency",
    "verify_leaf",
    "verify_entry",
    "needs_consistency",
    "ProofVerifier",
]
