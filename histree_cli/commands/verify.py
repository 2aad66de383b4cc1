"""
CLI Verify Command

Verify an entry and its proof offline against the trusted anchor for a
namespace, and advance the anchor on success.

Usage:
    histree verify --entry entry.json --proof proof.json [--namespace NS]
                   [--anchors PATH] [--no-update] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from histree.anchors import TrustAnchorStore, load_anchor_store, save_anchor_store
from histree.crypto.hashing import to_hex
from histree.merkle import ProofVerifier
from histree.schemas.log import Anchor, Entry, Proof
from histree.schemas.verification import VerificationResult


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of one verification for CLI output."""
    namespace: str = ""
    entry_index: int = 0
    ok: bool = False
    reason: str | None = None
    anchor_before: dict[str, Any] | None = None
    anchor_after: dict[str, Any] | None = None
    anchor_saved: bool = False
    checks: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["reason"] is None:
            del d["reason"]
        if not d["errors"]:
            del d["errors"]
        return d


def _anchor_dict(anchor: Anchor | None) -> dict[str, Any] | None:
    if anchor is None:
        return None
    return {"root_digest": to_hex(anchor.root_digest), "tree_size": anchor.tree_size}


def load_entry(path: str | Path) -> Entry:
    """Load an Entry from a JSON file."""
    return Entry.model_validate_json(Path(path).read_text(encoding="utf-8"))


def load_proof(path: str | Path) -> Proof:
    """Load a Proof from a JSON file."""
    return Proof.model_validate_json(Path(path).read_text(encoding="utf-8"))


def build_summary(
    namespace: str,
    entry: Entry,
    anchor: Anchor | None,
    result: VerificationResult,
) -> VerifySummary:
    """Build a VerifySummary from a verification result."""
    summary = VerifySummary(
        namespace=namespace,
        entry_index=entry.index,
        ok=result.ok,
        reason=result.reason.value if result.reason else None,
        anchor_before=_anchor_dict(anchor),
        anchor_after=_anchor_dict(result.anchor),
        checks=[
            {"check_id": c.check_id, "ok": c.ok, "message": c.message}
            for c in result.checks
        ],
    )
    summary.errors.extend(result.get_error_messages())
    return summary


def print_summary(summary: VerifySummary) -> None:
    """Print a human-readable summary."""
    status = "VERIFIED" if summary.ok else "FAILED"
    print(f"{status}: entry {summary.entry_index} in namespace '{summary.namespace}'")
    for check in summary.checks:
        mark = "ok" if check["ok"] else "FAIL"
        print(f"  [{mark}] {check['check_id']}: {check['message']}")
    if summary.reason:
        print(f"  reason: {summary.reason}")
    if summary.anchor_after:
        print(f"  new anchor: {summary.anchor_after['tree_size']} {summary.anchor_after['root_digest']}")
        if summary.anchor_saved:
            print("  anchor saved")


def verify_cmd(args: Namespace) -> int:
    """
    Handle verify command.

    Returns:
        Exit code (0=verified, 1=error, 2=verification failed)
    """
    config = args.cli_config
    namespace = args.namespace or config.namespace
    anchor_path = args.anchors or config.anchors.path

    try:
        entry = load_entry(args.entry)
        proof = load_proof(args.proof)
        store = load_anchor_store(Path(anchor_path).expanduser()) if anchor_path else TrustAnchorStore()
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    anchor = store.get(namespace)
    if anchor is None:
        logger.warning("No trusted anchor for %s; consistency will not be checked", namespace)

    result = ProofVerifier.check(entry, proof, anchor)
    summary = build_summary(namespace, entry, anchor, result)

    if result.ok and anchor_path and not args.no_update:
        store.set(namespace, result.anchor)
        save_anchor_store(store, Path(anchor_path).expanduser())
        summary.anchor_saved = True

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary(summary)

    return EXIT_SUCCESS if result.ok else EXIT_VERIFICATION_FAILED
