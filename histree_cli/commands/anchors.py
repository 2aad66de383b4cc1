"""
CLI Anchors Command

Inspect and bootstrap the persisted trust anchor store.

Usage:
    histree anchors show [--anchors PATH] [--json]
    histree anchors set NAMESPACE --root 0x... --size N [--anchors PATH]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path

from histree.anchors import load_anchor_store, save_anchor_store
from histree.crypto.hashing import to_hex
from histree.schemas.log import Anchor


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def _anchor_path(args: Namespace) -> Path | None:
    path = args.anchors or args.cli_config.anchors.path
    return Path(path).expanduser() if path else None


def show_cmd(args: Namespace) -> int:
    """Handle anchors show."""
    path = _anchor_path(args)
    if path is None:
        print("Error: no anchor file configured (use --anchors or HISTREE_ANCHOR_FILE)", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    store = load_anchor_store(path)

    if args.json:
        print(json.dumps(store.snapshot().model_dump(mode="json"), indent=2))
        return EXIT_SUCCESS

    if not len(store):
        print(f"No trusted anchors in {path}")
        return EXIT_SUCCESS

    for namespace in store.namespaces():
        anchor = store.get(namespace)
        print(f"{namespace}: tree_size={anchor.tree_size} root={to_hex(anchor.root_digest)}")
    return EXIT_SUCCESS


def set_cmd(args: Namespace) -> int:
    """
    Handle anchors set.

    Overwrites the anchor for a namespace with an out-of-band value,
    e.g. a root obtained from a trusted channel.
    """
    path = _anchor_path(args)
    if path is None:
        print("Error: no anchor file configured (use --anchors or HISTREE_ANCHOR_FILE)", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    anchor = Anchor(root_digest=args.root, tree_size=args.size)
    store = load_anchor_store(path)

    previous = store.get(args.namespace)
    if previous is not None and previous.tree_size > anchor.tree_size and not args.force:
        print(
            f"Error: anchor for '{args.namespace}' is at {previous.tree_size}; "
            f"refusing to move it back to {anchor.tree_size} without --force",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    store.set(args.namespace, anchor)
    save_anchor_store(store, path)
    print(f"Set anchor for '{args.namespace}': tree_size={anchor.tree_size}")
    return EXIT_SUCCESS
