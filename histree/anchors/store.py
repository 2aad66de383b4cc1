"""
Trust Anchor Store
Per-namespace cache of the last verified (root digest, tree position).

The store is the single source of truth for anchors: a root returned in a
response is never used to check that same response. Entries are inserted
lazily on first use of a namespace and overwritten after every successful
verification. There is no eviction.

Thread safety:
- The mapping itself is guarded by one re-entrant lock.
- lock_namespace() hands out one lock per namespace, so a caller can run
  "read anchor, verify, write anchor" as a single flight and never write
  back a stale anchor over a newer one.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from pydantic import ValidationError

from histree.schemas.canonical import dumps_canonical, loads_canonical
from histree.schemas.errors import MalformedAnchorDataException
from histree.schemas.log import Anchor, AnchorSnapshot


logger = logging.getLogger(__name__)


class TrustAnchorStore:
    """Mapping from namespace name to its trusted Anchor."""

    def __init__(self, anchors: dict[str, Anchor] | None = None) -> None:
        self._anchors: dict[str, Anchor] = dict(anchors or {})
        self._lock = threading.RLock()
        self._namespace_locks: dict[str, threading.Lock] = {}

    def get(self, namespace: str) -> Anchor | None:
        """Return the trusted anchor for namespace, or None if unknown."""
        with self._lock:
            return self._anchors.get(namespace)

    def set(self, namespace: str, anchor: Anchor) -> None:
        """Insert or replace the anchor for namespace."""
        with self._lock:
            previous = self._anchors.get(namespace)
            self._anchors[namespace] = anchor
        logger.debug(
            "Anchor for %s: %s -> %d",
            namespace,
            previous.tree_size if previous is not None else "none",
            anchor.tree_size,
        )

    def namespaces(self) -> list[str]:
        """Namespaces with a trusted anchor, sorted."""
        with self._lock:
            return sorted(self._anchors)

    def snapshot(self) -> AnchorSnapshot:
        """Copy the mapping into its persisted form."""
        with self._lock:
            return AnchorSnapshot(anchors=dict(self._anchors))

    def serialize(self) -> bytes:
        """
        Export the whole mapping as a versioned, self-describing blob.

        The output is canonical JSON, so equal mappings give equal bytes.
        """
        return dumps_canonical(self.snapshot()).encode("utf-8")

    def deserialize(self, blob: bytes) -> None:
        """
        Replace the whole mapping from a blob produced by serialize().

        Raises:
            MalformedAnchorDataException: If the blob cannot be decoded.
                The current mapping is left unchanged.
        """
        snapshot = _decode_snapshot(blob)
        with self._lock:
            self._anchors = dict(snapshot.anchors)
        logger.info("Loaded trust anchors for %d namespace(s)", len(snapshot.anchors))

    @classmethod
    def from_bytes(cls, blob: bytes) -> "TrustAnchorStore":
        """Build a store from a blob produced by serialize()."""
        return cls(_decode_snapshot(blob).anchors)

    @contextmanager
    def lock_namespace(self, namespace: str) -> Iterator[None]:
        """Hold the single-flight lock for one namespace."""
        with self._lock:
            ns_lock = self._namespace_locks.setdefault(namespace, threading.Lock())
        with ns_lock:
            yield

    def __contains__(self, namespace: object) -> bool:
        with self._lock:
            return namespace in self._anchors

    def __len__(self) -> int:
        with self._lock:
            return len(self._anchors)

    def __repr__(self) -> str:
        return f"TrustAnchorStore(namespaces={self.namespaces()!r})"


def _decode_snapshot(blob: bytes) -> AnchorSnapshot:
    try:
        data = loads_canonical(blob.decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        raise MalformedAnchorDataException(
            f"Trust anchor data is not valid JSON: {e}",
        ) from e

    if not isinstance(data, dict):
        raise MalformedAnchorDataException(
            "Trust anchor data must be a JSON object",
            details={"type": type(data).__name__},
        )

    try:
        return AnchorSnapshot.model_validate(data)
    except ValidationError as e:
        raise MalformedAnchorDataException(
            f"Trust anchor data does not match schema: {e.error_count()} error(s)",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e


__all__ = ["TrustAnchorStore"]
