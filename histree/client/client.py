"""
Verified Log Client

Runs every read and write through the verifier and keeps the trust
anchor store in step:

1. Look up the anchor for the active namespace (bootstrap from the
   transport on first use; this is the one implicitly trusted fetch)
2. Call the transport, passing the anchor position
3. Verify entry + proof against the anchor
4. On success, overwrite the anchor with the proof's root and position

A failed verification raises and leaves the store untouched. With an
anchor path set, the new anchor is saved to disk before it replaces the
in-memory one, so a failed save leaves both unchanged. Steps 1-4 run
under the namespace's single-flight lock.
"""
from __future__ import annotations

import logging
from pathlib import Path

from histree.anchors.persistence import load_anchor_store, save_anchor_store
from histree.anchors.store import TrustAnchorStore
from histree.config.runtime import DEFAULT_NAMESPACE, RuntimeConfig, get_default_config
from histree.crypto.hashing import to_hex
from histree.merkle.verifier import ProofVerifier
from histree.schemas.errors import LeafMismatchException
from histree.schemas.log import Anchor, Entry, Proof

from .transport import LogTransport


logger = logging.getLogger(__name__)


class VerifiedLogClient:
    """Client-side verification wrapper around a LogTransport."""

    def __init__(
        self,
        transport: LogTransport,
        store: TrustAnchorStore | None = None,
        namespace: str = DEFAULT_NAMESPACE,
        anchor_path: str | Path | None = None,
    ) -> None:
        """
        Args:
            transport: Access to the remote log
            store: Trust anchor store (default: a fresh empty store)
            namespace: Initially active namespace
            anchor_path: If set, the store is saved here after each advance
        """
        self.transport = transport
        self.store = store if store is not None else TrustAnchorStore()
        self.namespace = namespace
        self.anchor_path = Path(anchor_path).expanduser() if anchor_path else None

    @classmethod
    def from_config(
        cls,
        transport: LogTransport,
        config: RuntimeConfig | None = None,
    ) -> "VerifiedLogClient":
        """
        Build a client from runtime configuration, loading persisted anchors.

        Uses the process-wide default configuration when config is None.
        """
        if config is None:
            config = get_default_config()
        path = Path(config.anchors.path).expanduser() if config.anchors.path else None
        store = load_anchor_store(path) if path is not None else TrustAnchorStore()
        return cls(
            transport,
            store=store,
            namespace=config.namespace,
            anchor_path=path if config.anchors.autosave else None,
        )

    def use_namespace(self, namespace: str) -> None:
        """Switch the active namespace."""
        if not namespace:
            raise ValueError("Namespace must be a non-empty string")
        self.namespace = namespace

    def current_anchor(self) -> Anchor:
        """Return the trusted anchor for the active namespace, bootstrapping if needed."""
        with self.store.lock_namespace(self.namespace):
            return self._anchor_for(self.namespace)

    def safe_set(self, key: bytes, value: bytes) -> Anchor:
        """
        Append (key, value) and verify the server's proof.

        Returns:
            The new trusted anchor

        Raises:
            VerificationException: If the proof does not verify
        """
        namespace = self.namespace
        with self.store.lock_namespace(namespace):
            anchor = self._anchor_for(namespace)
            proof = self.transport.safe_set(namespace, key, value, anchor.tree_size)
            entry = Entry(index=proof.entry_index, key=key, value=value)
            return self._advance(namespace, entry, proof, anchor)

    def safe_get(self, key: bytes) -> bytes:
        """
        Read the latest value for key and verify the server's proof.

        Returns:
            The verified value

        Raises:
            VerificationException: If the proof does not verify
        """
        namespace = self.namespace
        with self.store.lock_namespace(namespace):
            anchor = self._anchor_for(namespace)
            entry, proof = self.transport.safe_get(namespace, key, anchor.tree_size)
            if entry.key != key:
                raise LeafMismatchException(
                    "Proof does not verify: server returned a different key",
                    details={"requested": to_hex(key), "returned": to_hex(entry.key)},
                )
            self._advance(namespace, entry, proof, anchor)
            return entry.value

    def export_anchors(self) -> bytes:
        """Serialize the trust anchor store."""
        return self.store.serialize()

    def import_anchors(self, blob: bytes) -> None:
        """Replace the trust anchor store contents from a serialized blob."""
        self.store.deserialize(blob)

    def _anchor_for(self, namespace: str) -> Anchor:
        anchor = self.store.get(namespace)
        if anchor is None:
            logger.info("No trusted anchor for %s; bootstrapping from server", namespace)
            anchor = self.transport.current_anchor(namespace)
            self.store.set(namespace, anchor)
        return anchor

    def _advance(self, namespace: str, entry: Entry, proof: Proof, anchor: Anchor) -> Anchor:
        new_anchor = ProofVerifier.verify(entry, proof, anchor)
        if self.anchor_path is not None:
            # Persist first: a failed save must not advance the in-memory anchor
            pending = TrustAnchorStore({**self.store.snapshot().anchors, namespace: new_anchor})
            save_anchor_store(pending, self.anchor_path)
        self.store.set(namespace, new_anchor)
        return new_anchor


__all__ = ["VerifiedLogClient"]
