"""
Log Transport Interface

Defines the seam between the verifying client and whatever talks to the
remote log. Implementations own the wire format, sessions and retries;
they hand back already-decoded Entry and Proof objects and are never
trusted: everything they return is verified before use.
"""

from abc import ABC, abstractmethod

from histree.schemas.log import Anchor, Entry, Proof


class LogTransport(ABC):
    """Abstract access to a remote append-only log."""

    @abstractmethod
    def current_anchor(self, namespace: str) -> Anchor:
        """
        Fetch the server's current root and position for namespace.

        Only used to bootstrap a namespace the client has never seen.
        """

    @abstractmethod
    def safe_set(self, namespace: str, key: bytes, value: bytes, anchor_size: int) -> Proof:
        """
        Append (key, value) and return the proof for the new entry.

        Args:
            namespace: Target namespace
            key: Raw key bytes
            value: Raw value bytes
            anchor_size: Position of the client's trusted anchor, so the
                server can build the consistency path from it

        Returns:
            Proof for the appended entry
        """

    @abstractmethod
    def safe_get(self, namespace: str, key: bytes, anchor_size: int) -> tuple[Entry, Proof]:
        """
        Read the latest entry for key together with its proof.

        Args:
            namespace: Target namespace
            key: Raw key bytes
            anchor_size: Position of the client's trusted anchor

        Returns:
            (entry, proof) as reported by the server
        """
