"""
Core cryptographic utilities.

Digest functions for history tree leaves and nodes.
"""
from .hashing import (
    DIGEST_SIZE,
    LEAF_PREFIX,
    NODE_PREFIX,
    encode_u64,
    from_hex,
    is_power_of_two,
    leaf_digest,
    node_digest,
    sha256,
    to_hex,
)

__all__ = [
    "DIGEST_SIZE",
    "LEAF_PREFIX",
    "NODE_PREFIX",
    "encode_u64",
    "from_hex",
    "is_power_of_two",
    "leaf_digest",
    "node_digest",
    "sha256",
    "to_hex",
]
