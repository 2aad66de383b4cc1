"""
Digest Functions
Byte-exact hashing of history tree leaves and internal nodes.

This module provides:
- SHA-256 hashing for raw bytes
- Leaf digests for log entries (0x00 prefix)
- Node digests for internal tree nodes (0x01 prefix)
- Hex encoding/decoding with 0x prefix

Framing Rules (Hard Contracts):
1. leaf = sha256(0x00 || be64(index) || be64(len(key)) || key || value)
2. node = sha256(0x01 || left || right)

The one-byte prefixes keep leaf and node digests in separate domains, so a
leaf can never be presented as an internal node (or vice versa) even when
the payloads after the prefix coincide.
"""
from __future__ import annotations

import hashlib
import struct
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from histree.schemas.log import Entry


LEAF_PREFIX: bytes = b"\x00"
NODE_PREFIX: bytes = b"\x01"

DIGEST_SIZE: int = 32

_U64 = struct.Struct(">Q")


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def encode_u64(value: int) -> bytes:
    """Encode an unsigned 64-bit integer as 8 big-endian bytes."""
    return _U64.pack(value)


def leaf_digest(entry: Entry) -> bytes:
    """
    Compute the digest of a log entry.

    The key is length-prefixed; the value is not, since it runs to the
    end of the buffer.

    Args:
        entry: The entry to hash

    Returns:
        32-byte leaf digest
    """
    return sha256(
        LEAF_PREFIX
        + encode_u64(entry.index)
        + encode_u64(len(entry.key))
        + entry.key
        + entry.value
    )


def node_digest(left: bytes, right: bytes) -> bytes:
    """
    Compute the digest of an internal node from its two children.

    Order matters: node_digest(a, b) != node_digest(b, a).

    Args:
        left: Left child digest
        right: Right child digest

    Returns:
        32-byte node digest
    """
    return sha256(NODE_PREFIX + left + right)


def is_power_of_two(n: int) -> bool:
    """Check whether n is a positive power of two."""
    return n != 0 and (n & (n - 1)) == 0


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "LEAF_PREFIX",
    "NODE_PREFIX",
    "DIGEST_SIZE",
    "sha256",
    "encode_u64",
    "leaf_digest",
    "node_digest",
    "is_power_of_two",
    "to_hex",
    "from_hex",
]
