"""
Schemas
File: log.py

Purpose: Data model for history tree verification.

- Entry: a single log record at a specific append position
- Proof: evidence returned by the server for one verification request
- Anchor: the last verified (root digest, tree position) for a namespace
- AnchorSnapshot: the versioned persisted form of a whole anchor mapping

Position convention: `Proof.tree_size_at` and `Anchor.tree_size` carry
the position of the last appended entry, as the server reports it. A log
holding n entries reports n - 1. A tree position of 0 on an anchor means
"no prior knowledge" and disables consistency checking.

Byte fields accept raw bytes or 0x-prefixed hex strings and serialize to
0x-prefixed hex in JSON mode.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)

from histree.crypto.hashing import DIGEST_SIZE, from_hex, to_hex

from .versioning import ANCHOR_FORMAT, SCHEMA_VERSION, assert_supported_schema_version

MAX_U64: int = 2**64 - 1


def _coerce_bytes(value: Any) -> Any:
    if isinstance(value, str):
        return from_hex(value)
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    return value


def _check_digest(value: bytes) -> bytes:
    if len(value) != DIGEST_SIZE:
        raise ValueError(f"Digest must be {DIGEST_SIZE} bytes, got {len(value)}")
    return value


HexBytes = Annotated[
    bytes,
    BeforeValidator(_coerce_bytes),
    PlainSerializer(to_hex, return_type=str, when_used="json"),
]

Digest = Annotated[
    bytes,
    BeforeValidator(_coerce_bytes),
    AfterValidator(_check_digest),
    PlainSerializer(to_hex, return_type=str, when_used="json"),
]

U64 = Annotated[int, Field(ge=0, le=MAX_U64)]


class Entry(BaseModel):
    """A single log record at a specific append position."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    index: U64 = Field(..., description="Append position of the entry")
    key: HexBytes = Field(..., description="Raw key bytes")
    value: HexBytes = Field(..., description="Raw value bytes")


class Proof(BaseModel):
    """
    Inclusion and consistency evidence for one entry.

    Supplied by an untrusted server; every field is checked by the
    verifier before anything derived from it is trusted.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    leaf_digest: Digest = Field(..., description="Claimed digest of the entry")
    root_digest: Digest = Field(..., description="Claimed root of the tree at tree_size_at")
    tree_size_at: U64 = Field(..., description="Position of the last entry in the claimed tree")
    entry_index: U64 = Field(..., description="Position of the proven entry")
    inclusion_path: tuple[Digest, ...] = Field(
        default=(),
        description="Audit path from the leaf to the root, bottom-up",
    )
    consistency_path: tuple[Digest, ...] = Field(
        default=(),
        description="Witness path from the anchored tree to the claimed tree",
    )


class Anchor(BaseModel):
    """The last root digest and tree position a client has accepted."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    root_digest: Digest = Field(..., description="Trusted root digest")
    tree_size: U64 = Field(..., description="Position of the last entry under root_digest")

    @property
    def is_empty(self) -> bool:
        """True for the "no prior knowledge" anchor."""
        return self.tree_size == 0

    @classmethod
    def from_proof(cls, proof: Proof) -> "Anchor":
        """Build the anchor a verified proof advances to."""
        return cls(root_digest=proof.root_digest, tree_size=proof.tree_size_at)


class AnchorSnapshot(BaseModel):
    """
    Persisted form of a trust anchor mapping.

    Treated as a versioned schema: the format tag and schema version are
    checked on load so that blobs survive upgrades or fail loudly.
    """

    model_config = ConfigDict(extra="forbid")

    format: str = Field(default=ANCHOR_FORMAT)
    schema_version: str = Field(default=SCHEMA_VERSION)
    anchors: dict[str, Anchor] = Field(default_factory=dict)

    @field_validator("format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        if value != ANCHOR_FORMAT:
            raise ValueError(f"Unexpected format tag {value!r}, expected {ANCHOR_FORMAT!r}")
        return value

    @field_validator("schema_version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        assert_supported_schema_version(value)
        return value
