"""
Schemas

Purpose: Export the public API for the schemas package.
"""

# Version constants
from .versioning import (
    ANCHOR_FORMAT,
    SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    SchemaVersion,
    UnsupportedSchemaVersionError,
    assert_supported_schema_version,
)

# Error models and exceptions
from .errors import (
    CanonicalizationException,
    ConsistencyMismatchException,
    ErrorCodes,
    HistreeError,
    HistreeException,
    InclusionMismatchException,
    LeafMismatchException,
    MalformedAnchorDataException,
    VerificationException,
    VerificationFailure,
)

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
    loads_canonical,
)

# Log data model
from .log import (
    MAX_U64,
    Anchor,
    AnchorSnapshot,
    Digest,
    Entry,
    HexBytes,
    Proof,
)

# Verification results
from .verification import (
    CheckResult,
    CheckSeverity,
    VerificationResult,
)

__all__ = [
    # Versioning
    "ANCHOR_FORMAT",
    "SCHEMA_VERSION",
    "SUPPORTED_SCHEMA_VERSIONS",
    "SchemaVersion",
    "UnsupportedSchemaVersionError",
    "assert_supported_schema_version",
    # Errors
    "CanonicalizationException",
    "ConsistencyMismatchException",
    "ErrorCodes",
    "HistreeError",
    "HistreeException",
    "InclusionMismatchException",
    "LeafMismatchException",
    "MalformedAnchorDataException",
    "VerificationException",
    "VerificationFailure",
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    "loads_canonical",
    # Log
    "MAX_U64",
    "Anchor",
    "AnchorSnapshot",
    "Digest",
    "Entry",
    "HexBytes",
    "Proof",
    # Verification
    "CheckResult",
    "CheckSeverity",
    "VerificationResult",
]
