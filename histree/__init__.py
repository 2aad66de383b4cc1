"""
histree - client-side verification for append-only history trees.

Packages:
- crypto: leaf and node digests
- schemas: data model, errors, canonical JSON, result models
- merkle: inclusion and consistency verification
- anchors: trust anchor store and persistence
- client: transport seam and verifying client
- config: runtime configuration
"""

__version__ = "0.1.0"
