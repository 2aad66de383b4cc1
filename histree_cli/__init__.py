"""
histree CLI

Command-line interface for offline proof verification and trust anchor
management.

Usage:
    python -m histree_cli verify --entry entry.json --proof proof.json
    python -m histree_cli anchors show
    python -m histree_cli anchors set defaultdb --root 0x... --size 41
    python -m histree_cli config --init
"""

__version__ = "0.1.0"
