"""
CLI command modules.
"""

from histree_cli.commands import anchors, verify

__all__ = ["anchors", "verify"]
