"""
Trust anchor state: the in-memory store and its on-disk form.
"""
from .store import TrustAnchorStore
from .persistence import load_anchor_store, save_anchor_store

__all__ = [
    "TrustAnchorStore",
    "load_anchor_store",
    "save_anchor_store",
]
