"""
Anchor persistence
Save and load a TrustAnchorStore to/from disk.
"""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from .store import TrustAnchorStore


logger = logging.getLogger(__name__)


def load_anchor_store(path: str | Path) -> TrustAnchorStore:
    """
    Load a store from path.

    A missing file yields an empty store (first run).

    Raises:
        MalformedAnchorDataException: If the file exists but is malformed.
    """
    path = Path(path)
    if not path.exists():
        logger.info("No anchor file at %s; starting with an empty store", path)
        return TrustAnchorStore()
    return TrustAnchorStore.from_bytes(path.read_bytes())


def save_anchor_store(store: TrustAnchorStore, path: str | Path) -> None:
    """
    Write the store to path atomically.

    The blob is written to a temporary file in the same directory and
    moved into place, so readers see either the old or the new file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = store.serialize()

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Saved %d anchor(s) to %s", len(store), path)


__all__ = ["load_anchor_store", "save_anchor_store"]
