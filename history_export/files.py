"""Atomic file writes shared by artifact and progress persistence."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path
from uuid import uuid4


def sha256_bytes(data: bytes) -> str:
    digest = hashlib.sha256()
    digest.update(data)
    return digest.hexdigest()


def write_bytes_atomic(path: Path, data: bytes) -> Path:
    """Write ``data`` to ``path`` via a temporary sibling and rename.

    Either the full payload lands at ``path`` or ``path`` is untouched;
    the temporary file never outlives a failed write.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.parent / f".{path.name}.{uuid4().hex}.tmp"
    try:
        with temp_path.open("wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        temp_path.replace(path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise
    return path


__all__ = ["sha256_bytes", "write_bytes_atomic"]
