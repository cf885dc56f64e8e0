from __future__ import annotations

import hashlib
from pathlib import Path


def compute_file_digest(path: Path, alg: str = "md5", chunk_size: int = 1024 * 1024) -> str:
    """Hex digest of the file at ``path``, read in ``chunk_size`` blocks."""
    h = hashlib.new(alg)
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            h.update(chunk)
    return h.hexdigest()
