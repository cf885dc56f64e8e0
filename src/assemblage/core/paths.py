from __future__ import annotations

import posixpath
from collections.abc import Sequence


def split_ext(path: str) -> tuple[str, str]:
    """Split the final path component into ``(stem, ".ext")``."""
    name = posixpath.basename(path)
    stem, ext = posixpath.splitext(name)
    return stem, ext


def common_path(paths: Sequence[str]) -> str | None:
    """Return the longest shared directory prefix of ``paths``, ending in ``/``.

    The character-level common prefix is cut back to the last directory
    separator, so ``/a/bc.txt`` and ``/a/bd.txt`` share ``/a/`` rather than
    ``/a/b``. Returns ``None`` for an empty input and ``""`` when nothing
    is shared.
    """
    if not paths:
        return None
    last = paths[-1]
    n = 0
    while n < len(last) and all(len(p) > n and p[n] == last[n] for p in paths):
        n += 1
    prefix = last[:n]
    if prefix.endswith("/"):
        return prefix
    cut = prefix.rfind("/")
    return prefix[: cut + 1] if cut >= 0 else ""
