from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def configure_logging(verbosity: int = 0) -> None:
    """Install a rich stderr handler on the root logger.

    ``verbosity`` counts ``-v`` flags: 0 warnings, 1 info, 2+ debug.
    """
    level = _LEVELS[min(max(verbosity, 0), len(_LEVELS) - 1)]
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)],
        force=True,
    )
