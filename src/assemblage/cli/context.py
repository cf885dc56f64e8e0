from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console

from assemblage.core.config import AssemblyConfig


@dataclass(slots=True)
class CLIContext:
    config: AssemblyConfig
    console: Console
