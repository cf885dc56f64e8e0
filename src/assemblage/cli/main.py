from __future__ import annotations

import argparse
import logging

from rich.console import Console

from assemblage.cli.commands import generate_cmd, inspect_cmd
from assemblage.cli.context import CLIContext
from assemblage.core.config import DEFAULT_CONFIG
from assemblage.core.errors import AssemblageError
from assemblage.core.logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assemblage",
        description="Generate contentMetadata XML for digital object files",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)

    subparsers = parser.add_subparsers(dest="command", required=True)
    generate_cmd.register(subparsers)
    inspect_cmd.register(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()
    ctx = CLIContext(config=DEFAULT_CONFIG, console=console)

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 2

    try:
        return handler(args, ctx)
    except AssemblageError as exc:
        logger.error(str(exc))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
