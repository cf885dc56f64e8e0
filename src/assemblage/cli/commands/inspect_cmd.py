from __future__ import annotations

import argparse

from rich.table import Table

from assemblage.cli.context import CLIContext
from assemblage.domain.models.object_file import ObjectFile


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("inspect", help="Show the metadata derived for each file")
    parser.add_argument("paths", nargs="+", help="Files to inspect")
    parser.add_argument("--checksums", action="store_true", help="Also compute md5 and sha1")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    table = Table(title=f"Files ({len(args.paths)})")
    table.add_column("File", overflow="fold")
    table.add_column("Mimetype")
    table.add_column("Type")
    table.add_column("Size")
    table.add_column("DPG Base")
    table.add_column("DPG Folder")
    table.add_column("Image")
    if args.checksums:
        table.add_column("MD5", overflow="fold")
        table.add_column("SHA1", overflow="fold")

    exit_code = 0
    for p in args.paths:
        obj = ObjectFile(p, config=ctx.config)
        if not obj.file_exists:
            table.add_row(p, "missing", "", "", obj.dpg_basename, obj.dpg_folder, "")
            exit_code = 1
            continue
        info = obj.image_info
        row = [
            p,
            obj.mimetype or "-",
            obj.object_type,
            str(obj.filesize),
            obj.dpg_basename,
            obj.dpg_folder or "-",
            f"{info.width}x{info.height}" if info else "-",
        ]
        if args.checksums:
            row.extend([obj.md5, obj.sha1])
        table.add_row(*row)

    ctx.console.print(table)
    return exit_code
