from __future__ import annotations

import argparse
import json
from pathlib import Path

from assemblage.application.services.content_metadata_service import ContentMetadataService
from assemblage.cli.context import CLIContext
from assemblage.core.errors import InvalidConfigurationError
from assemblage.domain.models.content_metadata import BundleMode, ContentMetadataOptions, Style
from assemblage.domain.models.object_file import ObjectFile


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("generate", help="Generate contentMetadata XML for a set of files")
    parser.add_argument("paths", nargs="+", help="Files to describe, in resource order")
    parser.add_argument("--druid", required=True, help="Object identifier, with or without 'druid:' prefix")
    parser.add_argument("--style", choices=[s.value for s in Style], default=Style.SIMPLE_IMAGE.value)
    parser.add_argument(
        "--bundle",
        choices=[b.value for b in BundleMode if b is not BundleMode.PREBUNDLED],
        default=BundleMode.DEFAULT.value,
    )
    parser.add_argument("--add-exif", action="store_true", help="Add mimetype, size, checksums and image data")
    parser.add_argument("--add-file-attributes", action="store_true", help="Add preserve/publish/shelve attributes")
    parser.add_argument(
        "--file-attributes",
        type=Path,
        help="JSON file mapping mimetype to {preserve, publish, shelve} overrides",
    )
    parser.add_argument("--preserve-common-paths", action="store_true")
    parser.add_argument("--flatten-folder-structure", action="store_true")
    parser.add_argument("--no-auto-labels", dest="auto_labels", action="store_false")
    parser.add_argument("--no-xml-declaration", dest="include_xml_declaration", action="store_false")
    parser.add_argument("-o", "--output", type=Path, help="Write XML here instead of stdout")
    parser.set_defaults(handler=run)


def _load_file_attributes(path: Path | None) -> dict:
    if path is None:
        return {}
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise InvalidConfigurationError(f"Cannot read file attributes from {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise InvalidConfigurationError(f"File attributes in {path} must be a JSON object")
    return payload


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    options = ContentMetadataOptions(
        druid=args.druid,
        style=args.style,
        bundle=args.bundle,
        add_exif=args.add_exif,
        add_file_attributes=args.add_file_attributes,
        file_attributes=_load_file_attributes(args.file_attributes),
        preserve_common_paths=args.preserve_common_paths,
        flatten_folder_structure=args.flatten_folder_structure,
        auto_labels=args.auto_labels,
        include_xml_declaration=args.include_xml_declaration,
        config=ctx.config,
    )
    objects = [ObjectFile(p, config=ctx.config) for p in args.paths]
    result = ContentMetadataService(options).create(objects)

    if args.output:
        args.output.write_text(result.xml, encoding="utf-8")
        ctx.console.print(
            f"Wrote {len(result.resources)} resources to {args.output}",
            markup=False,
            highlight=False,
        )
    else:
        ctx.console.out(result.xml, end="", highlight=False)
    return 0
