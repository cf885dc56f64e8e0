from __future__ import annotations

import logging
import warnings
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any
from xml.etree import ElementTree as ET

from assemblage.application.services.bundling_service import BundlingService, ResourceFiles
from assemblage.application.services.file_set import FileSet
from assemblage.core.errors import MissingInputError, ObjectFileNotFoundError
from assemblage.core.paths import common_path
from assemblage.domain.models.content_metadata import ContentMetadataOptions, options_from_kwargs
from assemblage.domain.models.object_file import ObjectFile

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


@dataclass(slots=True)
class ContentMetadataResult:
    xml: str
    resources: list[ResourceFiles]


class ContentMetadataService:
    """Build a contentMetadata XML document for a set of object files."""

    def __init__(self, options: ContentMetadataOptions) -> None:
        self.options = options
        self.bundler = BundlingService(options.config)

    def create(self, objects: Sequence, *, stacklevel: int = 2) -> ContentMetadataResult:
        """Bundle, classify and serialize ``objects``.

        ``stacklevel`` is passed to the deprecated-style warning so it points at
        the code that asked for the document.
        """
        opts = self.options
        if not opts.druid or not objects:
            raise MissingInputError("No objects and/or druid supplied")

        if opts.style.deprecated:
            message = f"Style '{opts.style.value}' is deprecated"
            warnings.warn(message, DeprecationWarning, stacklevel=stacklevel)
            logger.warning(message)

        resources = self.bundler.group(opts.bundle, objects)
        all_files = [obj for resource in resources for obj in resource]
        if not all_files:
            raise MissingInputError("No objects supplied in any resource")
        for obj in all_files:
            if not obj.file_exists:
                raise ObjectFileNotFoundError(f"File '{obj.path}' not found")
            obj.use_config(opts.config)

        file_ids = self._file_ids(all_files)
        root = self._build_document(resources, file_ids)
        ET.indent(root, space="  ")
        body = ET.tostring(root, encoding="unicode")
        xml = f"{XML_DECLARATION}\n{body}\n" if opts.include_xml_declaration else f"{body}\n"

        logger.info(
            "Built content metadata for %s: %d resources, %d files",
            opts.druid,
            len(resources),
            len(all_files),
        )
        return ContentMetadataResult(xml=xml, resources=resources)

    def _file_ids(self, files: list[ObjectFile]) -> dict[int, str]:
        opts = self.options
        prefix = None if opts.preserve_common_paths else common_path([obj.path for obj in files])
        file_ids = {
            id(obj): obj.content_metadata_id(prefix, flatten=opts.flatten_folder_structure) for obj in files
        }
        if opts.flatten_folder_structure:
            seen: set[str] = set()
            for obj in files:
                file_id = file_ids[id(obj)]
                if file_id in seen:
                    logger.warning("Flattening folder structure yields duplicate file id '%s'", file_id)
                seen.add(file_id)
        return file_ids

    def _build_document(self, resources: list[ResourceFiles], file_ids: dict[int, str]) -> ET.Element:
        opts = self.options
        root = ET.Element("contentMetadata", {"objectId": opts.druid, "type": opts.style.content_type})
        type_counters: Counter[str] = Counter()

        for index, resource_files in enumerate(resources):
            sequence = index + 1
            classified = FileSet(opts.style, resource_files, opts.config).classify(
                type_counters, auto_labels=opts.auto_labels
            )
            resource_el = ET.SubElement(
                root,
                "resource",
                {"id": f"{opts.pid}_{sequence}", "sequence": str(sequence), "type": classified.resource_type},
            )
            if classified.label:
                ET.SubElement(resource_el, "label").text = classified.label
            for obj in resource_files:
                self._add_file(resource_el, obj, file_ids[id(obj)])
        return root

    def _add_file(self, parent: ET.Element, obj: ObjectFile, file_id: str) -> None:
        opts = self.options
        attrs = {"id": file_id}
        if opts.add_file_attributes:
            file_attributes = obj.file_attributes or opts.attributes_for(obj.mimetype)
            attrs.update(
                preserve=file_attributes.preserve,
                publish=file_attributes.publish,
                shelve=file_attributes.shelve,
            )
        if opts.add_exif:
            attrs.update(mimetype=obj.mimetype, size=str(obj.filesize))

        file_el = ET.SubElement(parent, "file", attrs)
        if opts.add_exif:
            ET.SubElement(file_el, "checksum", {"type": "sha1"}).text = obj.sha1
            ET.SubElement(file_el, "checksum", {"type": "md5"}).text = obj.md5
            info = obj.image_info
            if obj.is_image and info is not None:
                ET.SubElement(file_el, "imageData", {"height": str(info.height), "width": str(info.width)})
        else:
            if obj.provider_sha1:
                ET.SubElement(file_el, "checksum", {"type": "sha1"}).text = obj.provider_sha1
            if obj.provider_md5:
                ET.SubElement(file_el, "checksum", {"type": "md5"}).text = obj.provider_md5


def create_content_metadata(druid: str | None, objects: Sequence | None, **options: Any) -> str:
    """Return contentMetadata XML for ``objects`` (a flat list, or a list of lists when prebundled).

    Keyword options mirror :class:`ContentMetadataOptions`; ``style`` and
    ``bundle`` may be given as strings.

    Example::

        create_content_metadata("druid:nx288wh8889", files, style="simple_book", bundle="dpg")
    """
    opts = options_from_kwargs(druid, **options)
    return ContentMetadataService(opts).create(objects or [], stacklevel=3).xml
