from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from assemblage.core.config import DEFAULT_CONFIG, AssemblyConfig, FileAttributes, coerce_attribute_table
from assemblage.core.errors import InvalidConfigurationError


class Style(str, Enum):
    SIMPLE_IMAGE = "simple_image"
    FILE = "file"
    SIMPLE_BOOK = "simple_book"
    BOOK_WITH_PDF = "book_with_pdf"
    BOOK_AS_IMAGE = "book_as_image"
    MAP = "map"
    THREE_D = "3d"

    @classmethod
    def parse(cls, value: Style | str) -> Style:
        try:
            return cls(value)
        except ValueError:
            raise InvalidConfigurationError(f"Supplied style {value!r} is not valid") from None

    @property
    def deprecated(self) -> bool:
        return self in (Style.BOOK_WITH_PDF, Style.BOOK_AS_IMAGE)

    @property
    def content_type(self) -> str:
        """Value of the ``type`` attribute on the root element."""
        return _CONTENT_TYPES[self]


_CONTENT_TYPES = {
    Style.SIMPLE_IMAGE: "image",
    Style.FILE: "file",
    Style.SIMPLE_BOOK: "book",
    Style.BOOK_WITH_PDF: "book",
    Style.BOOK_AS_IMAGE: "book",
    Style.MAP: "map",
    Style.THREE_D: "3d",
}


class BundleMode(str, Enum):
    DEFAULT = "default"
    FILENAME = "filename"
    DPG = "dpg"
    PREBUNDLED = "prebundled"

    @classmethod
    def parse(cls, value: BundleMode | str) -> BundleMode:
        try:
            return cls(value)
        except ValueError:
            raise InvalidConfigurationError(f"Supplied bundle mode {value!r} is not valid") from None


@dataclass(frozen=True, slots=True)
class ContentMetadataOptions:
    druid: str
    style: Style = Style.SIMPLE_IMAGE
    bundle: BundleMode = BundleMode.DEFAULT
    add_exif: bool = False
    add_file_attributes: bool = False
    file_attributes: Mapping[str, FileAttributes] = field(default_factory=dict)
    preserve_common_paths: bool = False
    flatten_folder_structure: bool = False
    auto_labels: bool = True
    include_xml_declaration: bool = True
    config: AssemblyConfig = DEFAULT_CONFIG

    def __post_init__(self) -> None:
        object.__setattr__(self, "style", Style.parse(self.style))
        object.__setattr__(self, "bundle", BundleMode.parse(self.bundle))
        object.__setattr__(self, "file_attributes", coerce_attribute_table(self.file_attributes))

    @property
    def pid(self) -> str:
        """Identifier without a ``druid:`` prefix, used to build resource ids."""
        return self.druid.removeprefix("druid:")

    def attributes_for(self, mimetype: str) -> FileAttributes:
        """Options entry for the mimetype, then the options default, then the config table."""
        table = self.config.file_attributes
        return (
            self.file_attributes.get(mimetype)
            or self.file_attributes.get("default")
            or table.get(mimetype)
            or table["default"]
        )


@dataclass(frozen=True, slots=True)
class ClassifiedResource:
    resource_type: str
    label: str


def options_from_kwargs(druid: str | None, **kwargs: Any) -> ContentMetadataOptions:
    """Build options from keyword arguments, dropping ``None`` values so defaults apply."""
    return ContentMetadataOptions(druid=druid or "", **{k: v for k, v in kwargs.items() if v is not None})
