from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from assemblage.core.errors import InvalidConfigurationError

_FLAG_VALUES = ("yes", "no")


@dataclass(frozen=True, slots=True)
class FileAttributes:
    preserve: str
    shelve: str
    publish: str

    def __post_init__(self) -> None:
        for name in ("preserve", "shelve", "publish"):
            if getattr(self, name) not in _FLAG_VALUES:
                raise InvalidConfigurationError(
                    f"File attribute '{name}' must be 'yes' or 'no', got {getattr(self, name)!r}"
                )

    @classmethod
    def coerce(cls, value: FileAttributes | Mapping[str, Any]) -> FileAttributes:
        if isinstance(value, FileAttributes):
            return value
        try:
            return cls(
                preserve=str(value["preserve"]),
                shelve=str(value["shelve"]),
                publish=str(value["publish"]),
            )
        except (KeyError, TypeError) as exc:
            raise InvalidConfigurationError(
                f"File attributes need preserve, shelve and publish keys: {value!r}"
            ) from exc


def coerce_attribute_table(
    table: Mapping[str, FileAttributes | Mapping[str, Any]] | None,
) -> Mapping[str, FileAttributes]:
    if not table:
        return MappingProxyType({})
    return MappingProxyType({str(k): FileAttributes.coerce(v) for k, v in table.items()})


_PRESERVE_ONLY = FileAttributes(preserve="yes", shelve="no", publish="no")
_SHELVE_AND_PUBLISH = FileAttributes(preserve="no", shelve="yes", publish="yes")

DEFAULT_FILE_ATTRIBUTES: Mapping[str, FileAttributes] = MappingProxyType(
    {
        "default": _PRESERVE_ONLY,
        "image/tif": _PRESERVE_ONLY,
        "image/tiff": _PRESERVE_ONLY,
        "image/jp2": _SHELVE_AND_PUBLISH,
        "image/jpeg": _PRESERVE_ONLY,
        "audio/x-wav": _PRESERVE_ONLY,
        "audio/x-aiff": _PRESERVE_ONLY,
        "audio/mpeg": _SHELVE_AND_PUBLISH,
        "audio/mp4": _SHELVE_AND_PUBLISH,
        "video/mpeg": _PRESERVE_ONLY,
        "video/quicktime": _PRESERVE_ONLY,
        "video/mp4": _SHELVE_AND_PUBLISH,
        "application/pdf": FileAttributes(preserve="yes", shelve="yes", publish="yes"),
    }
)

# Files in these DPG folders always get a resource of their own.
SPECIAL_DPG_FOLDERS = frozenset({"31", "44", "50"})

TRUSTED_MIMETYPES = frozenset({"text/plain", "plain/text", "application/pdf", "text/html", "application/xml"})

VALID_IMAGE_MIMETYPES = frozenset({"image/jpeg", "image/tiff", "image/tif", "image/png"})

THREE_DIMENSION_EXTENSIONS = frozenset({".obj"})


@dataclass(frozen=True, slots=True)
class AssemblyConfig:
    file_attributes: Mapping[str, FileAttributes] = field(default_factory=lambda: DEFAULT_FILE_ATTRIBUTES)
    special_dpg_folders: frozenset[str] = SPECIAL_DPG_FOLDERS
    trusted_mimetypes: frozenset[str] = TRUSTED_MIMETYPES
    valid_image_mimetypes: frozenset[str] = VALID_IMAGE_MIMETYPES
    three_dimension_extensions: frozenset[str] = THREE_DIMENSION_EXTENSIONS

    def __post_init__(self) -> None:
        table = coerce_attribute_table(self.file_attributes)
        if "default" not in table:
            raise InvalidConfigurationError("File attribute table must define a 'default' entry")
        object.__setattr__(self, "file_attributes", table)
        object.__setattr__(self, "special_dpg_folders", frozenset(self.special_dpg_folders))
        object.__setattr__(self, "trusted_mimetypes", frozenset(self.trusted_mimetypes))
        object.__setattr__(self, "valid_image_mimetypes", frozenset(self.valid_image_mimetypes))
        object.__setattr__(
            self,
            "three_dimension_extensions",
            frozenset(ext.lower() for ext in self.three_dimension_extensions),
        )

    def with_overrides(self, **changes: Any) -> AssemblyConfig:
        return replace(self, **changes)

    def is_special_dpg_folder(self, folder: str) -> bool:
        return folder in self.special_dpg_folders


DEFAULT_CONFIG = AssemblyConfig()
