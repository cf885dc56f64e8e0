from __future__ import annotations

import logging
import mimetypes
import posixpath
from collections.abc import Mapping
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Any

from PIL import Image, UnidentifiedImageError

from assemblage.core.config import DEFAULT_CONFIG, AssemblyConfig, FileAttributes
from assemblage.core.errors import InvalidConfigurationError, MetadataExtractionError, ObjectFileNotFoundError
from assemblage.core.hashing import compute_file_digest
from assemblage.core.paths import split_ext

logger = logging.getLogger(__name__)

MEDIA_TYPES = frozenset(
    {"application", "audio", "image", "message", "model", "multipart", "text", "video"}
)

# Host mime.types files disagree on these.
mimetypes.add_type("image/jp2", ".jp2")
mimetypes.add_type("image/jpx", ".jpx")


@dataclass(frozen=True, slots=True)
class ImageInfo:
    mimetype: str | None
    width: int
    height: int
    has_color_profile: bool


class ObjectFile:
    """One physical file and the facts content metadata needs about it.

    Values that touch the filesystem are computed on first access and cached
    on the instance; a single instance is not safe to share across threads
    while those values are still being computed.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        label: str | None = None,
        file_attributes: FileAttributes | Mapping[str, Any] | None = None,
        provider_md5: str | None = None,
        provider_sha1: str | None = None,
        relative_path: str | None = None,
        config: AssemblyConfig = DEFAULT_CONFIG,
    ) -> None:
        self.path = str(path)
        self.label = label
        self.file_attributes = FileAttributes.coerce(file_attributes) if file_attributes else None
        self.provider_md5 = provider_md5
        self.provider_sha1 = provider_sha1
        self.relative_path = relative_path
        self.config = config

    def __repr__(self) -> str:
        return f"ObjectFile({self.path!r})"

    @property
    def filename(self) -> str:
        return posixpath.basename(self.path)

    @property
    def dirname(self) -> str:
        return posixpath.dirname(self.path)

    @property
    def ext(self) -> str:
        return split_ext(self.path)[1]

    @property
    def filename_without_ext(self) -> str:
        return split_ext(self.path)[0]

    def _dpg_parts(self) -> list[str] | None:
        parts = self.filename_without_ext.split("_")
        return parts if len(parts) == 3 else None

    @property
    def dpg_basename(self) -> str:
        """Base name with the DPG folder code removed, e.g. ``cy565rm7188_001``."""
        parts = self._dpg_parts()
        if parts is None:
            return self.filename_without_ext
        return f"{parts[0]}_{parts[2]}"

    @property
    def dpg_folder(self) -> str:
        """DPG folder code such as ``00`` or ``05``; empty when the name does not follow DPG."""
        parts = self._dpg_parts()
        return parts[1] if parts is not None else ""

    @property
    def file_exists(self) -> bool:
        p = Path(self.path)
        return p.exists() and not p.is_dir()

    def _check_for_file(self) -> Path:
        if not self.file_exists:
            raise ObjectFileNotFoundError(f"Input file {self.path} does not exist")
        return Path(self.path)

    def _digest(self, alg: str) -> str:
        path = self._check_for_file()
        try:
            return compute_file_digest(path, alg)
        except OSError as exc:
            raise MetadataExtractionError(f"Cannot compute {alg} for {self.path}: {exc}") from exc

    @cached_property
    def md5(self) -> str:
        return self._digest("md5")

    @cached_property
    def sha1(self) -> str:
        return self._digest("sha1")

    @cached_property
    def filesize(self) -> int:
        path = self._check_for_file()
        try:
            return path.stat().st_size
        except OSError as exc:
            raise MetadataExtractionError(f"Cannot read size of {self.path}: {exc}") from exc

    @cached_property
    def image_info(self) -> ImageInfo | None:
        path = self._check_for_file()
        if mimetypes.guess_type(self.filename)[0] in self.config.trusted_mimetypes:
            return None
        try:
            with Image.open(path) as img:
                width, height = img.size
                return ImageInfo(
                    mimetype=Image.MIME.get(img.format or ""),
                    width=width,
                    height=height,
                    has_color_profile=bool(img.info.get("icc_profile")),
                )
        except UnidentifiedImageError:
            logger.debug("Not a readable image: %s", self.path)
            return None
        except (OSError, ValueError) as exc:
            logger.warning("Could not read image metadata for %s: %s", self.path, exc)
            return None

    @cached_property
    def mimetype(self) -> str:
        guessed = mimetypes.guess_type(self.filename)[0]
        if guessed in self.config.trusted_mimetypes:
            self._check_for_file()
            return guessed
        info = self.image_info
        if info is not None and info.mimetype:
            return info.mimetype
        return guessed or ""

    @property
    def object_type(self) -> str:
        """Top-level media type such as ``image`` or ``application``; ``other`` if unknown."""
        major = self.mimetype.split("/", 1)[0]
        return major if major in MEDIA_TYPES else "other"

    @property
    def is_image(self) -> bool:
        return self.object_type == "image"

    @property
    def has_color_profile(self) -> bool:
        info = self.image_info
        return bool(info and info.has_color_profile)

    @property
    def jp2able(self) -> bool:
        if self.image_info is None:
            return False
        return self.mimetype in self.config.valid_image_mimetypes

    @property
    def valid_image(self) -> bool:
        if self.mimetype == "image/jp2":
            return self.is_image
        return self.is_image and self.jp2able

    def use_config(self, config: AssemblyConfig) -> None:
        """Rebind to ``config`` before any config-dependent value has been computed."""
        if config is self.config:
            return
        if "mimetype" in self.__dict__ or "image_info" in self.__dict__:
            raise InvalidConfigurationError(
                f"Metadata for {self.path} was already derived under a different configuration"
            )
        self.config = config

    def content_metadata_id(self, common_path: str | None = None, flatten: bool = False) -> str:
        """Id of the file element; an explicit ``relative_path`` is used as given."""
        if self.relative_path:
            return self.relative_path
        if common_path and self.path.startswith(common_path):
            file_id = self.path[len(common_path):]
        else:
            file_id = self.path
        return posixpath.basename(file_id) if flatten else file_id
