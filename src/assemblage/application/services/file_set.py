from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from assemblage.core.config import DEFAULT_CONFIG, AssemblyConfig
from assemblage.domain.models.content_metadata import ClassifiedResource, Style
from assemblage.domain.models.object_file import ObjectFile


class FileSet:
    """The files of one resource, and the resource type and label they imply.

    Classification looks at every file of the resource at once, so the
    result does not depend on where in the resource a non-image file sits.
    """

    def __init__(
        self,
        style: Style | str,
        resource_files: Sequence[ObjectFile],
        config: AssemblyConfig = DEFAULT_CONFIG,
    ) -> None:
        self.style = Style.parse(style)
        self.resource_files = list(resource_files)
        self.config = config

    @property
    def resource_type(self) -> str:
        if self.style in (Style.SIMPLE_IMAGE, Style.MAP):
            return "image"
        if self.style is Style.FILE:
            return "file"
        if self.style is Style.THREE_D:
            extensions = {obj.ext.lower() for obj in self.resource_files}
            return "3d" if extensions & self.config.three_dimension_extensions else "file"

        object_types = [obj.object_type for obj in self.resource_files]
        has_images = "image" in object_types
        has_non_images = any(t != "image" for t in object_types)
        if self.style is Style.SIMPLE_BOOK:
            return "object" if has_non_images and not has_images else "page"
        if self.style is Style.BOOK_AS_IMAGE:
            return "object" if has_non_images and not has_images else "image"
        # book_with_pdf: any non-image file makes the whole resource an object
        return "object" if has_non_images else "page"

    @property
    def explicit_label(self) -> str:
        """First non-blank label set on a file of this resource, in file order."""
        for obj in self.resource_files:
            if obj.label and obj.label.strip():
                return obj.label
        return ""

    def classify(self, type_counters: Counter[str], auto_labels: bool = True) -> ClassifiedResource:
        """Resolve type and label; ``type_counters`` is advanced for the resource type."""
        resource_type = self.resource_type
        type_counters[resource_type] += 1
        label = self.explicit_label
        if not label and auto_labels:
            label = f"{resource_type.capitalize()} {type_counters[resource_type]}"
        return ClassifiedResource(resource_type=resource_type, label=label)
