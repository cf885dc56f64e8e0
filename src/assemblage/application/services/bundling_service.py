from __future__ import annotations

from collections.abc import Callable, Sequence

from assemblage.core.config import DEFAULT_CONFIG, AssemblyConfig
from assemblage.core.errors import InvalidConfigurationError
from assemblage.domain.models.content_metadata import BundleMode
from assemblage.domain.models.object_file import ObjectFile

ResourceFiles = list[ObjectFile]


class BundlingService:
    """Partition object files into resources according to a bundle mode."""

    def __init__(self, config: AssemblyConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def group(self, bundle: BundleMode | str, objects: Sequence) -> list[ResourceFiles]:
        mode = BundleMode.parse(bundle)
        if mode is BundleMode.DEFAULT:
            resources = [[obj] for obj in objects]
        elif mode is BundleMode.FILENAME:
            resources = self._group_by(objects, lambda obj: obj.filename_without_ext)
        elif mode is BundleMode.DPG:
            resources = self._group_dpg(objects)
        elif mode is BundleMode.PREBUNDLED:
            resources = self._prebundled(objects)
        else:
            raise InvalidConfigurationError(f"Unsupported bundle mode: {mode.value}")
        return [resource for resource in resources if resource]

    @staticmethod
    def _group_by(objects: Sequence[ObjectFile], key: Callable[[ObjectFile], str]) -> list[ResourceFiles]:
        groups: dict[str, ResourceFiles] = {}
        for obj in objects:
            groups.setdefault(key(obj), []).append(obj)
        return list(groups.values())

    def _group_dpg(self, objects: Sequence[ObjectFile]) -> list[ResourceFiles]:
        special = [obj for obj in objects if self.config.is_special_dpg_folder(obj.dpg_folder)]
        regular = [obj for obj in objects if not self.config.is_special_dpg_folder(obj.dpg_folder)]
        resources = self._group_by(regular, lambda obj: obj.dpg_basename)
        resources.extend([obj] for obj in special)
        return resources

    @staticmethod
    def _prebundled(objects: Sequence) -> list[ResourceFiles]:
        resources: list[ResourceFiles] = []
        for group in objects:
            if isinstance(group, ObjectFile):
                raise InvalidConfigurationError(
                    "Prebundled input must be a list of resource groups, got a bare file"
                )
            resources.append(list(group))
        return resources
