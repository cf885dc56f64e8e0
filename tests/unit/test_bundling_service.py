import pytest

from assemblage.application.services.bundling_service import BundlingService
from assemblage.core.config import DEFAULT_CONFIG
from assemblage.core.errors import InvalidConfigurationError
from assemblage.domain.models.object_file import ObjectFile


def _names(resources: list[list[ObjectFile]]) -> list[list[str]]:
    return [[obj.filename for obj in resource] for resource in resources]


def test_default_bundle_is_one_resource_per_file() -> None:
    objects = [ObjectFile(f"/in/{n}") for n in ("b.tif", "a.tif", "b.jp2")]
    resources = BundlingService().group("default", objects)
    assert _names(resources) == [["b.tif"], ["a.tif"], ["b.jp2"]]


def test_filename_bundle_groups_by_base_name_in_first_seen_order() -> None:
    objects = [ObjectFile(f"/in/{n}") for n in ("b.tif", "a.tif", "b.jp2", "B.pdf", "a.txt")]
    resources = BundlingService().group("filename", objects)
    assert _names(resources) == [["b.tif", "b.jp2"], ["a.tif", "a.txt"], ["B.pdf"]]


def test_dpg_bundle_isolates_special_folders() -> None:
    objects = [ObjectFile(f"/in/{n}") for n in ("a_00_1.tif", "a_05_1.jp2", "b_31_1.tif")]
    resources = BundlingService(DEFAULT_CONFIG).group("dpg", objects)
    assert _names(resources) == [["a_00_1.tif", "a_05_1.jp2"], ["b_31_1.tif"]]


def test_dpg_special_folder_never_joins_a_shared_base() -> None:
    objects = [ObjectFile(f"/in/{n}") for n in ("a_00_1.tif", "a_31_1.tif", "a_05_1.jp2", "plain.pdf")]
    resources = BundlingService().group("dpg", objects)
    assert _names(resources) == [["a_00_1.tif", "a_05_1.jp2"], ["plain.pdf"], ["a_31_1.tif"]]


def test_dpg_uses_configured_special_folders() -> None:
    config = DEFAULT_CONFIG.with_overrides(special_dpg_folders={"05"})
    objects = [ObjectFile(f"/in/{n}") for n in ("a_00_1.tif", "a_05_1.jp2")]
    resources = BundlingService(config).group("dpg", objects)
    assert _names(resources) == [["a_00_1.tif"], ["a_05_1.jp2"]]


def test_prebundled_passes_groups_through_and_drops_empty() -> None:
    a, b, c = (ObjectFile(f"/in/{n}") for n in ("a.tif", "b.tif", "c.tif"))
    resources = BundlingService().group("prebundled", [[a, b], [], [c]])
    assert resources == [[a, b], [c]]


def test_prebundled_rejects_flat_list() -> None:
    with pytest.raises(InvalidConfigurationError):
        BundlingService().group("prebundled", [ObjectFile("/in/a.tif")])


def test_unknown_bundle_mode_fails() -> None:
    with pytest.raises(InvalidConfigurationError):
        BundlingService().group("by_size", [ObjectFile("/in/a.tif")])
