"""Tests for release metadata and package file discovery."""

from pathlib import Path

import pytest

from conftest import X64_CONFIG, X64_PACKAGE, X86_CONFIG, X86_PACKAGE, write_release_tree
from release_matrix.collect.discover import (
    discover_package_paths,
    find_release_config_dir,
    find_release_config_dirs,
    is_build_version_marker,
    is_hidden,
)
from release_matrix.errors import DiscoveryError


def test_selects_a_build_to_load_release_configurations_from(release_root: Path):
    chosen = find_release_config_dir(release_root)
    assert chosen == release_root / X64_CONFIG / "jenkins"


def test_lists_every_release_config_dir_in_path_order(release_root: Path):
    dirs = find_release_config_dirs(release_root)
    assert [d.parent.name for d in dirs] == [X64_CONFIG, X86_CONFIG]


def test_release_config_dir_must_be_one_level_deep(tmp_path: Path):
    (tmp_path / "a" / "b" / "jenkins").mkdir(parents=True)
    (tmp_path / "jenkins").mkdir()
    with pytest.raises(DiscoveryError) as excinfo:
        find_release_config_dir(tmp_path)
    assert excinfo.value.root == tmp_path
    assert "*/jenkins" in str(excinfo.value)


def test_release_config_dir_ignores_plain_files(tmp_path: Path):
    (tmp_path / "cfg").mkdir()
    (tmp_path / "cfg" / "jenkins").write_text("not a dir", encoding="utf-8")
    with pytest.raises(DiscoveryError):
        find_release_config_dir(tmp_path)


def test_finds_the_package_files_among_the_artifacts(release_root: Path):
    assert discover_package_paths(release_root) == [X64_PACKAGE, X86_PACKAGE]


def test_package_files_at_any_depth_exclude_build_version(tmp_path: Path):
    write_release_tree(
        tmp_path,
        [
            "nested/deeper/cfg/pkg/tool.deb",
            "nested/deeper/cfg/pkg/BUILD_VERSION",
            "pkg/top-level.msi",
            "pkg/BUILD_VERSION",
        ],
        metadata_configs=(),
    )
    assert discover_package_paths(tmp_path) == [
        "nested/deeper/cfg/pkg/tool.deb",
        "pkg/top-level.msi",
    ]


def test_package_files_skip_nested_directories_and_non_pkg_files(tmp_path: Path):
    write_release_tree(
        tmp_path,
        ["cfg/pkg/sub/inner.rpm", "cfg/other/outer.rpm", "cfg/pkg/real.rpm"],
        metadata_configs=(),
    )
    assert discover_package_paths(tmp_path) == ["cfg/pkg/real.rpm"]


def test_marker_check_uses_final_segment_only():
    assert is_build_version_marker("a/pkg/BUILD_VERSION")
    assert is_build_version_marker("BUILD_VERSION")
    assert not is_build_version_marker("a/pkg/BUILD_VERSION.txt")
    assert not is_build_version_marker("BUILD_VERSION/pkg/demo.rpm")


def test_hidden_files_in_pkg_are_not_packages(tmp_path: Path):
    write_release_tree(
        tmp_path,
        ["k1/pkg/file1", "k1/pkg/.DS_Store", "k1/pkg/.file1.rpm.part", "k1/pkg/BUILD_VERSION"],
        metadata_configs=(),
    )
    assert discover_package_paths(tmp_path) == ["k1/pkg/file1"]


def test_packages_under_hidden_directories_are_skipped(tmp_path: Path):
    write_release_tree(
        tmp_path,
        [".trash/k1/pkg/old.rpm", "k1/.cache/pkg/cached.rpm", "k1/pkg/new.rpm"],
        metadata_configs=(),
    )
    assert discover_package_paths(tmp_path) == ["k1/pkg/new.rpm"]


def test_hidden_release_config_dir_is_not_chosen(tmp_path: Path):
    write_release_tree(tmp_path, [], metadata_configs=("k1",))
    (tmp_path / ".trash" / "jenkins").mkdir(parents=True)

    assert find_release_config_dir(tmp_path).parent.name == "k1"
    assert [d.parent.name for d in find_release_config_dirs(tmp_path)] == ["k1"]


def test_only_hidden_release_config_dirs_is_a_discovery_error(tmp_path: Path):
    (tmp_path / ".trash" / "jenkins").mkdir(parents=True)
    with pytest.raises(DiscoveryError):
        find_release_config_dir(tmp_path)


def test_is_hidden_checks_every_segment():
    assert is_hidden(Path(".trash/jenkins"))
    assert is_hidden(Path("k1/pkg/.DS_Store"))
    assert not is_hidden(Path("build_os=centos-5/pkg/demo-1.0.rpm"))
