"""Artifact collection: discovery, metadata loading and package matching."""

from release_matrix.collect.artifacts import Artifact, ArtifactCollection, CollectionOptions
from release_matrix.collect.discover import (
    BUILD_VERSION_MARKER,
    PACKAGE_PATTERN,
    RELEASE_CONFIG_PATTERN,
    discover_package_paths,
    find_release_config_dir,
    find_release_config_dirs,
    is_build_version_marker,
    is_hidden,
)
from release_matrix.collect.manifest import (
    artifacts_frame,
    build_manifest,
    platform_counts,
    write_manifest_json,
)
from release_matrix.collect.metadata import (
    PlatformMap,
    PlatformNameMap,
    parse_platform_map,
    parse_platform_name_map,
    platform_map_filename,
    platform_name_map_filename,
    read_metadata_text,
)

__all__ = [
    "Artifact",
    "ArtifactCollection",
    "CollectionOptions",
    "BUILD_VERSION_MARKER",
    "PACKAGE_PATTERN",
    "RELEASE_CONFIG_PATTERN",
    "discover_package_paths",
    "find_release_config_dir",
    "find_release_config_dirs",
    "is_build_version_marker",
    "is_hidden",
    "artifacts_frame",
    "build_manifest",
    "platform_counts",
    "write_manifest_json",
    "PlatformMap",
    "PlatformNameMap",
    "parse_platform_map",
    "parse_platform_name_map",
    "platform_map_filename",
    "platform_name_map_filename",
    "read_metadata_text",
]
