"""Match package files to build configurations and enforce completeness.

An :class:`ArtifactCollection` represents the packages of one multi-platform
release. At least one build configuration must carry a ``jenkins`` directory
holding ``PROJECT.json`` (build configuration -> install platforms) and
``PROJECT-platform-names.json`` (short platform name -> long name). The first
entry of the platform map is, by convention, the platform the build ran on.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from release_matrix.collect.discover import discover_package_paths, find_release_config_dir
from release_matrix.collect.metadata import (
    PlatformMap,
    PlatformNameMap,
    parse_platform_map,
    parse_platform_name_map,
    platform_map_filename,
    platform_name_map_filename,
    read_metadata_text,
)
from release_matrix.errors import MissingArtifactError

if TYPE_CHECKING:
    from release_matrix.config import AppSettings

LOGGER = logging.getLogger(__name__)

InstallPlatformTuple = tuple[str, str, str]


@dataclass(frozen=True, slots=True)
class CollectionOptions:
    """Options for one artifact collection run.

    ``extra`` is carried for callers that attach their own release options;
    matching never looks at it.
    """

    ignore_missing_packages: bool = False
    build_version: str | None = None
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_settings(cls, settings: "AppSettings") -> "CollectionOptions":
        return cls(
            ignore_missing_packages=settings.release.ignore_missing_packages,
            build_version=settings.release.build_version,
            extra=MappingProxyType(dict(settings.release.model_extra or {})),
        )


@dataclass(frozen=True, slots=True)
class Artifact:
    """A package file paired with the install platforms it supports.

    ``platforms`` is a tuple of ``(family, version, architecture)`` tuples so the
    artifact stays immutable; it therefore never compares equal to the list
    form of the platform map. Use :meth:`platforms_as_lists` to compare against
    a platform-map entry.
    """

    path: str
    platforms: tuple[InstallPlatformTuple, ...]
    build_config: str
    build_version: str | None = None

    @classmethod
    def from_mapping_entry(
        cls,
        path: str,
        build_config: str,
        platforms: Sequence[Sequence[str]],
        build_version: str | None = None,
    ) -> "Artifact":
        return cls(
            path=path,
            platforms=tuple((family, version, arch) for family, version, arch in platforms),
            build_config=build_config,
            build_version=build_version,
        )

    def platforms_as_lists(self) -> list[list[str]]:
        """Platforms in the JSON shape of the platform map."""

        return [list(platform) for platform in self.platforms]

    def as_dict(self) -> dict[str, object]:
        return {
            "path": self.path,
            "build_config": self.build_config,
            "build_version": self.build_version,
            "platforms": self.platforms_as_lists(),
        }


class ArtifactCollection:
    """Resolve the packages of a release against its platform map.

    Directory scans are cached on first access; build a new collection to
    pick up filesystem changes. Instances are not safe for concurrent first
    access from several threads.
    """

    def __init__(
        self,
        project: str,
        options: CollectionOptions | None = None,
        *,
        root: Path | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.project = project
        self.options = options or CollectionOptions()
        self.root = (root if root is not None else Path.cwd()).resolve()
        self._logger = logger or LOGGER

    def __repr__(self) -> str:
        return f"{type(self).__name__}(project={self.project!r}, root={str(self.root)!r})"

    @cached_property
    def release_config_dir(self) -> Path:
        """Directory holding the release metadata JSON files."""

        return find_release_config_dir(self.root, logger=self._logger)

    @property
    def platform_map_path(self) -> Path:
        return self.release_config_dir / platform_map_filename(self.project)

    @property
    def platform_name_map_path(self) -> Path:
        return self.release_config_dir / platform_name_map_filename(self.project)

    def platform_map_json(self) -> str:
        """Raw JSON mapping build configurations to install platforms.

        Example (Chef RPMs are built on CentOS but installable on SUSE)::

            {
              "build_os=centos-5,machine_architecture=x64,role=oss-builder": [
                ["el", "5", "x86_64"],
                ["sles", "11.2", "x86_64"]
              ]
            }
        """

        return read_metadata_text(self.platform_map_path, logger=self._logger)

    def platform_map(self) -> PlatformMap:
        return parse_platform_map(self.platform_map_json(), path=self.platform_map_path)

    def platform_name_map_json(self) -> str:
        """Raw JSON mapping platform short names (``"el"``) to long names."""

        return read_metadata_text(self.platform_name_map_path, logger=self._logger)

    def platform_name_map(self) -> PlatformNameMap:
        return parse_platform_name_map(self.platform_name_map_json(), path=self.platform_name_map_path)

    @cached_property
    def package_paths(self) -> list[str]:
        """Relative paths of the packages to release, version markers excluded."""

        return discover_package_paths(self.root, logger=self._logger)

    def find_package_path(self, build_config: str) -> str | None:
        """First package path containing the build configuration key, if any.

        Overlapping keys are not detected; enumeration order decides.
        """

        for path in self.package_paths:
            if build_config in path:
                return path
        return None

    def artifacts(self) -> list[Artifact]:
        """One artifact per build configuration in platform-map order.

        Raises :class:`MissingArtifactError` when packages are missing and the
        collection is not configured to ignore them.
        """

        artifacts: list[Artifact] = []
        missing_packages: list[str] = []
        for build_config, supported_platforms in self.platform_map().items():
            path = self.find_package_path(build_config)
            if path is None:
                missing_packages.append(build_config)
                continue
            artifacts.append(
                Artifact.from_mapping_entry(
                    path,
                    build_config,
                    supported_platforms,
                    build_version=self.options.build_version,
                )
            )
        self.check_missing_packages(missing_packages)
        return artifacts

    def check_missing_packages(self, missing_packages: Sequence[str]) -> None:
        """Warn about or reject missing packages per ``ignore_missing_packages``."""

        if not missing_packages:
            return
        if not self.options.ignore_missing_packages:
            raise MissingArtifactError(missing_packages)
        for build_config in missing_packages:
            self._logger.warning("artifacts.missing_package config=%s", build_config)
