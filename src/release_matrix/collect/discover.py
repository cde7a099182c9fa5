"""Locate release metadata and package files inside a build-output tree.

The tree is expected to be laid out by the build automation's copy-artifacts
step, one directory per build configuration::

    BUILD_CONFIGURATION/jenkins/PROJECT.json
    BUILD_CONFIGURATION/jenkins/PROJECT-platform-names.json
    BUILD_CONFIGURATION/pkg/ARTIFACT
    BUILD_CONFIGURATION/pkg/BUILD_VERSION
"""

from __future__ import annotations

import logging
from pathlib import Path

from release_matrix.errors import DiscoveryError

LOGGER = logging.getLogger(__name__)

RELEASE_CONFIG_PATTERN = "*/jenkins"
PACKAGE_PATTERN = "**/pkg/*"
BUILD_VERSION_MARKER = "BUILD_VERSION"


def is_hidden(relative: Path) -> bool:
    """True when any segment of a root-relative path is a dotfile or dot-directory."""

    return any(part.startswith(".") for part in relative.parts)


def find_release_config_dirs(root: Path) -> list[Path]:
    """Return every visible ``*/jenkins`` directory under root, ordered by relative path.

    Hidden entries are skipped, as a shell glob would.
    """

    return sorted(
        (
            candidate
            for candidate in root.glob(RELEASE_CONFIG_PATTERN)
            if candidate.is_dir() and not is_hidden(candidate.relative_to(root))
        ),
        key=lambda candidate: candidate.relative_to(root).as_posix(),
    )


def find_release_config_dir(root: Path, logger: logging.Logger | None = None) -> Path:
    """Pick the metadata directory to bootstrap the platform mapping from.

    Every build configuration ships the same metadata, so any match will do;
    the first one in relative-path order is used.
    """

    effective_logger = logger or LOGGER
    candidates = find_release_config_dirs(root)
    if not candidates:
        raise DiscoveryError(root, RELEASE_CONFIG_PATTERN)
    chosen = candidates[0]
    effective_logger.debug(
        "discover.release_config_dir chosen=%s candidates=%s",
        chosen.relative_to(root).as_posix(),
        len(candidates),
    )
    return chosen


def is_build_version_marker(path: str) -> bool:
    """True when the final path segment is the build system's version marker."""

    return path.rstrip("/").rsplit("/", 1)[-1] == BUILD_VERSION_MARKER


def discover_package_paths(root: Path, logger: logging.Logger | None = None) -> list[str]:
    """List package files one level inside any ``pkg`` directory below root.

    Paths are POSIX strings relative to root so that build-configuration keys
    can be matched against them without the root leaking into the match.
    Hidden files and anything under a hidden directory are skipped.
    """

    effective_logger = logger or LOGGER
    paths: list[str] = []
    for file_path in root.glob(PACKAGE_PATTERN):
        if not file_path.is_file():
            continue
        relative_path = file_path.relative_to(root)
        if is_hidden(relative_path):
            continue
        relative = relative_path.as_posix()
        if is_build_version_marker(relative):
            continue
        paths.append(relative)
    paths.sort()
    effective_logger.debug("discover.package_paths root=%s count=%s", root, len(paths))
    return paths
