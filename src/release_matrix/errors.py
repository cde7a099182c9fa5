"""Exceptions raised while collecting release artifacts."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


class ReleaseMatrixError(Exception):
    """Base class for every failure surfaced by release_matrix."""


class DiscoveryError(ReleaseMatrixError):
    """No build output under the release root carries a metadata directory."""

    def __init__(self, root: Path, pattern: str) -> None:
        self.root = root
        self.pattern = pattern
        super().__init__(f"No release config directory matching '{pattern}' under {root}")


class MetadataReadError(ReleaseMatrixError, OSError):
    """A metadata JSON file is absent or unreadable."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to read release metadata {path}: {reason}")


class MetadataParseError(ReleaseMatrixError, ValueError):
    """A metadata file is not valid JSON or does not have the expected shape."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        self.detail = message
        super().__init__(f"{path}: {message}" if path is not None else message)


class MissingArtifactError(ReleaseMatrixError):
    """Packages were not found for one or more build configurations."""

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing = tuple(missing)
        joined = "' '".join(self.missing)
        super().__init__(f"Missing packages for config(s): '{joined}'")
