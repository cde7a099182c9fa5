"""Read and parse the release metadata JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, StrictStr, TypeAdapter, ValidationError

from release_matrix.errors import MetadataParseError, MetadataReadError

LOGGER = logging.getLogger(__name__)

InstallPlatform = Annotated[list[StrictStr], Field(min_length=3, max_length=3)]
PlatformMap = dict[str, list[list[str]]]
PlatformNameMap = dict[str, str]

_PLATFORM_MAP_ADAPTER: TypeAdapter[PlatformMap] = TypeAdapter(
    dict[StrictStr, Annotated[list[InstallPlatform], Field(min_length=1)]]
)
_PLATFORM_NAME_MAP_ADAPTER: TypeAdapter[PlatformNameMap] = TypeAdapter(dict[StrictStr, StrictStr])


def platform_map_filename(project: str) -> str:
    return f"{project}.json"


def platform_name_map_filename(project: str) -> str:
    return f"{project}-platform-names.json"


def read_metadata_text(path: Path, logger: logging.Logger | None = None) -> str:
    """Return the raw text of a metadata file."""

    effective_logger = logger or LOGGER
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise MetadataReadError(path, "file does not exist") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise MetadataReadError(path, str(exc)) from exc
    effective_logger.debug("metadata.read path=%s bytes=%s", path, len(text))
    return text


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = "/".join(str(part) for part in first["loc"]) or "<root>"
    suffix = f" (+{exc.error_count() - 1} more)" if exc.error_count() > 1 else ""
    return f"{location}: {first['msg']}{suffix}"


def _decode_object(text: str, path: Path | None) -> dict[str, Any]:
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MetadataParseError(f"invalid JSON: {exc}", path=path) from exc
    if not isinstance(decoded, dict):
        raise MetadataParseError(
            f"expected a JSON object at top level, got {type(decoded).__name__}",
            path=path,
        )
    return decoded


def parse_platform_map(text: str, path: Path | None = None) -> PlatformMap:
    """Decode a build-configuration -> install-platforms mapping.

    Key order of the source document is preserved. Each value must be a
    non-empty array of ``[family, version, architecture]`` string triples.
    Numbers are rejected rather than coerced, so ``["el", 5, "x86_64"]`` is a
    parse error.
    """

    decoded = _decode_object(text, path)
    try:
        return _PLATFORM_MAP_ADAPTER.validate_python(decoded)
    except ValidationError as exc:
        raise MetadataParseError(_describe_validation_error(exc), path=path) from exc


def parse_platform_name_map(text: str, path: Path | None = None) -> PlatformNameMap:
    """Decode a flat short-name -> long-name mapping."""

    decoded = _decode_object(text, path)
    try:
        return _PLATFORM_NAME_MAP_ADAPTER.validate_python(decoded)
    except ValidationError as exc:
        raise MetadataParseError(_describe_validation_error(exc), path=path) from exc
