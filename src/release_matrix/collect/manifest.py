"""Tabular and JSON views of resolved release artifacts."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from uuid import uuid4

import polars as pl

from release_matrix.collect.artifacts import Artifact, ArtifactCollection

MANIFEST_SCHEMA_VERSION = "1"


def _artifact_frame_schema() -> dict[str, pl.DataType]:
    """Stable schema for the one-row-per-install-platform artifact frame."""

    return {
        "build_config": pl.String,
        "path": pl.String,
        "platform": pl.String,
        "platform_name": pl.String,
        "platform_version": pl.String,
        "architecture": pl.String,
    }


def artifacts_frame(
    artifacts: Sequence[Artifact],
    platform_names: Mapping[str, str] | None = None,
) -> pl.DataFrame:
    """Explode artifacts into one row per supported install platform.

    Row order follows artifact order, then platform order within each
    artifact. Unknown short names get a null ``platform_name``.
    """

    names = platform_names or {}
    rows: list[dict[str, object]] = []
    for artifact in artifacts:
        for family, version, arch in artifact.platforms:
            rows.append(
                {
                    "build_config": artifact.build_config,
                    "path": artifact.path,
                    "platform": family,
                    "platform_name": names.get(family),
                    "platform_version": version,
                    "architecture": arch,
                }
            )
    if not rows:
        return pl.DataFrame(schema=_artifact_frame_schema())
    return pl.DataFrame(rows, schema=_artifact_frame_schema())


def platform_counts(frame: pl.DataFrame) -> dict[str, int]:
    """Number of artifact/platform rows per short platform name."""

    if frame.height == 0 or "platform" not in frame.columns:
        return {}
    result: dict[str, int] = {}
    for row in frame.group_by("platform").len(name="count").to_dicts():
        result[str(row["platform"])] = int(row["count"])
    return dict(sorted(result.items()))


def build_manifest(
    collection: ArtifactCollection,
    artifacts: Sequence[Artifact] | None = None,
    generated_ts: datetime | None = None,
) -> dict[str, Any]:
    """Assemble the JSON-ready release manifest for a collection."""

    resolved = collection.artifacts() if artifacts is None else list(artifacts)
    return {
        "schema_version": MANIFEST_SCHEMA_VERSION,
        "project": collection.project,
        "build_version": collection.options.build_version,
        "generated_ts": (generated_ts or datetime.now(timezone.utc)).isoformat(),
        "artifacts": [artifact.as_dict() for artifact in resolved],
        "platform_names": collection.platform_name_map(),
    }


def _atomic_temp_path(target_path: Path) -> Path:
    """Create a temp path in the target directory for atomic replacement."""

    return target_path.parent / f".{target_path.name}.{uuid4().hex}.tmp"


def write_manifest_json(payload: Mapping[str, Any], output_path: Path) -> Path:
    """Write the manifest atomically and return its path.

    Keys are not sorted so artifact order and platform-map order survive.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = _atomic_temp_path(output_path)
    try:
        temp_path.write_text(json.dumps(payload, indent=2, default=str) + "\n", encoding="utf-8")
        os.replace(temp_path, output_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()
    return output_path
