"""Typer CLI entrypoint for release_matrix."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path

import typer
import yaml

from release_matrix.collect import (
    ArtifactCollection,
    CollectionOptions,
    artifacts_frame,
    build_manifest,
    discover_package_paths,
    platform_counts,
    write_manifest_json,
)
from release_matrix.config import AppSettings, load_settings
from release_matrix.errors import ReleaseMatrixError
from release_matrix.logging_utils import configure_logging

app = typer.Typer(
    add_completion=False,
    help="release_matrix command line interface.",
    no_args_is_help=True,
)

CONFIG_FILE_OPTION = typer.Option(
    None,
    "--config-file",
    help="Optional settings YAML path.",
    exists=False,
    file_okay=True,
    dir_okay=False,
    readable=True,
)
ROOT_OPTION = typer.Option(
    None,
    "--root",
    help="Build-output tree to scan (defaults to paths.release_root).",
    file_okay=False,
    dir_okay=True,
)


def _load_and_optionally_configure_logger(
    config_file: Path | None,
    configure: bool,
) -> tuple[AppSettings, logging.Logger]:
    settings = load_settings(config_file=config_file)
    if configure:
        logger = configure_logging(settings.paths.logs_root / "release_matrix.log")
    else:
        logger = logging.getLogger("release_matrix")
    return settings, logger


def _resolve_project(project: str | None, settings: AppSettings) -> str:
    chosen = project or settings.release.project
    if not chosen:
        raise typer.BadParameter("Provide PROJECT or set release.project in settings.")
    return chosen


def _build_collection(
    settings: AppSettings,
    logger: logging.Logger,
    *,
    project: str | None,
    root: Path | None,
    ignore_missing_packages: bool | None = None,
    build_version: str | None = None,
) -> ArtifactCollection:
    options = CollectionOptions.from_settings(settings)
    if ignore_missing_packages is not None:
        options = replace(options, ignore_missing_packages=ignore_missing_packages)
    if build_version:
        options = replace(options, build_version=build_version)
    return ArtifactCollection(
        _resolve_project(project, settings),
        options,
        root=root or settings.paths.release_root,
        logger=logger,
    )


def _fail(exc: ReleaseMatrixError) -> typer.Exit:
    typer.echo(f"error: {exc}", err=True)
    return typer.Exit(code=1)


@app.command("show-config")
def show_config(config_file: Path | None = CONFIG_FILE_OPTION) -> None:
    """Print the effective configuration after env overrides."""

    settings, _ = _load_and_optionally_configure_logger(config_file, configure=False)
    rendered = yaml.safe_dump(settings.as_dict(), sort_keys=False)
    typer.echo(rendered)


@app.command("package-paths")
def package_paths_cmd(
    root: Path | None = ROOT_OPTION,
    config_file: Path | None = CONFIG_FILE_OPTION,
) -> None:
    """List package files found under the build-output tree."""

    settings, logger = _load_and_optionally_configure_logger(config_file, configure=True)
    scan_root = (root or settings.paths.release_root).resolve()
    for path in discover_package_paths(scan_root, logger=logger):
        typer.echo(path)


@app.command("platform-names")
def platform_names_cmd(
    project: str | None = typer.Argument(None, help="Project name (defaults to release.project)."),
    root: Path | None = ROOT_OPTION,
    config_file: Path | None = CONFIG_FILE_OPTION,
) -> None:
    """Print the short -> long platform name map of a release."""

    settings, logger = _load_and_optionally_configure_logger(config_file, configure=True)
    collection = _build_collection(settings, logger, project=project, root=root)
    try:
        names = collection.platform_name_map()
    except ReleaseMatrixError as exc:
        raise _fail(exc) from exc
    for short_name, long_name in names.items():
        typer.echo(f"{short_name}: {long_name}")


@app.command("resolve")
def resolve_cmd(
    project: str | None = typer.Argument(None, help="Project name (defaults to release.project)."),
    root: Path | None = ROOT_OPTION,
    ignore_missing_packages: bool | None = typer.Option(
        None,
        "--ignore-missing-packages/--fail-on-missing-packages",
        help="Warn instead of failing when a build configuration has no package.",
    ),
    build_version: str | None = typer.Option(None, "--build-version", help="Version being released."),
    output: Path | None = typer.Option(
        None,
        "--output",
        help="Write the JSON release manifest to this path.",
        dir_okay=False,
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the manifest JSON to stdout."),
    config_file: Path | None = CONFIG_FILE_OPTION,
) -> None:
    """Resolve package files to their install platforms."""

    settings, logger = _load_and_optionally_configure_logger(config_file, configure=True)
    collection = _build_collection(
        settings,
        logger,
        project=project,
        root=root,
        ignore_missing_packages=ignore_missing_packages,
        build_version=build_version,
    )
    try:
        artifacts = collection.artifacts()
        manifest = build_manifest(collection, artifacts=artifacts)
    except ReleaseMatrixError as exc:
        raise _fail(exc) from exc

    logger.info(
        "resolve.summary project=%s artifacts=%s root=%s",
        collection.project,
        len(artifacts),
        collection.root,
    )

    if output is not None:
        written = write_manifest_json(manifest, output)
        logger.info("resolve.manifest_written path=%s", written)

    if as_json:
        typer.echo(json.dumps(manifest, indent=2))
        return

    frame = artifacts_frame(artifacts, manifest["platform_names"])
    typer.echo(f"project: {collection.project}")
    typer.echo(f"artifact_count: {len(artifacts)}")
    for artifact in artifacts:
        rendered = ", ".join("/".join(platform) for platform in artifact.platforms)
        typer.echo(f"{artifact.path} -> {rendered}")
    for platform, count in platform_counts(frame).items():
        typer.echo(f"platform[{platform}]: {count}")
    if output is not None:
        typer.echo(f"manifest_path: {output}")


def main() -> None:
    """CLI script entrypoint."""

    app()


if __name__ == "__main__":
    main()
