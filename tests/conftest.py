"""Shared pytest fixtures for release_matrix tests."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

X64_CONFIG = "build_os=centos-5,machine_architecture=x64,role=oss-builder"
X86_CONFIG = "build_os=centos-5,machine_architecture=x86,role=oss-builder"

# By convention the first entry is the platform the build actually ran on.
PLATFORM_MAP_JSON = """{
  "build_os=centos-5,machine_architecture=x64,role=oss-builder": [
      ["el", "5", "x86_64"],
      ["sles", "11.2", "x86_64"]
  ],
  "build_os=centos-5,machine_architecture=x86,role=oss-builder": [
      ["el", "5", "i686"],
      ["sles", "11.2", "i686"]
  ]
}
"""

PLATFORM_NAME_MAP_JSON = """{
  "el" : "Enterprise Linux",
  "debian" : "Debian",
  "mac_os_x" : "OS X",
  "ubuntu" : "Ubuntu",
  "solaris2" : "Solaris",
  "sles" : "SUSE Enterprise",
  "suse" : "openSUSE",
  "windows" : "Windows"
}
"""

X64_PACKAGE = f"{X64_CONFIG}/pkg/demoproject-10.22.0-1.el5.x86_64.rpm"
X86_PACKAGE = f"{X86_CONFIG}/pkg/demoproject-10.22.0-1.el5.i686.rpm"


def write_release_tree(
    root: Path,
    packages: list[str],
    *,
    project: str = "demoproject",
    metadata_configs: tuple[str, ...] = (X64_CONFIG, X86_CONFIG),
    platform_map_json: str = PLATFORM_MAP_JSON,
    platform_name_map_json: str | None = PLATFORM_NAME_MAP_JSON,
) -> Path:
    """Lay out a copy-artifacts style build-output tree under root."""

    root.mkdir(parents=True, exist_ok=True)
    for config in metadata_configs:
        jenkins_dir = root / config / "jenkins"
        jenkins_dir.mkdir(parents=True, exist_ok=True)
        (jenkins_dir / f"{project}.json").write_text(platform_map_json, encoding="utf-8")
        if platform_name_map_json is not None:
            (jenkins_dir / f"{project}-platform-names.json").write_text(platform_name_map_json, encoding="utf-8")
    for package in packages:
        package_path = root / package
        package_path.parent.mkdir(parents=True, exist_ok=True)
        package_path.write_bytes(b"package")
    return root


@pytest.fixture
def release_root(tmp_path: Path) -> Path:
    """A complete release: both configurations built, with version markers."""

    return write_release_tree(
        tmp_path / "release",
        [
            X64_PACKAGE,
            f"{X64_CONFIG}/pkg/BUILD_VERSION",
            X86_PACKAGE,
            f"{X86_CONFIG}/pkg/BUILD_VERSION",
        ],
    )


@pytest.fixture
def partial_release_root(tmp_path: Path) -> Path:
    """A release where the x64 build produced no package."""

    return write_release_tree(
        tmp_path / "release",
        [X86_PACKAGE, f"{X86_CONFIG}/pkg/BUILD_VERSION"],
    )


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    """Settings YAML whose project root is tmp_path, so logs stay there."""

    path = tmp_path / "configs" / "settings.yaml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        "release:\n  project: demoproject\n  ignore_missing_packages: false\n"
        "paths:\n  release_root: ./release\n  logs_root: ./logs\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """The CLI reconfigures root handlers; put them back after each test."""

    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    root_logger.setLevel(level)


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("RELEASE_MATRIX_SETTINGS_FILE", "RELEASE_MATRIX_RELEASE__PROJECT", "RELEASE_MATRIX_RELEASE__IGNORE_MISSING_PACKAGES"):
        monkeypatch.delenv(name, raising=False)


def platform_map_literal() -> dict[str, list[list[str]]]:
    return json.loads(PLATFORM_MAP_JSON)
