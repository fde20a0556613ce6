"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from depbump.models import (
    DependencyClass,
    DependencyInfo,
    PackInfo,
    RegistryInfo,
    Workspace,
)


def write_package_json(directory: Path, data: dict) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "package.json"
    path.write_text(json.dumps(data, indent=2))
    return path


@pytest.fixture
def monorepo(tmp_path: Path) -> Path:
    """Create a small JavaScript monorepo on disk.

    Layout:
        package.json            name "acme"
        packages/web            react ^18.2.0, jest 29.7.0 (dev)
        packages/api            react 17.0.2 (peer), lodash 4.17.21
        packages/docs           lodash 4.17.21 (dev)
        packages/notes          (no package.json, ignored)
    """
    write_package_json(tmp_path, {"name": "acme", "private": True})
    packages = tmp_path / "packages"
    write_package_json(
        packages / "web",
        {
            "name": "@acme/web",
            "dependencies": {"react": "^18.2.0"},
            "devDependencies": {"jest": "29.7.0"},
        },
    )
    write_package_json(
        packages / "api",
        {
            "name": "@acme/api",
            "dependencies": {"lodash": "4.17.21"},
            "peerDependencies": {"react": "17.0.2"},
        },
    )
    write_package_json(
        packages / "docs",
        {"name": "@acme/docs", "devDependencies": {"lodash": "4.17.21"}},
    )
    (packages / "notes").mkdir()
    return tmp_path


@pytest.fixture
def sample_workspace(tmp_path: Path) -> Workspace:
    """An in-memory workspace with three packages and two dependencies."""
    return Workspace(
        name="acme",
        project_dir=tmp_path,
        packages_dir=tmp_path / "packages",
        packages=["pkg-a", "pkg-b", "pkg-c"],
        dependency_map={
            "react": DependencyInfo(
                versions={"1.0.0", "1.5.0"},
                packs={
                    "pkg-a": PackInfo(version="1.0.0", source=DependencyClass.DEPENDENCIES),
                    "pkg-b": PackInfo(version="1.5.0", source=DependencyClass.DEV_DEPENDENCIES),
                },
            ),
            "lodash": DependencyInfo(
                versions={"4.17.21"},
                packs={
                    "pkg-c": PackInfo(version="4.17.21", source=DependencyClass.DEPENDENCIES),
                },
            ),
        },
    )


@pytest.fixture
def registry_info() -> RegistryInfo:
    """Registry metadata with the usual latest/next tags."""
    return RegistryInfo(
        versions=("1.0.0", "1.5.0", "2.0.0-rc.1", "2.0.0", "2.1.0"),
        dist_tags={"latest": "2.0.0", "next": "2.1.0"},
    )
