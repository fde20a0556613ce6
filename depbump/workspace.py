"""Workspace discovery: find packages and build the dependency map.

A workspace is a project directory with a root package.json and a packages
directory holding one subdirectory (with its own package.json) per package.
The directory name is the package name used throughout depbump, because
installs run inside `<packages_dir>/<name>`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .errors import WorkspaceError
from .models import DependencyClass, DependencyInfo, DependencyMap, PackInfo, Workspace
from .shell import info, step


def load_package_json(path: Path) -> dict[str, Any]:
    """Load and parse a package.json file.

    Raises:
        WorkspaceError: If the file is not a JSON object.
    """
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as exc:
        raise WorkspaceError(f"Could not read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise WorkspaceError(f"{path} does not contain a JSON object")
    return data


def build_dependency_map(manifests: dict[str, dict[str, Any]]) -> DependencyMap:
    """Index every external dependency declared by the given packages.

    Sections are read in DependencyClass order, so a dependency declared in
    both dependencies and peerDependencies of one package is recorded as a
    runtime dependency; every declared version still lands in `versions`.

    Args:
        manifests: Map of package name → parsed package.json.

    Raises:
        WorkspaceError: If a dependency section is not a JSON object.
    """
    dependency_map: DependencyMap = {}
    for package, manifest in manifests.items():
        for dependency_class in DependencyClass:
            section = manifest.get(dependency_class.value) or {}
            if not isinstance(section, dict):
                raise WorkspaceError(
                    f'{package}/package.json: "{dependency_class.value}" must be a JSON object'
                )
            for name, version in section.items():
                dep = dependency_map.setdefault(name, DependencyInfo())
                dep.versions.add(str(version))
                if package not in dep.packs:
                    dep.packs[package] = PackInfo(version=str(version), source=dependency_class)
    return dict(sorted(dependency_map.items()))


def discover_workspace(project_dir: Path, packages_dir: Path) -> Workspace:
    """Scan the project and return its packages and dependency map.

    Args:
        project_dir: Monorepo root (holds package.json and the lockfile).
        packages_dir: Directory containing one folder per package; relative
                      paths are resolved against project_dir.

    Raises:
        WorkspaceError: If the packages directory is missing or empty.
    """
    step("Discovering workspace packages")

    project_dir = project_dir.resolve()
    if not packages_dir.is_absolute():
        packages_dir = project_dir / packages_dir
    if not packages_dir.is_dir():
        raise WorkspaceError(f"Packages directory not found: {packages_dir}")

    root_manifest = project_dir / "package.json"
    name = project_dir.name
    if root_manifest.exists():
        name = load_package_json(root_manifest).get("name") or name

    manifests: dict[str, dict[str, Any]] = {}
    for d in sorted(p for p in packages_dir.iterdir() if p.is_dir()):
        manifest = d / "package.json"
        if manifest.exists():
            manifests[d.name] = load_package_json(manifest)

    if not manifests:
        raise WorkspaceError(f"No packages with a package.json found in {packages_dir}")

    dependency_map = build_dependency_map(manifests)
    for package in manifests:
        info(f"  {package}")
    info(f"  {len(manifests)} packages, {len(dependency_map)} dependencies")

    return Workspace(
        name=name,
        project_dir=project_dir,
        packages_dir=packages_dir,
        packages=list(manifests),
        dependency_map=dependency_map,
    )
