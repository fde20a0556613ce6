"""Per-package dependency state lookups."""

from __future__ import annotations

from .models import DependencyMap, PackState


def resolve_pack_state(dependency_map: DependencyMap, dependency: str, package: str) -> PackState:
    """Report whether `package` already declares `dependency`, and how.

    A dependency missing from the map (i.e. new to the monorepo) or a package
    missing from its packs is reported as not installed.
    """
    info = dependency_map.get(dependency)
    pack = info.packs.get(package) if info else None
    if pack is None or pack.version is None:
        return PackState(installed=False)
    return PackState(installed=True, version=pack.version, source=pack.source)


def is_satisfied(state: PackState, target_version: str) -> bool:
    """True when the package already declares exactly the target version."""
    return state.installed and state.version == target_version
