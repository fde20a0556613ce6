"""Version candidate list for the version picker.

The order of the returned list is significant and is what the operator
sees: dist-tags in registry order, then the highest version already
declared in the monorepo, then every other published version newest first.
Each version appears exactly once; the first (highest priority) entry wins.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import Candidate, RegistryInfo
from .versions import highest_version

HIGHEST_INSTALLED = "Highest installed"


def build_candidates(
    registry: RegistryInfo,
    installed_versions: Iterable[str] | None = None,
) -> list[Candidate]:
    """Merge registry metadata and local versions into an ordered candidate list.

    Args:
        registry: Versions (oldest first) and dist-tags from the registry.
        installed_versions: Versions declared in the monorepo, or None when
            the dependency is new to the monorepo.

    Returns:
        Unique candidates, dist-tags and highest-installed pinned to the front.

    Example:
        versions=[1.0.0, 1.1.0, 2.0.0-rc.1, 2.0.0], tags={latest: 2.0.0},
        installed={1.0.0}
        → [2.0.0 #latest, 1.0.0 Highest installed, 2.0.0-rc.1, 1.1.0]
    """
    candidates: list[Candidate] = []
    seen: set[str] = set()

    def add(version: str, note: str | None = None) -> None:
        if version not in seen:
            seen.add(version)
            candidates.append(Candidate(version=version, note=note))

    for tag, version in registry.dist_tags.items():
        add(version, f"#{tag}")

    if installed_versions is not None:
        highest = highest_version(installed_versions)
        if highest is not None:
            add(highest, HIGHEST_INSTALLED)

    for version in reversed(registry.versions):
        add(version)

    return candidates
