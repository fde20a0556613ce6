"""Version parsing and ordering utilities.

Versions declared in package.json are often ranges ("^1.2.3", "~2.0") or
incomplete ("1.2"). Ordering strips the range operator and pads missing
components before handing the string to semver, so "^1.2" sorts as 1.2.0.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

import semver

# Leading range operators and a "v" prefix, e.g. "^", "~", ">=", "=v"
_RANGE_PREFIX = re.compile(r"^(?:[\^~]|[<>]=?|=|v)+")
_CORE = re.compile(r"^(\d+(?:\.\d+){0,2})(.*)$")


def parse_version(version_str: str) -> semver.Version:
    """Parse a declared version string into a semver.Version object.

    Handles range prefixes and incomplete versions:
    - "^1.2.3" → "1.2.3"
    - "~1.2" → "1.2.0"
    - "2.0.0-beta.1" → "2.0.0-beta.1" (pre-release kept)

    Raises:
        ValueError: If the string is not a (possibly incomplete) semver.
    """
    cleaned = _RANGE_PREFIX.sub("", version_str.strip()).strip()
    match = _CORE.match(cleaned)
    if not match:
        raise ValueError(f"{version_str!r} is not a valid version")
    parts = match.group(1).split(".")
    # Pad with zeros to ensure we have 3 parts
    while len(parts) < 3:
        parts.append("0")
    return semver.Version.parse(".".join(parts) + match.group(2))


def version_sort_key(version_str: str) -> tuple:
    """Sort key giving a total order over arbitrary version strings.

    Parseable versions sort by semver precedence (pre-releases before their
    release). Anything that is not a version ("latest", "workspace:*",
    git URLs) sorts below every parseable version, alphabetically among
    itself. Ties in precedence fall back to the raw string.
    """
    try:
        return (1, parse_version(version_str), version_str)
    except ValueError:
        return (0, version_str)


def sort_versions(versions: Iterable[str]) -> list[str]:
    """Sort version strings ascending."""
    return sorted(versions, key=version_sort_key)


def highest_version(versions: Iterable[str]) -> str | None:
    """Return the highest version, or None when there are none.

    Examples:
        {"1.0.0", "^1.10.0", "1.9.3"} → "^1.10.0"
        set() → None
    """
    ordered = sort_versions(versions)
    return ordered[-1] if ordered else None
