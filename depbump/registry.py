"""Registry lookups.

Asks the package manager CLI for a package's published versions and
dist-tags. The raw JSON is validated into a typed payload whose optional
`error` field is checked before anything else is trusted.
"""

from __future__ import annotations

import json
import subprocess
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import RegistryLookupError
from .models import RegistryInfo
from .shell import capture


class RegistryPayload(BaseModel):
    """Shape of `npm info <name> versions dist-tags --json`."""

    model_config = ConfigDict(populate_by_name=True)

    versions: list[str] = Field(default_factory=list)
    dist_tags: dict[str, str] = Field(default_factory=dict, alias="dist-tags")
    error: Any = None

    @field_validator("versions", mode="before")
    @classmethod
    def _single_version(cls, value: Any) -> Any:
        # npm prints a bare string when only one version was ever published
        return [value] if isinstance(value, str) else value


def parse_registry_output(dependency: str, raw: str) -> RegistryInfo:
    """Turn registry CLI output into RegistryInfo.

    Raises:
        RegistryLookupError: On empty or malformed output, an `error`
            payload, or a package with no published versions.
    """
    if not raw.strip():
        raise RegistryLookupError(dependency, "empty response")
    try:
        payload = RegistryPayload.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise RegistryLookupError(dependency, "unreadable response") from exc

    if payload.error is not None:
        detail = payload.error
        if isinstance(detail, dict):
            detail = detail.get("summary") or detail.get("code") or ""
        raise RegistryLookupError(dependency, str(detail))
    if not payload.versions:
        raise RegistryLookupError(dependency, "no published versions")

    return RegistryInfo(versions=tuple(payload.versions), dist_tags=payload.dist_tags)


def fetch_registry_info(dependency: str, command: str = "npm") -> RegistryInfo:
    """Fetch versions and dist-tags for a dependency from the registry.

    npm reports lookup failures as a JSON `error` object on a non-zero exit,
    so the exit code is not checked here; parse_registry_output decides.

    Args:
        dependency: Package name, e.g. "react" or "@babel/core".
        command: Registry CLI to invoke (anything accepting `info --json`).
    """
    try:
        raw = capture(command, "info", dependency, "versions", "dist-tags", "--json", check=False)
    except (OSError, subprocess.SubprocessError) as exc:
        raise RegistryLookupError(dependency, str(exc)) from exc
    return parse_registry_output(dependency, raw)
