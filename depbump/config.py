"""Project configuration.

Settings come from an optional depbump.toml at the project root, read with
tomlkit, and may be overridden from the command line:

    [depbump]
    packages-dir = "packages"
    dedupe = false
    registry-command = "npm"
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from tomlkit.exceptions import ParseError

from .errors import ConfigurationError

CONFIG_FILE = "depbump.toml"


class Settings(BaseModel):
    """Resolved settings for one run.

    Attributes:
        packages_dir: Directory (relative to the project root) holding one
                      subdirectory per workspace package.
        dedupe: Sort the dependency picker by number of distinct versions,
                most fragmented first.
        registry_command: CLI used for `info --json` registry lookups.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    packages_dir: str = Field(default="packages", alias="packages-dir")
    dedupe: bool = False
    registry_command: str = Field(default="npm", alias="registry-command")


def load_config_table(path: Path) -> dict[str, Any]:
    """Read the [depbump] table from a config file, {} if there is none."""
    if not path.exists():
        return {}
    try:
        doc = tomlkit.parse(path.read_text())
    except ParseError as exc:
        raise ConfigurationError(f"{path}: {exc}") from exc
    table = doc.get("depbump")
    if table is None:
        return {}
    if not isinstance(table, Mapping):
        raise ConfigurationError(f"{path}: [depbump] must be a table")
    return table.unwrap()


def load_settings(project_dir: Path, **overrides: Any) -> Settings:
    """Build Settings from depbump.toml, then apply non-None CLI overrides.

    Raises:
        ConfigurationError: When a value has the wrong type, naming the key.
    """
    table = load_config_table(project_dir / CONFIG_FILE)
    try:
        settings = Settings.model_validate(table)
    except ValidationError as exc:
        keys = ", ".join(str(err["loc"][0]) for err in exc.errors() if err["loc"])
        raise ConfigurationError(f"Invalid value in {CONFIG_FILE} for: {keys}") from exc
    updates = {key: value for key, value in overrides.items() if value is not None}
    return settings.model_copy(update=updates)
