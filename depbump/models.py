"""Data models for depbump.

These Pydantic models represent the per-run snapshot of the monorepo
(which package declares which dependency, and how) plus the values derived
while planning and performing an upgrade.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class DependencyClass(str, Enum):
    """The package.json section a dependency is declared in."""

    DEPENDENCIES = "dependencies"
    DEV_DEPENDENCIES = "devDependencies"
    PEER_DEPENDENCIES = "peerDependencies"


class DependencyManager(str, Enum):
    """The JavaScript package manager used by the project."""

    NPM = "npm"
    YARN = "yarn"


class PackInfo(BaseModel):
    """How a single workspace package declares a dependency.

    Both fields absent means the package does not depend on it.

    Attributes:
        version: Declared version string, as written in package.json.
        source: The dependency class it is declared under.
    """

    model_config = ConfigDict(frozen=True)

    version: str | None = None
    source: DependencyClass | None = None


class DependencyInfo(BaseModel):
    """Everything known locally about one external dependency.

    Attributes:
        versions: Every version string declared somewhere in the monorepo.
        packs: Map of workspace package name → PackInfo, only for packages
               that declare the dependency.
    """

    versions: set[str] = Field(default_factory=set)
    packs: dict[str, PackInfo] = Field(default_factory=dict)


DependencyMap = dict[str, DependencyInfo]


class Workspace(BaseModel):
    """A scanned monorepo: its name, layout and dependency snapshot."""

    name: str
    project_dir: Path
    packages_dir: Path
    packages: list[str] = Field(default_factory=list)
    dependency_map: DependencyMap = Field(default_factory=dict)

    def package_dir(self, package: str) -> Path:
        return self.packages_dir / package


class RegistryInfo(BaseModel):
    """Registry metadata for a package.

    Attributes:
        versions: All published versions, oldest first (registry order).
        dist_tags: Tag name → version, in the order the registry reports them.
    """

    model_config = ConfigDict(frozen=True)

    versions: tuple[str, ...] = ()
    dist_tags: dict[str, str] = Field(default_factory=dict)


class Candidate(BaseModel):
    """A version offered to the operator, with the reason it is offered.

    Attributes:
        version: The version string that will be installed if chosen.
        note: "#<dist-tag>", "Highest installed", or None for a plain
              registry version.
    """

    model_config = ConfigDict(frozen=True)

    version: str
    note: str | None = None

    @property
    def label(self) -> str:
        return f"{self.version} {self.note}" if self.note else self.version


class PackState(BaseModel):
    """Resolved state of a dependency within one workspace package."""

    model_config = ConfigDict(frozen=True)

    installed: bool
    version: str | None = None
    source: DependencyClass | None = None


class InstallPlan(BaseModel):
    """The concrete install invocation for one package.

    Attributes:
        package: Workspace package receiving the dependency.
        manager: Package manager that runs the install.
        dependency_class: Section the dependency lands in.
        args: Command and arguments, e.g. ["yarn", "add", "--dev", "x@1.0.0"].
        cwd: Directory the command runs in.
    """

    package: str
    manager: DependencyManager
    dependency_class: DependencyClass
    args: list[str]
    cwd: Path

    @property
    def command(self) -> str:
        return " ".join(self.args)


class UpgradeResult(BaseModel):
    """Records what happened to one selected package during the install loop.

    Used to build the summary and the commit message body.
    """

    package: str
    from_version: str | None = None
    to_version: str
    skipped: bool = False
