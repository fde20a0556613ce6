"""Exception types for depbump.

Every error the operator is expected to see derives from DepbumpError so the
CLI can print a clean message instead of a traceback.
"""

from __future__ import annotations


class DepbumpError(Exception):
    """Base class for user-facing depbump errors."""


class RegistryLookupError(DepbumpError):
    """The registry query failed or the package is unknown to the registry.

    Ends the run: nothing is installed once this is raised.
    """

    def __init__(self, dependency: str, detail: str = "") -> None:
        self.dependency = dependency
        self.detail = detail
        msg = f'There was an error looking up "{dependency}" in the registry'
        super().__init__(f"{msg}: {detail}" if detail else msg)


class InstallCommandError(DepbumpError):
    """An install subprocess for a single package exited non-zero."""

    def __init__(self, package: str, command: str, returncode: int) -> None:
        self.package = package
        self.command = command
        self.returncode = returncode
        super().__init__(f"{package}: `{command}` failed with exit code {returncode}")


class ConfigurationError(DepbumpError):
    """An invalid combination or value was requested (e.g. npm + peerDependencies)."""


class WorkspaceError(DepbumpError):
    """The monorepo layout could not be read."""
