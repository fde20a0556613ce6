"""CLI entry point for depbump."""

from __future__ import annotations

from pathlib import Path

import click

from depbump.config import Settings, load_settings
from depbump.errors import DepbumpError
from depbump.models import Workspace
from depbump.shell import fatal, info
from depbump.wizard import plural, run_upgrade, version_color
from depbump.workspace import discover_workspace

project_dir_option = click.option(
    "--project-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Monorepo root (holds package.json and the lockfile).",
)
packages_dir_option = click.option(
    "--packages-dir",
    default=None,
    help="Directory holding one folder per package [default: packages].",
)


def _load(project_dir: Path, **overrides) -> tuple[Settings, Workspace]:
    """Resolve settings and scan the workspace, exiting cleanly on errors."""
    try:
        settings = load_settings(project_dir, **overrides)
        workspace = discover_workspace(project_dir, Path(settings.packages_dir))
    except DepbumpError as exc:
        fatal(str(exc))
    return settings, workspace


@click.group()
@click.version_option(package_name="depbump")
def cli() -> None:
    """Upgrade a shared dependency across the packages of a monorepo."""


@cli.command()
@project_dir_option
@packages_dir_option
@click.option(
    "--dedupe/--no-dedupe",
    default=None,
    help="List dependencies with the most distinct versions first.",
)
def upgrade(project_dir: Path, packages_dir: str | None, dedupe: bool | None) -> None:
    """Interactively pick a dependency, a version and packages to install it in."""
    settings, workspace = _load(project_dir, packages_dir=packages_dir, dedupe=dedupe)
    try:
        run_upgrade(
            workspace,
            dedupe=settings.dedupe,
            registry_command=settings.registry_command,
        )
    except DepbumpError as exc:
        fatal(str(exc))


@cli.command(name="list")
@project_dir_option
@packages_dir_option
def list_dependencies(project_dir: Path, packages_dir: str | None) -> None:
    """Show every dependency and where it is declared."""
    _, workspace = _load(project_dir, packages_dir=packages_dir)
    for name, dep in workspace.dependency_map.items():
        count = len(dep.versions)
        badge = click.style(f"({plural('version', 'versions', count)})", fg=version_color(count))
        info(f"{click.style(name, bold=True)} {badge}")
        for package, pack in dep.packs.items():
            source = pack.source.value if pack.source else "?"
            info(f"  {package}: {pack.version} [{source}]")
