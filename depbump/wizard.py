"""Upgrade wizard: pick → lookup → select → install → branch → commit.

This module drives one interactive upgrade run:
1. Pick a dependency already used in the monorepo, or add a new one
2. Look it up in the registry (a failed lookup ends the run)
3. Pick the workspace packages that should receive it
4. Pick the target version from the candidate list
5. Install it into each package in turn, skipping packages already at the
   target version; a failed install is reported and the loop continues
6. Optionally create a git branch and a commit describing the change

Every step is awaited before the next starts; nothing runs concurrently.
"""

from __future__ import annotations

import re
import subprocess
import time

import click

from .candidates import build_candidates
from .errors import ConfigurationError, DepbumpError, InstallCommandError, RegistryLookupError
from .models import (
    Candidate,
    DependencyClass,
    DependencyManager,
    DependencyMap,
    RegistryInfo,
    UpgradeResult,
    Workspace,
)
from .plan import build_install_plan, detect_manager, existing_class, offered_classes
from .prompts import Choice, checkbox, confirm, search_select, select, text
from .registry import fetch_registry_info
from .shell import capture, error, fatal, format_duration, git, info, run, step, success, warn
from .state import is_satisfied, resolve_pack_state


def plural(singular: str, many: str, count: int) -> str:
    return f"{count} {many if count > 1 else singular}"


def version_color(count: int) -> str:
    """Green for a single version across the monorepo, red for three or more."""
    if count <= 1:
        return "green"
    return "yellow" if count == 2 else "red"


def _matches(query: str, name: str) -> bool:
    try:
        return re.search(query, name) is not None
    except re.error:
        return query in name


def dependency_choices(dependency_map: DependencyMap, query: str, dedupe: bool) -> list[Choice]:
    """List dependencies for the picker, filtered by `query`.

    Names are sorted alphabetically, or with `dedupe` by number of distinct
    versions (most fragmented first). A non-empty query that is not an
    existing dependency adds a trailing "+ ADD NEW" entry for it.
    """
    names = sorted(name for name in dependency_map if not query or _matches(query, name))
    if dedupe:
        names.sort(key=lambda name: len(dependency_map[name].versions), reverse=True)

    choices = []
    for name in names:
        count = len(dependency_map[name].versions)
        badge = click.style(f"({plural('version', 'versions', count)})", fg=version_color(count))
        choices.append(Choice(name=f"{name} {badge}", value=name))

    if query and query not in dependency_map:
        add_new = click.style("+ ADD NEW", fg="green", bold=True)
        choices.append(Choice(name=f"{query} {add_new}", value=query))
    return choices


def package_choices(workspace: Workspace, dependency: str) -> list[Choice]:
    """Checkbox entries for every package, pre-checked where the dependency is declared."""
    choices = []
    for package in workspace.packages:
        state = resolve_pack_state(workspace.dependency_map, dependency, package)
        if not state.installed:
            choices.append(Choice(name=package, value=package))
            continue
        dev = ""
        if state.source == DependencyClass.DEV_DEPENDENCIES:
            dev = click.style(" (dev)", bold=True)
        label = f"{package} ({state.version}){dev}"
        choices.append(Choice(name=label, value=package, checked=True))
    return choices


def version_choices(candidates: list[Candidate]) -> list[Choice]:
    choices = []
    for candidate in candidates:
        name = candidate.version
        if candidate.note:
            name = f"{name} {click.style(candidate.note, bold=True)}"
        choices.append(Choice(name=name, value=candidate.version))
    return choices


def select_dependency(workspace: Workspace, dedupe: bool = False) -> str:
    return search_select(
        "Select a dependency to upgrade:",
        lambda query: dependency_choices(workspace.dependency_map, query, dedupe),
        page_size=15,
    )


def lookup_registry(dependency: str, command: str = "npm") -> RegistryInfo | None:
    """Fetch registry metadata; None (after printing why) if the lookup fails."""
    info(f'Fetching package information for "{dependency}"')
    try:
        return fetch_registry_info(dependency, command)
    except RegistryLookupError as exc:
        error(str(exc))
        return None


def select_packages(workspace: Workspace, dependency: str) -> list[str]:
    return checkbox("Select packages to affect:", package_choices(workspace, dependency))


def select_version(workspace: Workspace, dependency: str, registry: RegistryInfo) -> str:
    existing = workspace.dependency_map.get(dependency)
    candidates = build_candidates(registry, existing.versions if existing else None)
    return select("Select version to install:", version_choices(candidates), page_size=10)


def choose_dependency_class(package: str, manager: DependencyManager) -> DependencyClass:
    """Ask which section a dependency new to `package` should land in."""
    choices = [Choice(name=cls.value, value=cls.value) for cls in offered_classes(manager)]
    answer = select(f'Select dependency installation type for "{package}"', choices, page_size=3)
    return DependencyClass(answer)


def install_packages(
    workspace: Workspace,
    dependency: str,
    version: str,
    packages: list[str],
) -> tuple[list[UpgradeResult], list[DepbumpError]]:
    """Install `dependency@version` into each package, in the given order.

    Packages already declaring exactly `version` are recorded as skipped and
    no command runs for them. A failing package is reported and left out of
    the results; the remaining packages are still attempted.

    Returns:
        Tuple of (results for skipped and installed packages, failures).
    """
    manager = detect_manager(workspace.project_dir)
    results: list[UpgradeResult] = []
    failures: list[DepbumpError] = []

    for package in packages:
        state = resolve_pack_state(workspace.dependency_map, dependency, package)

        if is_satisfied(state, version):
            info()
            info(f"Already installed ({version})")
            success(f"{package} ✓")
            info()
            results.append(
                UpgradeResult(
                    package=package,
                    from_version=state.version,
                    to_version=version,
                    skipped=True,
                )
            )
            continue

        dependency_class = existing_class(state) or choose_dependency_class(package, manager)

        try:
            plan = build_install_plan(
                dependency,
                version,
                package,
                workspace.package_dir(package),
                manager,
                dependency_class,
            )
        except ConfigurationError as exc:
            error(f"{package}: {exc}")
            failures.append(exc)
            continue

        info(f"{click.style(package, bold=True)}: {plan.command}")
        try:
            run(*plan.args, cwd=plan.cwd, log_time=True)
        except subprocess.CalledProcessError as exc:
            failure = InstallCommandError(package, plan.command, exc.returncode)
        except OSError:
            failure = InstallCommandError(package, plan.command, 127)
        else:
            success(f"{package} ✓")
            results.append(
                UpgradeResult(package=package, from_version=state.version, to_version=version)
            )
            continue

        error(str(failure))
        failures.append(failure)

    return results, failures


def commit_message_body(results: list[UpgradeResult]) -> str:
    """One line per installed package, e.g. "* web: 1.0.0 →  2.0.0".

    Packages new to the dependency get "* web: 2.0.0". Skipped packages
    are left out.
    """
    lines = []
    for result in results:
        if result.skipped:
            continue
        if result.from_version:
            lines.append(f"* {result.package}: {result.from_version} →  {result.to_version}")
        else:
            lines.append(f"* {result.package}: {result.to_version}")
    return "\n".join(lines)


def sanitize_branch_name(name: str) -> str:
    """Drop characters git refuses in branch names ("@" from scoped packages)."""
    return name.replace("@", "")


def git_user_name(workspace: Workspace) -> str:
    """Best-effort handle for branch names: github.user, then whoami."""
    for args in (("git", "config", "--get", "github.user"), ("whoami",)):
        try:
            output = capture(*args, cwd=workspace.project_dir, check=False)
        except OSError:
            continue
        if output:
            return output.splitlines()[0]
    return "upgrade"


def create_branch(workspace: Workspace, branch: str) -> None:
    info(f"{click.style(workspace.name, bold=True)}: git checkout -b {branch}")
    git("checkout", "-b", branch, cwd=workspace.project_dir)
    success("Branch created ✓")


def create_commit(workspace: Workspace, subject: str, body: str) -> None:
    info(f"{click.style(workspace.name, bold=True)}: git add . && git commit")
    git("add", ".", cwd=workspace.project_dir)
    git("commit", "-m", subject, "-m", body, cwd=workspace.project_dir)
    success("Commit created ✓")


def offer_version_control(
    workspace: Workspace,
    dependency: str,
    version: str,
    results: list[UpgradeResult],
) -> None:
    """Optionally branch and commit; each step is confirmed on its own.

    The name/message prompts only appear when their step was confirmed.
    """
    user = git_user_name(workspace)

    if confirm("Do you want to create a new git branch for the change?"):
        branch = text(
            "Enter a name for your branch:",
            default=sanitize_branch_name(f"{user}/{dependency}-{version}"),
        )
        create_branch(workspace, branch)

    if confirm("Do you want to create a new git commit for the change?"):
        subject = text(
            "Enter a git commit message:",
            default=f"Upgrade dependency: {dependency}@{version}",
        )
        create_commit(workspace, subject, commit_message_body(results))


def run_upgrade(
    workspace: Workspace,
    *,
    dedupe: bool = False,
    registry_command: str = "npm",
) -> list[UpgradeResult]:
    """Execute one full upgrade run.

    Args:
        workspace: Scanned monorepo; read-only for the run.
        dedupe: Sort the dependency picker by number of distinct versions.
        registry_command: CLI used for registry lookups.

    Returns:
        Results for every selected package that was skipped or installed.
    """
    step(f"Starting upgrade wizard for {workspace.name}")

    dependency = select_dependency(workspace, dedupe)
    registry = lookup_registry(dependency, registry_command)
    if registry is None:
        return []

    packages = select_packages(workspace, dependency)
    if not packages:
        warn("No packages selected.")
        return []

    version = select_version(workspace, dependency, registry)

    step(f"Installing {dependency}@{version}")
    started = time.perf_counter()
    results, failures = install_packages(workspace, dependency, version, packages)
    installed = [result for result in results if not result.skipped]

    if failures:
        warn(f"{plural('package', 'packages', len(failures))} failed to install")
    if not installed:
        info("Nothing was installed.")
        return results

    info(
        click.style(
            f"Installed {plural('package', 'packages', len(installed))} "
            f"in {format_duration(time.perf_counter() - started)}",
            bold=True,
        )
    )

    try:
        offer_version_control(workspace, dependency, version, results)
    except subprocess.CalledProcessError as exc:
        fatal(f"`{' '.join(map(str, exc.cmd))}` failed with exit code {exc.returncode}")
    return results
