"""Install plan construction.

Decides, for one workspace package, which package manager runs the install,
which dependency class the dependency lands in, and the exact command line.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from .errors import ConfigurationError
from .models import DependencyClass, DependencyManager, InstallPlan, PackState

# (manager, class) → install flag; None means the manager's default needs no flag.
# npm has no flag for peer dependencies, so that pair is absent.
INSTALL_FLAGS: dict[DependencyManager, dict[DependencyClass, str | None]] = {
    DependencyManager.YARN: {
        DependencyClass.DEPENDENCIES: None,
        DependencyClass.DEV_DEPENDENCIES: "--dev",
        DependencyClass.PEER_DEPENDENCIES: "--peer",
    },
    DependencyManager.NPM: {
        DependencyClass.DEPENDENCIES: "--save",
        DependencyClass.DEV_DEPENDENCIES: "--save-dev",
    },
}

INSTALL_VERBS = {
    DependencyManager.YARN: "add",
    DependencyManager.NPM: "install",
}


def detect_manager(
    project_dir: Path, exists: Callable[[Path], bool] = Path.exists
) -> DependencyManager:
    """yarn when the project root has a yarn.lock, npm otherwise."""
    return DependencyManager.YARN if exists(project_dir / "yarn.lock") else DependencyManager.NPM


def offered_classes(manager: DependencyManager) -> list[DependencyClass]:
    """Dependency classes the operator may pick for a brand-new dependency.

    Only classes with a mapped install flag are offered, which keeps
    peerDependencies off the npm list.
    """
    return [cls for cls in DependencyClass if cls in INSTALL_FLAGS[manager]]


def install_flag(manager: DependencyManager, dependency_class: DependencyClass) -> str | None:
    """Look up the install flag for a manager/class pair.

    Raises:
        ConfigurationError: When the pair has no mapping (npm + peerDependencies).
    """
    flags = INSTALL_FLAGS[manager]
    if dependency_class not in flags:
        raise ConfigurationError(
            f"{manager.value} cannot install {dependency_class.value}; no install flag is mapped"
        )
    return flags[dependency_class]


def existing_class(state: PackState) -> DependencyClass | None:
    """The class to reuse for a package that already declares the dependency.

    Returns None for packages that do not have it yet, meaning the operator
    has to choose. An installed dependency with no recorded class is treated
    as a runtime dependency.
    """
    if not state.installed:
        return None
    return state.source or DependencyClass.DEPENDENCIES


def build_install_plan(
    dependency: str,
    version: str,
    package: str,
    package_dir: Path,
    manager: DependencyManager,
    dependency_class: DependencyClass,
) -> InstallPlan:
    """Produce the install command for one package.

    Example:
        ("react", "18.2.0", "web", ..., YARN, DEV_DEPENDENCIES)
        → yarn add --dev react@18.2.0
    """
    flag = install_flag(manager, dependency_class)
    args = [manager.value, INSTALL_VERBS[manager]]
    if flag:
        args.append(flag)
    args.append(f"{dependency}@{version}")
    return InstallPlan(
        package=package,
        manager=manager,
        dependency_class=dependency_class,
        args=args,
        cwd=package_dir,
    )
