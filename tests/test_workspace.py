"""Tests for depbump.workspace."""

from __future__ import annotations

from pathlib import Path

import pytest

from depbump.errors import WorkspaceError
from depbump.models import DependencyClass, PackInfo
from depbump.workspace import build_dependency_map, discover_workspace, load_package_json


class TestBuildDependencyMap:
    """Tests for build_dependency_map()."""

    def test_collects_versions_and_packs(self) -> None:
        manifests = {
            "web": {"dependencies": {"react": "^18.2.0"}},
            "api": {"devDependencies": {"react": "17.0.2"}},
        }

        result = build_dependency_map(manifests)

        assert result["react"].versions == {"^18.2.0", "17.0.2"}
        assert result["react"].packs == {
            "web": PackInfo(version="^18.2.0", source=DependencyClass.DEPENDENCIES),
            "api": PackInfo(version="17.0.2", source=DependencyClass.DEV_DEPENDENCIES),
        }

    def test_first_class_wins_within_a_package(self) -> None:
        """dependencies beats devDependencies beats peerDependencies."""
        manifests = {
            "ui": {
                "peerDependencies": {"react": ">=17"},
                "devDependencies": {"react": "18.2.0"},
            }
        }

        result = build_dependency_map(manifests)

        assert result["react"].packs["ui"].source == DependencyClass.DEV_DEPENDENCIES
        assert result["react"].packs["ui"].version == "18.2.0"
        assert result["react"].versions == {">=17", "18.2.0"}

    def test_sorted_by_name(self) -> None:
        manifests = {"a": {"dependencies": {"zod": "3.0.0", "axios": "1.0.0"}}}

        assert list(build_dependency_map(manifests)) == ["axios", "zod"]

    def test_ignores_missing_and_null_sections(self) -> None:
        manifests = {"a": {"name": "a", "dependencies": None}}

        assert build_dependency_map(manifests) == {}

    def test_non_object_section(self) -> None:
        manifests = {"web": {"dependencies": ["react"]}}

        with pytest.raises(WorkspaceError, match='web/package.json: "dependencies"'):
            build_dependency_map(manifests)


class TestLoadPackageJson:
    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("{not json")

        with pytest.raises(WorkspaceError, match="Could not read"):
            load_package_json(path)

    def test_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("[]")

        with pytest.raises(WorkspaceError, match="JSON object"):
            load_package_json(path)


class TestDiscoverWorkspace:
    """Tests for discover_workspace()."""

    def test_scans_monorepo(self, monorepo: Path) -> None:
        workspace = discover_workspace(monorepo, Path("packages"))

        assert workspace.name == "acme"
        assert workspace.packages == ["api", "docs", "web"]
        assert workspace.packages_dir == monorepo.resolve() / "packages"
        assert workspace.package_dir("web") == monorepo.resolve() / "packages" / "web"
        assert set(workspace.dependency_map) == {"jest", "lodash", "react"}

    def test_pack_details(self, monorepo: Path) -> None:
        dependency_map = discover_workspace(monorepo, Path("packages")).dependency_map

        assert dependency_map["react"].packs["api"] == PackInfo(
            version="17.0.2", source=DependencyClass.PEER_DEPENDENCIES
        )
        assert dependency_map["lodash"].versions == {"4.17.21"}
        assert set(dependency_map["lodash"].packs) == {"api", "docs"}

    def test_packs_are_subset_of_packages(self, monorepo: Path) -> None:
        workspace = discover_workspace(monorepo, Path("packages"))

        for dep in workspace.dependency_map.values():
            assert set(dep.packs) <= set(workspace.packages)

    def test_name_falls_back_to_directory(self, tmp_path: Path) -> None:
        (tmp_path / "packages" / "one").mkdir(parents=True)
        (tmp_path / "packages" / "one" / "package.json").write_text('{"name": "one"}')

        workspace = discover_workspace(tmp_path, Path("packages"))

        assert workspace.name == tmp_path.resolve().name

    def test_absolute_packages_dir(self, monorepo: Path) -> None:
        workspace = discover_workspace(monorepo, monorepo / "packages")

        assert workspace.packages == ["api", "docs", "web"]

    def test_missing_packages_dir(self, tmp_path: Path) -> None:
        with pytest.raises(WorkspaceError, match="not found"):
            discover_workspace(tmp_path, Path("packages"))

    def test_no_packages(self, tmp_path: Path) -> None:
        (tmp_path / "packages" / "empty").mkdir(parents=True)

        with pytest.raises(WorkspaceError, match="No packages"):
            discover_workspace(tmp_path, Path("packages"))

    def test_malformed_section_names_package(self, monorepo: Path) -> None:
        (monorepo / "packages" / "docs" / "package.json").write_text(
            '{"name": "docs", "devDependencies": "jest"}'
        )

        with pytest.raises(WorkspaceError, match="docs/package.json"):
            discover_workspace(monorepo, Path("packages"))
