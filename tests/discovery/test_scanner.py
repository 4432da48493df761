"""Tests for the submodule scanner.

Verifies:
    - Project discovery is recursive and skips excluded directories.
    - Solution items are taken only from folder roots.
    - Folder assignment under the submodule and pattern layouts.
    - Missing and empty submodules produce warnings, not errors.
    - Recorded paths are relative to the requested base directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from slnsync.config import SyncConfig
from slnsync.discovery.classify import ProjectCategory
from slnsync.discovery.patterns import is_excluded_dir, is_project_file, is_solution_item
from slnsync.discovery.scanner import SubmoduleScanner

SUB = "Libs/Core"


class TestPatterns:
    """File and directory pattern tables."""

    @pytest.mark.parametrize("name", ["bin", "OBJ", ".git", "node_modules", "TestResults", ".vs"])
    def test_excluded_dirs(self, name: str) -> None:
        assert is_excluded_dir(name)

    @pytest.mark.parametrize("name", ["src", "Binaries", "objects", "Source"])
    def test_not_excluded_dirs(self, name: str) -> None:
        assert not is_excluded_dir(name)

    @pytest.mark.parametrize("name", ["A.csproj", "B.VBPROJ", "C.fsproj"])
    def test_project_files(self, name: str) -> None:
        assert is_project_file(name)

    @pytest.mark.parametrize("name", ["A.sln", "B.proj", "C.vcxproj", "csproj"])
    def test_not_project_files(self, name: str) -> None:
        assert not is_project_file(name)

    @pytest.mark.parametrize("name", [
        "README.md", "notes.TXT", ".gitignore", ".gitattributes", "Directory.Build.props",
        "Directory.Packages.targets", ".editorconfig", "global.json", "NuGet.Config",
        "LICENSE", "LICENSE.txt",
    ])
    def test_solution_items(self, name: str) -> None:
        assert is_solution_item(name)

    @pytest.mark.parametrize("name", ["Program.cs", "appsettings.json", "Directory.props"])
    def test_not_solution_items(self, name: str) -> None:
        assert not is_solution_item(name)


class TestProjectDiscovery:
    """Recursive project search."""

    def test_excluded_directories_pruned(self, make_repo) -> None:
        root = make_repo({SUB: [
            "src/App/App.csproj",
            "src/App/bin/Debug/Copy.csproj",
            "src/App/obj/Temp.csproj",
            "src/Lib/BIN/Upper.csproj",
            "packages/Pkg/Pkg.csproj",
        ]})
        scan = SubmoduleScanner().scan(root, SUB)
        assert [p.path for p in scan.projects] == ["Libs/Core/src/App/App.csproj"]

    def test_bin_at_submodule_level_excluded(self, make_repo) -> None:
        root = make_repo({SUB: ["bin/Debug/x.csproj", "src/Real.csproj"]})
        scan = SubmoduleScanner().scan(root, SUB)
        assert [p.name for p in scan.projects] == ["Real"]

    def test_extra_excluded_dirs(self, make_repo) -> None:
        root = make_repo({SUB: ["artifacts/Gen.csproj", "src/App.csproj"]})
        scanner = SubmoduleScanner(SyncConfig(extra_excluded_dirs=("Artifacts",)))
        assert [p.name for p in scanner.scan(root, SUB).projects] == ["App"]

    def test_all_project_kinds(self, make_repo) -> None:
        root = make_repo({SUB: ["src/A.csproj", "src/B.vbproj", "src/C.fsproj", "src/D.vcxproj"]})
        scan = SubmoduleScanner().scan(root, SUB)
        assert [p.kind for p in scan.projects] == [".csproj", ".vbproj", ".fsproj"]

    def test_deterministic_order(self, make_repo) -> None:
        root = make_repo({SUB: ["src/b/B.csproj", "src/a/A.csproj", "src/C.csproj"]})
        names = [p.name for p in SubmoduleScanner().scan(root, SUB).projects]
        assert names == ["C", "A", "B"]


class TestSubmoduleLayout:
    """Folder assignment for the default layout."""

    def test_project_nested_under_first_level_subdir(self, zonit_repo: Path) -> None:
        scan = SubmoduleScanner().scan(zonit_repo, "Source/Extensions/Zonit.Extensions.Ai")
        assert scan.category is ProjectCategory.EXTENSIONS
        [project] = scan.projects
        assert project.folder_path == "Extensions\\Zonit.Extensions.Ai\\Source"
        assert project.path == (
            "Source/Extensions/Zonit.Extensions.Ai/Source/"
            "Zonit.Extensions.Ai/Zonit.Extensions.Ai.csproj"
        )

    def test_project_at_root_uses_submodule_folder(self, make_repo) -> None:
        root = make_repo({SUB: ["Core.csproj"]})
        [project] = SubmoduleScanner().scan(root, SUB).projects
        assert project.folder_path == "Other\\Core"

    def test_items_only_at_folder_roots(self, make_repo) -> None:
        root = make_repo({SUB: [
            "README.md",
            "Program.cs",
            "src/Directory.Build.props",
            "src/App/README.md",
            "src/App/App.csproj",
        ]})
        scan = SubmoduleScanner().scan(root, SUB)
        assert {(i.path, i.folder_path) for i in scan.items} == {
            ("Libs/Core/README.md", "Other\\Core"),
            ("Libs/Core/src/Directory.Build.props", "Other\\Core\\src"),
        }

    def test_items_not_taken_from_excluded_dirs(self, make_repo) -> None:
        root = make_repo({SUB: ["obj/README.md", "src/App.csproj"]})
        assert SubmoduleScanner().scan(root, SUB).items == []


class TestPatternLayout:
    """Folder assignment for the pattern layout."""

    def test_project_classified_from_its_path(self, zonit_repo: Path) -> None:
        scanner = SubmoduleScanner(SyncConfig(layout="pattern"))
        scan = scanner.scan(zonit_repo, "Source/Extensions/Zonit.Extensions.Ai")
        [project] = scan.projects
        assert project.folder_path == "Extensions\\AI"

    def test_root_items_use_submodule_classification(self, make_repo) -> None:
        root = make_repo({"Source/Services/Zonit.Services.Api": ["README.md", "src/Api.csproj"]})
        scanner = SubmoduleScanner(SyncConfig(layout="pattern"))
        scan = scanner.scan(root, "Source/Services/Zonit.Services.Api")
        assert [i.folder_path for i in scan.items] == ["Services\\API"]
        assert [p.folder_path for p in scan.projects] == ["Services\\API"]


class TestMissingAndEmpty:
    """Per-submodule problems are reported, never raised."""

    def test_missing_directory(
        self, make_repo, caplog: pytest.LogCaptureFixture,
    ) -> None:
        root = make_repo({}, declared_only=["Source/Missing"])
        with caplog.at_level(logging.WARNING):
            scan = SubmoduleScanner().scan(root, "Source/Missing")
        assert scan.exists is False
        assert scan.projects == [] and scan.items == []
        assert "Source/Missing" in caplog.text

    def test_empty_submodule(self, make_repo, caplog: pytest.LogCaptureFixture) -> None:
        root = make_repo({SUB: ["README.md"]})
        with caplog.at_level(logging.WARNING):
            scan = SubmoduleScanner().scan(root, SUB)
        assert scan.exists is True
        assert scan.is_empty
        assert "No projects found" in caplog.text

    def test_scan_all_keeps_order(self, make_repo) -> None:
        root = make_repo({"A": ["A.csproj"], "B": ["B.csproj"]}, declared_only=["C"])
        scans = SubmoduleScanner().scan_all(root, ["A", "B", "C"])
        assert [s.submodule for s in scans] == ["A", "B", "C"]
        assert [s.exists for s in scans] == [True, True, False]


def test_paths_relative_to_base_dir(make_repo) -> None:
    root = make_repo({SUB: ["src/App.csproj"]})
    base = root / "build"
    base.mkdir()
    [project] = SubmoduleScanner().scan(root, SUB, base_dir=base).projects
    assert project.path == "../Libs/Core/src/App.csproj"
