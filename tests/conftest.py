"""Shared fixtures for slnsync tests.

Repositories are built on disk under ``tmp_path``: a ``.gitmodules``
manifest at the root plus one directory tree per submodule.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

import pytest

from slnsync.core.hierarchy import SolutionModel, build_solution_model
from slnsync.discovery.classify import classify_category
from slnsync.discovery.models import DiscoveredProject, SolutionItemFile, SubmoduleScan

PROJECT_XML = '<Project Sdk="Microsoft.NET.Sdk">\n</Project>\n'

RepoFactory = Callable[..., Path]


def write_manifest(root: Path, paths: Iterable[str]) -> Path:
    """Write a ``.gitmodules`` file declaring ``paths`` and return it."""
    lines: list[str] = []
    for path in paths:
        name = path.rstrip("/").rsplit("/", 1)[-1]
        lines += [
            f'[submodule "{name}"]',
            f"\tpath = {path}",
            f"\turl = https://example.com/{name}.git",
        ]
    manifest = root / ".gitmodules"
    manifest.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return manifest


@pytest.fixture
def make_repo(tmp_path: Path) -> RepoFactory:
    """Factory building a repository tree.

    Call with a mapping of submodule path -> files relative to it. Project
    descriptors get a minimal XML body, everything else a line of text.
    ``declared_only`` lists submodules that are declared but not on disk.
    """

    def _make(
        layout: dict[str, list[str]], declared_only: Iterable[str] = (),
    ) -> Path:
        for submodule, files in layout.items():
            base = tmp_path / submodule
            base.mkdir(parents=True, exist_ok=True)
            for rel in files:
                target = base / rel
                target.parent.mkdir(parents=True, exist_ok=True)
                if target.suffix in (".csproj", ".vbproj", ".fsproj"):
                    target.write_text(PROJECT_XML, encoding="utf-8")
                else:
                    target.write_text("content\n", encoding="utf-8")
        write_manifest(tmp_path, [*layout, *declared_only])
        return tmp_path

    return _make


@pytest.fixture
def zonit_repo(make_repo: RepoFactory) -> Path:
    """Two submodules, each with one project under a ``Source`` subdirectory."""
    return make_repo({
        "Source/Extensions/Zonit.Extensions.Ai": [
            "Source/Zonit.Extensions.Ai/Zonit.Extensions.Ai.csproj",
        ],
        "Source/Services/Zonit.Services.Dashboard": [
            "Source/Zonit.Services.Dashboard/Zonit.Services.Dashboard.csproj",
        ],
    })


@pytest.fixture
def make_model() -> Callable[..., SolutionModel]:
    """Factory building a ``SolutionModel`` without touching the disk.

    Accepts ``(project_path, folder_path)`` pairs and optional
    ``(item_path, folder_path)`` pairs, grouped into a single scan.
    """

    def _make(
        projects: Iterable[tuple[str, str]],
        items: Iterable[tuple[str, str]] = (),
        existing_folder_ids: dict[str, str] | None = None,
        existing_project_ids: dict[str, str] | None = None,
    ) -> SolutionModel:
        scan = SubmoduleScan(
            submodule="Source/Extensions/Zonit.Extensions.Ai",
            category=classify_category("Source/Extensions"),
            projects=[DiscoveredProject(p, f) for p, f in projects],
            items=[SolutionItemFile(p, f) for p, f in items],
        )
        return build_solution_model([scan], existing_folder_ids, existing_project_ids)

    return _make
