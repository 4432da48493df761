"""Data models for the discovery stage.

Contains the records produced by ``SubmoduleScanner``: discovered project
files, auxiliary solution items, and the per-submodule scan result.
All paths are repository-relative and ``/`` separated; conversion to the
solution file's backslash convention happens at emission time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath

from slnsync.discovery.classify import ProjectCategory


@dataclass(frozen=True)
class DiscoveredProject:
    """A project descriptor file found under a submodule.

    Attributes:
        path: Repository-relative path of the descriptor file.
        folder_path: Backslash-joined solution folder it nests under.
    """

    path: str
    folder_path: str

    @property
    def name(self) -> str:
        """Project name: the descriptor's file name without extension."""
        return PurePosixPath(self.path).stem

    @property
    def kind(self) -> str:
        """Lower-case file extension, e.g. ``.csproj``."""
        return PurePosixPath(self.path).suffix.lower()


@dataclass(frozen=True)
class SolutionItemFile:
    """An auxiliary file displayed under a solution folder.

    Attributes:
        path: Repository-relative path of the file.
        folder_path: Backslash-joined solution folder it is listed under.
    """

    path: str
    folder_path: str


@dataclass
class SubmoduleScan:
    """Result of scanning one submodule directory.

    Attributes:
        submodule: Submodule path as declared in the manifest.
        category: Category the submodule itself resolves to.
        exists: False when the directory was missing on disk.
        projects: Project files found, in deterministic walk order.
        items: Auxiliary files found at the visited folder roots.
    """

    submodule: str
    category: ProjectCategory
    exists: bool = True
    projects: list[DiscoveredProject] = field(default_factory=list)
    items: list[SolutionItemFile] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when the scan contributed no projects."""
        return not self.projects
