"""Submodule scanner: find project files and solution items on disk.

For each declared submodule, walks its directory tree and records:

- every managed project descriptor (``.csproj``/``.vbproj``/``.fsproj``),
  found recursively but never inside an excluded directory;
- auxiliary files on the allow-list, taken only from the roots of the
  folders that become solution folders.

Each record carries the solution folder path it belongs to, computed by
one of two layout policies (see ``SyncConfig.layout``):

``submodule``
    ``Category\\<submodule leaf>`` for the submodule root, plus
    ``Category\\<leaf>\\<subdir>`` for each first-level subdirectory. Projects
    anywhere below a subdirectory attach to that subdirectory's folder.
``pattern``
    Every project is classified from its own path with ``classify_path``;
    root-level items use the classification of the submodule path.

A submodule directory missing on disk is reported with a warning and an
empty ``SubmoduleScan``; it never fails the run.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePosixPath

from slnsync.config import SyncConfig
from slnsync.discovery.classify import (
    FOLDER_SEPARATOR,
    classify_category,
    classify_path,
)
from slnsync.discovery.models import DiscoveredProject, SolutionItemFile, SubmoduleScan
from slnsync.discovery.patterns import (
    build_excluded_dirs,
    is_excluded_dir,
    is_project_file,
    is_solution_item,
)

logger = logging.getLogger(__name__)


def _relative(base_dir: Path, path: Path) -> str:
    """Return ``path`` relative to ``base_dir`` with ``/`` separators."""
    return Path(os.path.relpath(path, base_dir)).as_posix()


class SubmoduleScanner:
    """Scans submodule directories for projects and solution items.

    Usage::

        scanner = SubmoduleScanner(SyncConfig())
        scan = scanner.scan(Path("."), "Source/Extensions/Zonit.Extensions.Ai")
        for project in scan.projects:
            print(project.path, "->", project.folder_path)
    """

    def __init__(self, config: SyncConfig | None = None) -> None:
        self.config = config or SyncConfig()
        self._excluded = build_excluded_dirs(self.config.extra_excluded_dirs)

    # -- Filesystem helpers -------------------------------------------------

    def _list_dir(self, directory: Path) -> tuple[list[Path], list[Path]]:
        """Return (subdirectories, files) of a directory, sorted by name."""
        dirs: list[Path] = []
        files: list[Path] = []
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name.lower())
        except (PermissionError, OSError):
            logger.warning("Cannot list directory: %s", directory)
            return dirs, files
        for entry in entries:
            try:
                if entry.is_dir():
                    if not is_excluded_dir(entry.name, self._excluded):
                        dirs.append(entry)
                elif entry.is_file():
                    files.append(entry)
            except (PermissionError, OSError):
                continue
        return dirs, files

    def find_project_files(self, directory: Path) -> list[Path]:
        """Recursively find project descriptors, pruning excluded directories.

        Args:
            directory: Directory to walk.

        Returns:
            Project file paths in deterministic (sorted walk) order.
        """
        found: list[Path] = []
        for root, dirs, files in os.walk(directory):
            dirs[:] = sorted(
                (d for d in dirs if not is_excluded_dir(d, self._excluded)),
                key=str.lower,
            )
            for name in sorted(files, key=str.lower):
                if is_project_file(name):
                    found.append(Path(root) / name)
        return found

    def find_solution_items(self, directory: Path) -> list[Path]:
        """Return allow-listed auxiliary files directly inside ``directory``."""
        _, files = self._list_dir(directory)
        return [f for f in files if is_solution_item(f.name)]

    # -- Layout policies ----------------------------------------------------

    def _scan_submodule_layout(self, root: Path, base_dir: Path, scan: SubmoduleScan) -> None:
        base_folder = FOLDER_SEPARATOR.join(
            (scan.category.value, PurePosixPath(scan.submodule).name)
        )
        subdirs, files = self._list_dir(root)

        for file in files:
            rel = _relative(base_dir, file)
            if is_project_file(file.name):
                scan.projects.append(DiscoveredProject(rel, base_folder))
            elif is_solution_item(file.name):
                scan.items.append(SolutionItemFile(rel, base_folder))

        for subdir in subdirs:
            folder = FOLDER_SEPARATOR.join((base_folder, subdir.name))
            for item in self.find_solution_items(subdir):
                scan.items.append(SolutionItemFile(_relative(base_dir, item), folder))
            for project in self.find_project_files(subdir):
                scan.projects.append(DiscoveredProject(_relative(base_dir, project), folder))

    def _scan_pattern_layout(
        self, repo_root: Path, root: Path, base_dir: Path, scan: SubmoduleScan,
    ) -> None:
        prefix = self.config.prefix
        abbreviations = self.config.abbreviations
        base = classify_path(scan.submodule, prefix, abbreviations)
        for item in self.find_solution_items(root):
            scan.items.append(SolutionItemFile(_relative(base_dir, item), base.folder_path))
        for project in self.find_project_files(root):
            result = classify_path(_relative(repo_root, project), prefix, abbreviations)
            rel = _relative(base_dir, project)
            logger.debug("Classified %s as %s (%s)", rel, result.category.value, result.folder_path)
            scan.projects.append(DiscoveredProject(rel, result.folder_path))

    # -- Public API ---------------------------------------------------------

    def scan(
        self, repo_root: Path, submodule: str, base_dir: Path | None = None,
    ) -> SubmoduleScan:
        """Scan one submodule directory.

        Args:
            repo_root: Repository root the submodule path is relative to.
            submodule: Normalized submodule path from the manifest.
            base_dir: Directory recorded paths are made relative to,
                normally the solution file's directory. Defaults to
                ``repo_root``.

        Returns:
            A ``SubmoduleScan``. ``exists`` is False and the lists are empty
            when the directory is missing.
        """
        category = classify_category(submodule)
        logger.debug("Submodule %s classified as %s", submodule, category.value)
        scan = SubmoduleScan(submodule=submodule, category=category)

        root = repo_root / submodule
        if not root.is_dir():
            logger.warning("Submodule directory not found: %s", submodule)
            scan.exists = False
            return scan

        base_dir = repo_root if base_dir is None else base_dir
        if self.config.layout == "pattern":
            self._scan_pattern_layout(repo_root, root, base_dir, scan)
        else:
            self._scan_submodule_layout(root, base_dir, scan)

        if scan.is_empty:
            logger.warning("No projects found in submodule: %s", submodule)
        return scan

    def scan_all(
        self, repo_root: Path, submodules: list[str], base_dir: Path | None = None,
    ) -> list[SubmoduleScan]:
        """Scan every submodule in order.

        Args:
            repo_root: Repository root.
            submodules: Normalized submodule paths, already sorted.
            base_dir: See ``scan``.

        Returns:
            One ``SubmoduleScan`` per submodule, in input order.
        """
        return [self.scan(repo_root, submodule, base_dir) for submodule in submodules]
