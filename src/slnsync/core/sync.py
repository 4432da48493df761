"""Sync service: manifest -> scan -> hierarchy -> solution file.

``SolutionSync`` strings the four stages together::

    sync = SolutionSync(config)
    discovery = sync.discover(Path(".gitmodules"), Path("Zonit.sln"))
    result = sync.apply(discovery, Path("Zonit.sln"), mode="auto")
    print(result.mode, len(result.model.projects))

Emission modes:

``rewrite``
    Render the whole file from scratch after backing up any existing file.
``patch``
    Parse the existing file and splice in what is missing. The file must
    exist.
``auto``
    ``patch`` when the file exists, ``rewrite`` otherwise.

Paths in the solution are relative to the solution file's directory;
submodule paths are relative to the manifest's directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from slnsync.config import SyncConfig
from slnsync.core.hierarchy import SolutionModel, build_solution_model
from slnsync.core.solution import (
    ExistingSolutionState,
    backup_solution,
    parse_solution,
    patch_solution,
    read_solution_text,
    render_solution,
    write_solution_text,
)
from slnsync.discovery.manifest import list_submodules
from slnsync.discovery.models import SubmoduleScan
from slnsync.discovery.scanner import SubmoduleScanner
from slnsync.exceptions import ManifestError, SolutionFileError

logger = logging.getLogger(__name__)

MODES: tuple[str, ...] = ("auto", "rewrite", "patch")


@dataclass
class Discovery:
    """Output of stages 1 and 2.

    Attributes:
        repo_root: Directory containing the manifest.
        base_dir: Directory recorded paths are relative to (the solution's).
        submodules: Normalized, sorted submodule paths.
        scans: One scan per submodule, same order.
    """

    repo_root: Path
    base_dir: Path
    submodules: list[str]
    scans: list[SubmoduleScan]

    @property
    def project_count(self) -> int:
        return sum(len(scan.projects) for scan in self.scans)

    @property
    def missing(self) -> list[str]:
        """Declared submodules whose directory does not exist."""
        return [scan.submodule for scan in self.scans if not scan.exists]

    @property
    def empty(self) -> list[str]:
        """Existing submodules that contributed no projects."""
        return [scan.submodule for scan in self.scans if scan.exists and scan.is_empty]


@dataclass
class SyncResult:
    """Outcome of writing the solution file.

    Attributes:
        mode: ``"rewrite"`` or ``"patch"``, the mode actually used.
        path: Solution file path.
        model: The model that was emitted or patched in.
        written: False when a patch found nothing to add.
        backup: Backup file created before a rewrite, if any.
        added_folders: Folders new to the file (all of them on rewrite).
        added_projects: Projects new to the file (all of them on rewrite).
        added_items: Solution items new to the file.
    """

    mode: str
    path: Path
    model: SolutionModel
    written: bool = True
    backup: Path | None = None
    added_folders: int = 0
    added_projects: int = 0
    added_items: int = 0


class SolutionSync:
    """Orchestrates discovery, hierarchy building, and emission."""

    def __init__(
        self,
        config: SyncConfig | None = None,
        scanner: SubmoduleScanner | None = None,
    ) -> None:
        self.config = config or SyncConfig()
        self.scanner = scanner or SubmoduleScanner(self.config)

    def list_submodules(self, manifest: Path) -> list[str]:
        """List submodules, treating a missing manifest as fatal.

        Raises:
            ManifestError: If the manifest file does not exist.
        """
        if not manifest.is_file():
            raise ManifestError(f"Submodule manifest not found: {manifest}")
        return list_submodules(manifest)

    def discover(self, manifest: Path, solution: Path) -> Discovery:
        """Run the lister and the scanner.

        Args:
            manifest: ``.gitmodules`` path; its directory is the repo root.
            solution: Target solution path; its directory anchors the
                relative paths written into the file.

        Raises:
            ManifestError: If the manifest file does not exist.
        """
        submodules = self.list_submodules(manifest)
        repo_root = manifest.resolve().parent
        base_dir = solution.resolve().parent
        logger.info("Found %d submodule(s) in %s", len(submodules), manifest)
        scans = self.scanner.scan_all(repo_root, submodules, base_dir)
        return Discovery(repo_root, base_dir, submodules, scans)

    def build(
        self, discovery: Discovery, existing: ExistingSolutionState | None = None,
    ) -> SolutionModel:
        """Build the solution model, reusing GUIDs from ``existing``."""
        if existing is None:
            return build_solution_model(discovery.scans)
        return build_solution_model(discovery.scans, existing.folder_ids, existing.project_ids)

    def rewrite(self, discovery: Discovery, solution: Path) -> SyncResult:
        """Back up and fully rewrite the solution file.

        Raises:
            BackupError: If an existing file cannot be backed up.
        """
        model = self.build(discovery)
        text = render_solution(model, self.config)
        backup = backup_solution(solution)
        write_solution_text(solution, text)
        logger.info("Wrote %s (%d folders, %d projects)", solution, len(model.folders), len(model.projects))
        return SyncResult(
            mode="rewrite",
            path=solution,
            model=model,
            backup=backup,
            added_folders=len(model.folders),
            added_projects=len(model.projects),
            added_items=model.item_count,
        )

    def patch(self, discovery: Discovery, solution: Path) -> SyncResult:
        """Incrementally patch an existing solution file.

        Raises:
            SolutionFileError: If the solution file does not exist.
            SolutionParseError: If its structure cannot be parsed.
        """
        if not solution.is_file():
            raise SolutionFileError(f"Solution file not found: {solution}")
        try:
            text = read_solution_text(solution)
        except (OSError, UnicodeDecodeError) as exc:
            raise SolutionFileError(f"Cannot read solution file {solution}: {exc}") from exc
        document = parse_solution(text)
        model = self.build(discovery, document.existing_state())
        patched = patch_solution(document, model, self.config)
        if patched.changed:
            write_solution_text(solution, patched.text)
            logger.info(
                "Patched %s (+%d folders, +%d projects, +%d items)",
                solution, len(patched.added_folders), len(patched.added_projects),
                patched.added_items,
            )
        else:
            logger.info("%s is already up to date", solution)
        return SyncResult(
            mode="patch",
            path=solution,
            model=model,
            written=patched.changed,
            added_folders=len(patched.added_folders),
            added_projects=len(patched.added_projects),
            added_items=patched.added_items,
        )

    def apply(self, discovery: Discovery, solution: Path, mode: str = "auto") -> SyncResult:
        """Emit the solution in the requested mode.

        Args:
            discovery: Result of ``discover``.
            solution: Solution file path.
            mode: One of ``MODES``.

        Raises:
            ValueError: On an unknown mode.
        """
        if mode not in MODES:
            raise ValueError(f"Unknown mode {mode!r}; expected one of {', '.join(MODES)}")
        if mode == "rewrite" or (mode == "auto" and not solution.exists()):
            return self.rewrite(discovery, solution)
        return self.patch(discovery, solution)
