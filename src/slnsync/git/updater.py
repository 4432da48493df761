"""Sequential remote update of submodules via the ``git`` executable.

``SubmoduleUpdater.update_all`` first initializes all submodules from the
repository root, then, one submodule at a time:

1. ``git fetch origin``
2. resolve the remote default branch (``origin/HEAD``, falling back to
   ``main``)
3. ``git checkout <branch>``
4. ``git pull origin <branch>``

A failure in any step (git missing, non-zero exit, OS error) is logged
and recorded for that submodule only; the loop always moves on to the
next one and never aborts scanning or emission.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from slnsync.exceptions import SubmoduleUpdateError

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "main"

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


@dataclass
class UpdateReport:
    """Outcome of a submodule update pass.

    Attributes:
        updated: Submodules updated successfully, with the branch used.
        failed: Submodule -> error message for each failed update.
        init_error: Error from the initial ``git submodule update``, if any.
    """

    updated: dict[str, str] = field(default_factory=dict)
    failed: dict[str, str] = field(default_factory=dict)
    init_error: str | None = None

    @property
    def ok(self) -> bool:
        return not self.failed and self.init_error is None


class SubmoduleUpdater:
    """Runs git commands to bring each submodule up to date.

    Args:
        runner: Callable with the ``subprocess.run`` signature. Injected
            in tests to avoid touching the network.
        git: Name or path of the git executable.
    """

    def __init__(self, runner: Runner | None = None, git: str = "git") -> None:
        self._run = runner or subprocess.run
        self._git = git

    def _git_cmd(self, cwd: Path, *args: str) -> str:
        """Run one git command and return its stripped stdout.

        Raises:
            SubmoduleUpdateError: If git cannot be started or exits non-zero.
        """
        command: Sequence[str] = [self._git, *args]
        try:
            result = self._run(
                command, cwd=str(cwd), capture_output=True, text=True, check=False,
            )
        except OSError as exc:
            raise SubmoduleUpdateError(f"cannot run {' '.join(command)}: {exc}") from exc
        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            raise SubmoduleUpdateError(
                f"{' '.join(command)} exited with {result.returncode}: {detail}"
            )
        return (result.stdout or "").strip()

    def default_branch(self, path: Path) -> str:
        """Resolve the remote default branch name of a checkout."""
        try:
            ref = self._git_cmd(path, "symbolic-ref", "--short", "refs/remotes/origin/HEAD")
        except SubmoduleUpdateError:
            logger.debug("No origin/HEAD in %s, using %s", path, DEFAULT_BRANCH)
            return DEFAULT_BRANCH
        return ref.split("/", 1)[1] if ref.startswith("origin/") else (ref or DEFAULT_BRANCH)

    def init_submodules(self, repo_root: Path) -> None:
        """Run ``git submodule update --init --recursive`` in the repo root."""
        self._git_cmd(repo_root, "submodule", "update", "--init", "--recursive")

    def update_one(self, repo_root: Path, submodule: str) -> str:
        """Fetch, check out, and pull one submodule.

        Returns:
            The branch that was checked out.

        Raises:
            SubmoduleUpdateError: On any failing step.
        """
        path = repo_root / submodule
        if not path.is_dir():
            raise SubmoduleUpdateError(f"directory not found: {path}")
        self._git_cmd(path, "fetch", "origin")
        branch = self.default_branch(path)
        self._git_cmd(path, "checkout", branch)
        self._git_cmd(path, "pull", "origin", branch)
        return branch

    def update_all(self, repo_root: Path, submodules: list[str]) -> UpdateReport:
        """Update every submodule, continuing past individual failures.

        Args:
            repo_root: Repository root containing the manifest.
            submodules: Submodule paths in processing order.

        Returns:
            An ``UpdateReport`` listing successes and failures.
        """
        report = UpdateReport()
        try:
            self.init_submodules(repo_root)
        except SubmoduleUpdateError as exc:
            logger.warning("Submodule initialization failed: %s", exc)
            report.init_error = str(exc)

        for submodule in submodules:
            logger.info("Updating submodule %s", submodule)
            try:
                report.updated[submodule] = self.update_one(repo_root, submodule)
            except SubmoduleUpdateError as exc:
                logger.warning("Failed to update %s: %s", submodule, exc)
                report.failed[submodule] = str(exc)
        return report
