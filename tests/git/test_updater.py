"""Tests for the sequential submodule updater.

git is never executed: a recording fake stands in for ``subprocess.run``.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from slnsync.exceptions import SubmoduleUpdateError
from slnsync.git.updater import SubmoduleUpdater


class FakeRunner:
    """Records git invocations and answers from a table of canned results.

    ``fail_in`` maps a directory name to the git subcommand that should
    fail when run there.
    """

    def __init__(self, fail_in: dict[str, str] | None = None, head: str | None = "origin/develop"):
        self.calls: list[tuple[str, list[str]]] = []
        self.fail_in = fail_in or {}
        self.head = head

    def __call__(self, command, cwd=None, **kwargs):
        args = list(command[1:])
        self.calls.append((Path(cwd).name, args))
        if self.fail_in.get(Path(cwd).name) == args[0]:
            return subprocess.CompletedProcess(command, 1, stdout="", stderr="fatal: boom")
        if args[:1] == ["symbolic-ref"]:
            if self.head is None:
                return subprocess.CompletedProcess(command, 128, stdout="", stderr="not a ref")
            return subprocess.CompletedProcess(command, 0, stdout=self.head + "\n", stderr="")
        return subprocess.CompletedProcess(command, 0, stdout="", stderr="")


@pytest.fixture
def repo(make_repo) -> Path:
    return make_repo({"Libs/A": ["A.csproj"], "Libs/B": ["B.csproj"]})


class TestUpdateOne:
    """Single submodule update."""

    def test_fetch_checkout_pull(self, repo: Path) -> None:
        runner = FakeRunner()
        branch = SubmoduleUpdater(runner).update_one(repo, "Libs/A")
        assert branch == "develop"
        assert [args for _, args in runner.calls] == [
            ["fetch", "origin"],
            ["symbolic-ref", "--short", "refs/remotes/origin/HEAD"],
            ["checkout", "develop"],
            ["pull", "origin", "develop"],
        ]
        assert all(cwd == "A" for cwd, _ in runner.calls)

    def test_default_branch_falls_back_to_main(self, repo: Path) -> None:
        runner = FakeRunner(head=None)
        assert SubmoduleUpdater(runner).update_one(repo, "Libs/A") == "main"

    def test_missing_directory(self, repo: Path) -> None:
        with pytest.raises(SubmoduleUpdateError, match="directory not found"):
            SubmoduleUpdater(FakeRunner()).update_one(repo, "Libs/Gone")

    def test_non_zero_exit(self, repo: Path) -> None:
        runner = FakeRunner(fail_in={"A": "pull"})
        with pytest.raises(SubmoduleUpdateError, match="fatal: boom"):
            SubmoduleUpdater(runner).update_one(repo, "Libs/A")

    def test_git_not_installed(self, repo: Path) -> None:
        def _missing(*args, **kwargs):
            raise FileNotFoundError("git")

        with pytest.raises(SubmoduleUpdateError, match="cannot run"):
            SubmoduleUpdater(_missing).update_one(repo, "Libs/A")


class TestUpdateAll:
    """Sequential update of every submodule."""

    def test_all_succeed(self, repo: Path) -> None:
        runner = FakeRunner()
        report = SubmoduleUpdater(runner).update_all(repo, ["Libs/A", "Libs/B"])
        assert report.ok
        assert report.updated == {"Libs/A": "develop", "Libs/B": "develop"}
        assert runner.calls[0][1] == ["submodule", "update", "--init", "--recursive"]

    def test_failure_continues_with_next(self, repo: Path) -> None:
        runner = FakeRunner(fail_in={"A": "fetch"})
        report = SubmoduleUpdater(runner).update_all(repo, ["Libs/A", "Libs/B"])
        assert not report.ok
        assert list(report.failed) == ["Libs/A"]
        assert report.updated == {"Libs/B": "develop"}

    def test_init_failure_recorded(self, repo: Path) -> None:
        runner = FakeRunner(fail_in={repo.name: "submodule"})
        report = SubmoduleUpdater(runner).update_all(repo, ["Libs/A"])
        assert report.init_error is not None
        assert report.updated == {"Libs/A": "develop"}

    def test_missing_directory_recorded(self, repo: Path) -> None:
        report = SubmoduleUpdater(FakeRunner()).update_all(repo, ["Libs/Gone", "Libs/B"])
        assert "Libs/Gone" in report.failed
        assert "Libs/B" in report.updated
