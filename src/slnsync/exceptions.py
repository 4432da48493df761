"""slnsync exception hierarchy.

All public exceptions inherit from SlnSyncError, giving callers a single
base class to catch when they want to handle any slnsync-specific failure
without swallowing unrelated errors.

Errors local to a single submodule (missing directory, failed update) are
never raised; they are logged and recorded on the scan/update results.
Everything here is fatal for the run.
"""

from __future__ import annotations


class SlnSyncError(Exception):
    """Base exception for all slnsync errors."""


class ManifestError(SlnSyncError):
    """Raised when the submodule manifest is missing or unreadable."""


class ConfigError(SlnSyncError):
    """Raised when a configuration file is malformed.

    Covers YAML syntax errors, unknown keys, and values of the wrong type.
    """


class SolutionParseError(SlnSyncError):
    """Raised when an existing solution file does not follow the block grammar.

    Covers unterminated ``Project``/``Global`` blocks, stray end markers,
    nested blocks, and a missing ``Global ... EndGlobal`` section. Patching
    a file in this state would risk writing a corrupted solution.

    Attributes:
        line: One-based line number where the problem was detected, or
            None when the problem concerns the file as a whole.
    """

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class SolutionFileError(SlnSyncError):
    """Raised when the solution file required for an operation is missing."""


class BackupError(SlnSyncError):
    """Raised when the pre-rewrite backup copy of a solution file fails.

    The rewrite is aborted so that the previous file is never lost.
    """


class SubmoduleUpdateError(SlnSyncError):
    """Raised by a single git invocation during a submodule update.

    Caught per submodule by ``SubmoduleUpdater``; it never aborts a run.
    """
