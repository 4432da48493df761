"""Static file and directory patterns used by the submodule scanner.

Three tables drive discovery:

- ``EXCLUDED_DIRS``: directory names never descended into (version
  control metadata, IDE caches, package caches, build output, test
  results). Matched case-insensitively against the exact name.
- ``PROJECT_TYPES``: managed project descriptor extensions and the
  solution type GUID each one is registered under.
- ``SOLUTION_ITEM_PATTERNS``: glob patterns for auxiliary files shown as
  solution items (docs, ignore files, shared build props, editor config,
  SDK pinning, package source config, licenses).
"""

from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import PurePath

EXCLUDED_DIRS: frozenset[str] = frozenset({
    # -- Version control --
    ".git",
    ".svn",
    ".hg",
    # -- IDE caches --
    ".vs",
    ".vscode",
    ".idea",
    # -- Dependency / package caches --
    "node_modules",
    "packages",
    ".nuget",
    # -- Build output --
    "bin",
    "obj",
    # -- Test results --
    "testresults",
})

# Extension -> project type GUID.
PROJECT_TYPES: dict[str, str] = {
    ".csproj": "{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}",
    ".vbproj": "{F184B08F-C81C-45F6-A57F-5ABD9991F28F}",
    ".fsproj": "{F2A71F9B-5D33-465A-A702-920D77279786}",
}

SOLUTION_FOLDER_TYPE: str = "{2150E333-8FDC-42A3-9474-1A3956D46DE8}"

SOLUTION_ITEM_PATTERNS: tuple[str, ...] = (
    "*.md",
    "*.txt",
    ".gitignore",
    ".gitattributes",
    "directory.*.props",
    "directory.*.targets",
    ".editorconfig",
    "global.json",
    "nuget.config",
    "license",
    "license.*",
)


def build_excluded_dirs(extra: tuple[str, ...] | list[str] = ()) -> frozenset[str]:
    """Return the lower-cased exclusion set, extended with ``extra`` names."""
    return EXCLUDED_DIRS | {name.lower() for name in extra}


def is_excluded_dir(name: str, excluded: frozenset[str] = EXCLUDED_DIRS) -> bool:
    """Check a directory name against the exclusion set (case-insensitive)."""
    return name.lower() in excluded


def is_project_file(name: str) -> bool:
    """Check whether a file name is a managed project descriptor."""
    return PurePath(name).suffix.lower() in PROJECT_TYPES


def project_type_guid(name: str) -> str:
    """Return the solution type GUID for a project file name.

    Raises:
        KeyError: If the extension is not a supported project kind.
    """
    return PROJECT_TYPES[PurePath(name).suffix.lower()]


def is_solution_item(name: str) -> bool:
    """Check whether a file name is on the auxiliary file allow-list."""
    lowered = name.lower()
    return any(fnmatchcase(lowered, pattern) for pattern in SOLUTION_ITEM_PATTERNS)
