"""Path classification: project category and target folder path.

``classify_path`` is a pure function. It maps a repository-relative path
onto a ``ProjectCategory`` and the backslash-joined solution folder path
the entry should be nested under. It performs no I/O and no logging;
callers narrate classification decisions themselves.

Rules, applied in order:

1. The first segment pair ``Services|Plugins|Extensions / <name>``
   (case-insensitive) selects that category. ``<name>`` is shortened by
   stripping ``<prefix>.<Category>.`` then ``<prefix>.``, run through the
   abbreviation table, and capitalized. Folder path: ``Category\\Name``.
2. Otherwise, any segment equal to ``Tests``, ``Samples`` or ``Tools``
   selects that bucket. Folder path: the bucket name.
3. Otherwise ``Other``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Mapping

FOLDER_SEPARATOR = "\\"


class ProjectCategory(Enum):
    """Top-level grouping of submodules and projects."""

    EXTENSIONS = "Extensions"
    SERVICES = "Services"
    PLUGINS = "Plugins"
    TESTS = "Tests"
    SAMPLES = "Samples"
    TOOLS = "Tools"
    OTHER = "Other"


# Categories recognized as ``<Category>/<name>`` segment pairs.
_NAMED_CATEGORIES: dict[str, ProjectCategory] = {
    "services": ProjectCategory.SERVICES,
    "plugins": ProjectCategory.PLUGINS,
    "extensions": ProjectCategory.EXTENSIONS,
}

# Categories recognized by a bare segment anywhere in the path.
_BUCKET_CATEGORIES: dict[str, ProjectCategory] = {
    "tests": ProjectCategory.TESTS,
    "samples": ProjectCategory.SAMPLES,
    "tools": ProjectCategory.TOOLS,
}


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one path.

    Attributes:
        category: The resolved category (never None).
        folder_path: Backslash-joined solution folder path, starting with
            the category name.
    """

    category: ProjectCategory
    folder_path: str


def split_segments(path: str) -> list[str]:
    """Split a path written with either separator into non-empty segments."""
    return [part for part in PurePosixPath(path.replace("\\", "/")).parts if part not in ("/", ".")]


def _strip_prefix(name: str, prefix: str) -> str:
    """Remove ``prefix`` from the start of ``name`` (case-insensitive)."""
    if prefix and name.lower().startswith(prefix.lower()) and len(name) > len(prefix):
        return name[len(prefix):]
    return name


def derive_display_name(
    name: str,
    category: ProjectCategory,
    prefix: str = "",
    abbreviations: Mapping[str, str] | None = None,
) -> str:
    """Shorten a submodule directory name into a folder display name.

    ``Zonit.Extensions.Ai`` with prefix ``Zonit`` in the Extensions
    category becomes ``Ai``, then ``AI`` through the abbreviation table.

    Args:
        name: Directory name following the category segment.
        category: Category the name was found under.
        prefix: Organisation/product prefix token, without trailing dot.
        abbreviations: Lower-case name -> display spelling.

    Returns:
        The derived display name; the original name if stripping would
        leave nothing.
    """
    derived = name
    if prefix:
        derived = _strip_prefix(derived, f"{prefix}.{category.value}.")
        derived = _strip_prefix(derived, f"{prefix}.")
    special = (abbreviations or {}).get(derived.lower())
    if special is not None:
        return special
    return derived[:1].upper() + derived[1:]


def classify_path(
    path: str,
    prefix: str = "",
    abbreviations: Mapping[str, str] | None = None,
) -> Classification:
    """Classify a repository-relative path.

    Args:
        path: Relative path, ``/`` or ``\\`` separated.
        prefix: Prefix token stripped from derived names.
        abbreviations: Display-name overrides keyed by lower-case name.

    Returns:
        The ``Classification`` for the path.
    """
    segments = split_segments(path)

    for index, segment in enumerate(segments[:-1]):
        category = _NAMED_CATEGORIES.get(segment.lower())
        if category is None:
            continue
        name = derive_display_name(segments[index + 1], category, prefix, abbreviations)
        return Classification(category, FOLDER_SEPARATOR.join((category.value, name)))

    lowered = {segment.lower() for segment in segments}
    for key, category in _BUCKET_CATEGORIES.items():
        if key in lowered:
            return Classification(category, category.value)

    return Classification(ProjectCategory.OTHER, ProjectCategory.OTHER.value)


def classify_category(path: str) -> ProjectCategory:
    """Return only the category of a path.

    Unlike ``classify_path``, a trailing category segment (``Source/Services``)
    also counts, since submodules are classified by their own location.
    """
    segments = [segment.lower() for segment in split_segments(path)]
    for segment in segments:
        if segment in _NAMED_CATEGORIES:
            return _NAMED_CATEGORIES[segment]
    for key, category in _BUCKET_CATEGORIES.items():
        if key in segments:
            return category
    return ProjectCategory.OTHER
