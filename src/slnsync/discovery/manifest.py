"""Submodule manifest reader.

Extracts the ``path = <dir>`` declarations from a ``.gitmodules`` style
manifest. Only the path keys matter; section headers, URLs, and branch
settings are ignored.

The result is normalized, deduplicated, and sorted so that downstream
folder creation always happens in the same order regardless of how the
manifest was edited.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_PATH_DECL_RE = re.compile(r"^\s*path\s*=\s*(?P<value>.*?)\s*$", re.IGNORECASE)


def _config_value(raw: str) -> str:
    """Drop double quotes and any ``#``/``;`` comment outside them."""
    chars: list[str] = []
    quoted = False
    for char in raw:
        if char == '"':
            quoted = not quoted
        elif char in "#;" and not quoted:
            break
        else:
            chars.append(char)
    return "".join(chars)


def normalize_submodule_path(raw: str) -> str:
    """Normalize a declared submodule path.

    Removes double quotes and a trailing ``#`` or ``;`` comment the way git
    config values are read, converts backslashes to forward slashes, and
    strips surrounding whitespace, a leading ``./`` and any trailing slash.

    Args:
        raw: Path as written in the manifest.

    Returns:
        The normalized relative path (may be empty).
    """
    value = _config_value(raw.strip()).strip().replace("\\", "/")
    while value.startswith("./"):
        value = value[2:]
    return value.rstrip("/")


def parse_manifest(text: str) -> list[str]:
    """Parse manifest text into a sorted, duplicate-free list of paths.

    Args:
        text: Full manifest content.

    Returns:
        Sorted distinct normalized paths. Blank values are dropped.
    """
    paths: set[str] = set()
    for line in text.splitlines():
        match = _PATH_DECL_RE.match(line)
        if match is None:
            continue
        value = normalize_submodule_path(match.group("value"))
        if value:
            paths.add(value)
    return sorted(paths)


def list_submodules(manifest: Path) -> list[str]:
    """Read the manifest file and list declared submodule paths.

    Args:
        manifest: Path to the ``.gitmodules`` file.

    Returns:
        Sorted distinct submodule paths, or an empty list (with a warning)
        when the manifest is missing, unreadable, or declares no paths.
    """
    if not manifest.is_file():
        logger.warning("Submodule manifest not found: %s", manifest)
        return []
    try:
        text = manifest.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError):
        logger.warning("Cannot read submodule manifest: %s", manifest, exc_info=True)
        return []

    paths = parse_manifest(text)
    if not paths:
        logger.warning("No submodule paths declared in %s", manifest)
    return paths
