"""Tool configuration for slnsync.

``SyncConfig`` holds every tunable used by the scanner, the classifier and
the solution writer. The defaults reproduce the layout of the Zonit SDK
aggregator repository; any field can be overridden from a YAML file::

    # slnsync.yaml
    layout: submodule          # or "pattern"
    prefix: Zonit
    abbreviations:
      ai: AI
    extra_excluded_dirs: [artifacts]
    platform: Any CPU
    configurations: [Debug, Release]

A missing default config file is not an error; an explicitly requested
one that is missing, malformed, or carries unknown keys raises
``ConfigError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from slnsync.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "slnsync.yaml"
DEFAULT_SOLUTION_FILENAME = "Zonit.sln"
DEFAULT_MANIFEST_FILENAME = ".gitmodules"

LAYOUTS: tuple[str, ...] = ("submodule", "pattern")


def _default_abbreviations() -> dict[str, str]:
    return {"ai": "AI", "api": "API", "ui": "UI"}


@dataclass(frozen=True)
class SyncConfig:
    """Settings shared by all stages of a sync run.

    Attributes:
        layout: Folder layout policy. ``"submodule"`` nests projects under
            the submodule's leaf directory and its first-level
            subdirectories; ``"pattern"`` derives one folder per project
            from the ``Category/<name>`` segments of its path.
        prefix: Organisation/product prefix stripped from derived folder
            names in the ``pattern`` layout (``Zonit.Extensions.Ai`` -> ``Ai``).
        abbreviations: Lower-case name -> display spelling overrides applied
            after prefix stripping (``ai`` -> ``AI``).
        extra_excluded_dirs: Directory names pruned in addition to the
            built-in exclusion set.
        platform: Solution platform name used in configuration tables.
        configurations: Build configurations bound to every project.
        format_version: ``Format Version`` header value.
        visual_studio_version: ``VisualStudioVersion`` header value.
        minimum_visual_studio_version: ``MinimumVisualStudioVersion`` header value.
    """

    layout: str = "submodule"
    prefix: str = "Zonit"
    abbreviations: dict[str, str] = field(default_factory=_default_abbreviations)
    extra_excluded_dirs: tuple[str, ...] = ()
    platform: str = "Any CPU"
    configurations: tuple[str, ...] = ("Debug", "Release")
    format_version: str = "12.00"
    visual_studio_version: str = "17.0.31903.59"
    minimum_visual_studio_version: str = "10.0.40219.1"

    def __post_init__(self) -> None:
        if self.layout not in LAYOUTS:
            raise ConfigError(
                f"Unknown layout {self.layout!r}; expected one of {', '.join(LAYOUTS)}"
            )
        if not self.configurations:
            raise ConfigError("At least one build configuration is required")


def _coerce(name: str, value: Any) -> Any:
    """Validate and convert one raw YAML value for the named field."""
    if name == "abbreviations":
        if not isinstance(value, dict):
            raise ConfigError("'abbreviations' must be a mapping")
        return {str(k).lower(): str(v) for k, v in value.items()}
    if name in ("extra_excluded_dirs", "configurations"):
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"'{name}' must be a list of strings")
        return tuple(value)
    if not isinstance(value, (str, int, float)):
        raise ConfigError(f"'{name}' must be a string")
    return str(value)


def config_from_dict(data: dict[str, Any], base: SyncConfig | None = None) -> SyncConfig:
    """Build a ``SyncConfig`` from a parsed mapping.

    Args:
        data: Raw mapping, typically from YAML.
        base: Config to override. Defaults to ``SyncConfig()``.

    Returns:
        A new ``SyncConfig``.

    Raises:
        ConfigError: On unknown keys or invalid values.
    """
    known = {f.name for f in fields(SyncConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")
    overrides = {name: _coerce(name, value) for name, value in data.items()}
    return replace(base or SyncConfig(), **overrides)


def load_config(path: Path | None = None, *, required: bool = False) -> SyncConfig:
    """Load configuration from a YAML file.

    Args:
        path: YAML file to read. None means defaults only.
        required: When True a missing file is an error; otherwise it
            silently yields the defaults.

    Returns:
        The resulting ``SyncConfig``.

    Raises:
        ConfigError: If the file is required but missing, unreadable,
            not a mapping, or contains invalid settings.
    """
    if path is None:
        return SyncConfig()
    if not path.is_file():
        if required:
            raise ConfigError(f"Config file not found: {path}")
        return SyncConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        return SyncConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    logger.debug("Loaded config overrides from %s: %s", path, sorted(data))
    return config_from_dict(data)
