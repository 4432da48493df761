"""Solution file writer: full rewrite from a ``SolutionModel``.

Section order of the rendered file:

1. header (format and IDE version markers)
2. folder entries, by nesting level (categories, submodule roots,
   subfolders), each with its ``SolutionItems`` list
3. project entries
4. ``SolutionConfigurationPlatforms``
5. ``ProjectConfigurationPlatforms``: every project bound to each
   configuration for the single platform
6. ``NestedProjects``: every non-root folder and every project mapped to
   its parent folder
7. ``SolutionProperties``

The same line builders are used by the patcher, so patched and rewritten
files agree on formatting. Files are written as CRLF-terminated UTF-8
with a byte order mark, the encoding the IDE itself produces.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable

from slnsync.config import SyncConfig
from slnsync.core.hierarchy import FolderNode, ProjectEntry, SolutionModel
from slnsync.discovery.models import SolutionItemFile
from slnsync.discovery.patterns import SOLUTION_FOLDER_TYPE, project_type_guid
from slnsync.exceptions import BackupError

logger = logging.getLogger(__name__)

NEWLINE = "\r\n"
ENCODING = "utf-8-sig"
BACKUP_SUFFIX = ".backup"


def to_solution_path(path: str) -> str:
    """Convert a ``/`` separated relative path to the file's ``\\`` form."""
    return path.replace("/", "\\")


# -- Line builders ----------------------------------------------------------


def header_lines(config: SyncConfig) -> list[str]:
    major = config.visual_studio_version.split(".")[0]
    return [
        "",
        f"Microsoft Visual Studio Solution File, Format Version {config.format_version}",
        f"# Visual Studio Version {major}",
        f"VisualStudioVersion = {config.visual_studio_version}",
        f"MinimumVisualStudioVersion = {config.minimum_visual_studio_version}",
    ]


def solution_item_lines(items: Iterable[SolutionItemFile]) -> list[str]:
    """Entry lines for a ``SolutionItems`` section body."""
    lines = []
    for item in items:
        path = to_solution_path(item.path)
        lines.append(f"\t\t{path} = {path}")
    return lines


def solution_items_section(items: list[SolutionItemFile]) -> list[str]:
    """A complete ``ProjectSection(SolutionItems)`` block, or nothing."""
    if not items:
        return []
    return [
        "\tProjectSection(SolutionItems) = preProject",
        *solution_item_lines(items),
        "\tEndProjectSection",
    ]


def folder_block_lines(folder: FolderNode, items: list[SolutionItemFile]) -> list[str]:
    return [
        f'Project("{SOLUTION_FOLDER_TYPE}") = "{folder.name}", "{folder.name}", "{folder.guid}"',
        *solution_items_section(items),
        "EndProject",
    ]


def project_block_lines(project: ProjectEntry) -> list[str]:
    type_guid = project_type_guid(project.path)
    path = to_solution_path(project.path)
    return [
        f'Project("{type_guid}") = "{project.name}", "{path}", "{project.guid}"',
        "EndProject",
    ]


def solution_config_lines(config: SyncConfig) -> list[str]:
    return [
        f"\t\t{name}|{config.platform} = {name}|{config.platform}"
        for name in config.configurations
    ]


def project_config_lines(project: ProjectEntry, config: SyncConfig) -> list[str]:
    """``ActiveCfg``/``Build.0`` bindings of one project for every configuration."""
    lines = []
    for name in config.configurations:
        target = f"{name}|{config.platform}"
        lines.append(f"\t\t{project.guid}.{target}.ActiveCfg = {target}")
        lines.append(f"\t\t{project.guid}.{target}.Build.0 = {target}")
    return lines


def nested_pairs(
    folders: Iterable[FolderNode], projects: Iterable[ProjectEntry],
) -> list[tuple[str, str]]:
    """(child GUID, parent GUID) for every non-root folder and every project."""
    pairs = [(f.guid, f.parent.guid) for f in folders if f.parent is not None]
    pairs.extend((p.guid, p.folder.guid) for p in projects)
    return pairs


def nested_lines(pairs: Iterable[tuple[str, str]]) -> list[str]:
    return [f"\t\t{child} = {parent}" for child, parent in pairs]


def global_section(name: str, phase: str, body: list[str]) -> list[str]:
    return [f"\tGlobalSection({name}) = {phase}", *body, "\tEndGlobalSection"]


# -- Rendering --------------------------------------------------------------


def render_lines(model: SolutionModel, config: SyncConfig) -> list[str]:
    """Render the full solution as a list of lines."""
    lines = header_lines(config)
    for folder in model.folders_by_level():
        lines.extend(folder_block_lines(folder, model.items_for(folder)))
    for project in model.projects:
        lines.extend(project_block_lines(project))

    project_configs: list[str] = []
    for project in model.projects:
        project_configs.extend(project_config_lines(project, config))

    lines.append("Global")
    lines.extend(global_section(
        "SolutionConfigurationPlatforms", "preSolution", solution_config_lines(config),
    ))
    lines.extend(global_section(
        "ProjectConfigurationPlatforms", "postSolution", project_configs,
    ))
    lines.extend(global_section(
        "NestedProjects", "preSolution",
        nested_lines(nested_pairs(model.folders, model.projects)),
    ))
    lines.extend(global_section(
        "SolutionProperties", "preSolution", ["\t\tHideSolutionNode = FALSE"],
    ))
    lines.append("EndGlobal")
    return lines


def join_lines(lines: list[str]) -> str:
    return NEWLINE.join(lines) + NEWLINE


def render_solution(model: SolutionModel, config: SyncConfig | None = None) -> str:
    """Render a complete solution file.

    Args:
        model: Folders, projects, and items to emit.
        config: Header, platform and configuration settings.

    Returns:
        The file content with CRLF line endings.
    """
    return join_lines(render_lines(model, config or SyncConfig()))


# -- File I/O ---------------------------------------------------------------


def backup_path_for(path: Path) -> Path:
    return path.with_name(path.name + BACKUP_SUFFIX)


def backup_solution(path: Path) -> Path | None:
    """Copy an existing solution file to its sibling backup path.

    Args:
        path: Solution file about to be rewritten.

    Returns:
        The backup path, or None when there was nothing to back up.

    Raises:
        BackupError: If the copy fails. The caller must not rewrite.
    """
    if not path.exists():
        return None
    target = backup_path_for(path)
    try:
        shutil.copy2(path, target)
    except OSError as exc:
        raise BackupError(f"Cannot back up {path} to {target}: {exc}") from exc
    logger.info("Backed up %s to %s", path, target)
    return target


def read_solution_text(path: Path) -> str:
    """Read solution text without translating its line endings."""
    return path.read_bytes().decode(ENCODING)


def write_solution_text(path: Path, text: str) -> None:
    """Write solution text as UTF-8 with BOM, keeping CRLF line endings."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(text.encode(ENCODING))
