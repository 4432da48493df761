"""Incremental solution patcher.

Given a parsed existing solution and a freshly built ``SolutionModel``,
splices in only what is missing:

- folder and project blocks whose path is not registered yet, inserted
  just before ``Global``;
- solution items missing from an existing folder, appended to its
  ``SolutionItems`` section (or a new section before its ``EndProject``);
- configuration bindings for new projects, before the closing marker of
  ``ProjectConfigurationPlatforms``;
- nesting lines for every non-root folder and every project that has no
  entry in ``NestedProjects`` yet, before its closing marker.

Global sections that do not exist yet are synthesized in full right
before ``EndGlobal``. Untouched lines are reproduced verbatim.

The model must have been built with the document's existing GUIDs (see
``ExistingSolutionState``) so that new children point at the parents
already present in the file. A folder whose path cannot be reconstructed
from the file (no nesting table) but whose GUID is already registered is
treated as existing, so no GUID is ever written twice.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field

from slnsync.config import SyncConfig
from slnsync.core.hierarchy import FolderNode, ProjectEntry, SolutionModel, path_key
from slnsync.core.solution.models import SolutionDocument
from slnsync.core.solution.writer import (
    folder_block_lines,
    global_section,
    join_lines,
    nested_lines,
    nested_pairs,
    project_block_lines,
    project_config_lines,
    solution_config_lines,
    solution_item_lines,
    solution_items_section,
    to_solution_path,
)

logger = logging.getLogger(__name__)


@dataclass
class PatchResult:
    """Outcome of patching a solution.

    Attributes:
        text: The patched file content.
        added_folders: Folders that were not registered before.
        added_projects: Projects that were not registered before.
        added_items: Number of solution item lines added.
        added_nesting: Number of ``NestedProjects`` lines added.
    """

    text: str
    added_folders: list[FolderNode] = field(default_factory=list)
    added_projects: list[ProjectEntry] = field(default_factory=list)
    added_items: int = 0
    added_nesting: int = 0

    @property
    def changed(self) -> bool:
        return bool(
            self.added_folders or self.added_projects or self.added_items or self.added_nesting
        )


def patch_solution(
    document: SolutionDocument,
    model: SolutionModel,
    config: SyncConfig | None = None,
) -> PatchResult:
    """Splice missing entries from ``model`` into ``document``.

    Args:
        document: Parsed existing solution.
        model: Model built with the document's existing identifiers.
        config: Platform and configuration settings.

    Returns:
        A ``PatchResult`` with the new text and what was added.
    """
    config = config or SyncConfig()
    state = document.existing_state()
    known_projects = {path_key(p) for p in state.project_ids}
    insertions: dict[int, list[str]] = defaultdict(list)

    blocks = {
        path_key(f.path): block
        for f in model.folders
        if (block := state.folder_block(f.path, f.guid)) is not None
    }
    new_folders = [f for f in model.folders_by_level() if path_key(f.path) not in blocks]
    new_projects = [
        p for p in model.projects
        if path_key(p.path) not in known_projects and not state.has_guid(p.guid)
    ]

    for folder in new_folders:
        insertions[document.global_start].extend(
            folder_block_lines(folder, model.items_for(folder))
        )
    for project in new_projects:
        insertions[document.global_start].extend(project_block_lines(project))

    added_items = sum(len(model.items_for(f)) for f in new_folders)
    for folder in model.folders:
        block = blocks.get(path_key(folder.path))
        if block is None:
            continue
        section = block.section("SolutionItems")
        present = {path_key(key) for key, _ in section.entries} if section else set()
        missing = [
            item for item in model.items_for(folder)
            if path_key(to_solution_path(item.path)) not in present
        ]
        if not missing:
            continue
        added_items += len(missing)
        if section is not None:
            insertions[section.end].extend(solution_item_lines(missing))
        else:
            insertions[block.end].extend(solution_items_section(missing))

    config_lines: list[str] = []
    for project in new_projects:
        config_lines.extend(project_config_lines(project, config))
    if config_lines:
        section = document.global_section("ProjectConfigurationPlatforms")
        if section is not None:
            insertions[section.end].extend(config_lines)
        else:
            if document.global_section("SolutionConfigurationPlatforms") is None:
                insertions[document.global_end].extend(global_section(
                    "SolutionConfigurationPlatforms", "preSolution",
                    solution_config_lines(config),
                ))
            insertions[document.global_end].extend(
                global_section("ProjectConfigurationPlatforms", "postSolution", config_lines)
            )

    pairs = [
        (child, parent)
        for child, parent in nested_pairs(model.folders_by_level(), model.projects)
        if child.upper() not in state.nested
    ]
    nesting = nested_lines(pairs)
    if nesting:
        section = document.global_section("NestedProjects")
        if section is not None:
            insertions[section.end].extend(nesting)
        else:
            insertions[document.global_end].extend(
                global_section("NestedProjects", "preSolution", nesting)
            )

    lines = list(document.lines)
    for index in sorted(insertions, reverse=True):
        lines[index:index] = insertions[index]

    logger.debug(
        "Patch adds %d folder(s), %d project(s), %d item(s), %d nesting line(s)",
        len(new_folders), len(new_projects), added_items, len(nesting),
    )
    return PatchResult(
        text=join_lines(lines),
        added_folders=new_folders,
        added_projects=new_projects,
        added_items=added_items,
        added_nesting=len(nesting),
    )
