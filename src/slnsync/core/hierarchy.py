"""Folder hierarchy builder: solution folders, project entries, identifiers.

Turns the flat folder-path assignments produced by the scanner into the
minimal set of ``FolderNode`` objects needed to nest every project and
solution item, then pairs each discovered project with its owning node.

Identifiers
-----------
Every node and project receives a GUID derived from its normalized path
with UUIDv5, so an unchanged tree always yields the same identifiers and
an unchanged solution file is regenerated byte for byte. When patching an
existing file, the GUIDs already registered there take precedence for
the paths they belong to.

Path keys
---------
Folder paths are backslash-joined (``Extensions\\Zonit.Extensions.Ai\\Source``)
and compared case-insensitively through ``path_key``. Existence checks
always use the full path, never the display name alone.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from slnsync.discovery.classify import FOLDER_SEPARATOR
from slnsync.discovery.models import SolutionItemFile, SubmoduleScan

logger = logging.getLogger(__name__)

# Namespace for deterministic solution identifiers.
GUID_NAMESPACE = uuid.UUID("5d1f3c86-7a0e-4b2f-9d7c-1b6e0a9f4c21")


def path_key(path: str) -> str:
    """Normalize a folder or project path for identity comparison."""
    return path.replace("/", FOLDER_SEPARATOR).strip(FOLDER_SEPARATOR).lower()


def format_guid(value: uuid.UUID) -> str:
    """Format a UUID the way solution files spell GUIDs: ``{UPPER-CASE}``."""
    return "{" + str(value).upper() + "}"


def stable_guid(kind: str, path: str) -> str:
    """Derive a deterministic GUID for a folder or project path.

    Args:
        kind: ``"folder"`` or ``"project"``; keeps the two id spaces apart.
        path: Folder path or project path.

    Returns:
        A brace-wrapped upper-case GUID string.
    """
    return format_guid(uuid.uuid5(GUID_NAMESPACE, f"{kind}:{path_key(path)}"))


@dataclass(frozen=True)
class FolderNode:
    """One solution folder (grouping entry) in the hierarchy.

    Attributes:
        name: Display name (last path segment).
        path: Full backslash-joined hierarchical path; the dedup key.
        parent: Enclosing folder, or None for a top-level folder.
        guid: Identifier of this folder in the solution file.
        level: Zero-based nesting depth.
    """

    name: str
    path: str
    parent: FolderNode | None
    guid: str
    level: int


@dataclass(frozen=True)
class ProjectEntry:
    """One project registered in the solution.

    Attributes:
        name: Project name (descriptor file stem).
        path: Repository-relative ``/`` separated descriptor path.
        guid: Identifier of this project in the solution file.
        folder: Owning solution folder.
        kind: Descriptor extension, e.g. ``.csproj``.
    """

    name: str
    path: str
    guid: str
    folder: FolderNode
    kind: str


class FolderHierarchy:
    """Incrementally built, path-keyed set of ``FolderNode`` objects.

    Nodes are kept in creation order; a parent is always created before
    any of its children.

    Example::

        tree = FolderHierarchy()
        node = tree.ensure("Extensions\\\\Zonit.Extensions.Ai\\\\Source")
        assert node.parent.parent.name == "Extensions"
        assert len(tree) == 3
    """

    def __init__(self, existing_ids: Mapping[str, str] | None = None) -> None:
        self._nodes: dict[str, FolderNode] = {}
        self._existing_ids = {path_key(k): v for k, v in (existing_ids or {}).items()}

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and path_key(path) in self._nodes

    @property
    def nodes(self) -> list[FolderNode]:
        """All nodes in creation order."""
        return list(self._nodes.values())

    def get(self, path: str) -> FolderNode | None:
        """Look up a node by its full path."""
        return self._nodes.get(path_key(path))

    def _guid_for(self, path: str) -> str:
        return self._existing_ids.get(path_key(path)) or stable_guid("folder", path)

    def ensure(self, folder_path: str) -> FolderNode:
        """Return the node for ``folder_path``, creating missing ancestors.

        Args:
            folder_path: Backslash-joined folder path (``/`` is accepted).

        Returns:
            The ``FolderNode`` for the full path.

        Raises:
            ValueError: If the path has no segments.
        """
        segments = [s for s in folder_path.replace("/", FOLDER_SEPARATOR).split(FOLDER_SEPARATOR) if s]
        if not segments:
            raise ValueError("Folder path must contain at least one segment")

        parent: FolderNode | None = None
        for level, segment in enumerate(segments):
            prefix = FOLDER_SEPARATOR.join(segments[: level + 1])
            key = path_key(prefix)
            node = self._nodes.get(key)
            if node is None:
                node = FolderNode(
                    name=segment,
                    path=prefix,
                    parent=parent,
                    guid=self._guid_for(prefix),
                    level=level,
                )
                self._nodes[key] = node
                logger.debug("Folder %s (level %d) -> %s", prefix, level, node.guid)
            parent = node
        assert parent is not None
        return parent

    def ensure_all(self, folder_paths: Iterable[str]) -> None:
        """Ensure every path in ``folder_paths``."""
        for folder_path in folder_paths:
            self.ensure(folder_path)


@dataclass
class SolutionModel:
    """Everything the emitter needs: folders, projects, and attached items.

    Attributes:
        folders: Folder nodes, parents before children.
        projects: Project entries with unique paths.
        items: Folder path key -> solution items listed under that folder.
    """

    folders: list[FolderNode] = field(default_factory=list)
    projects: list[ProjectEntry] = field(default_factory=list)
    items: dict[str, list[SolutionItemFile]] = field(default_factory=dict)

    def items_for(self, folder: FolderNode) -> list[SolutionItemFile]:
        """Return the solution items attached to ``folder``."""
        return self.items.get(path_key(folder.path), [])

    @property
    def categories(self) -> list[FolderNode]:
        """Top-level folders."""
        return [f for f in self.folders if f.parent is None]

    @property
    def item_count(self) -> int:
        """Total number of attached solution items."""
        return sum(len(v) for v in self.items.values())

    def folders_by_level(self) -> list[FolderNode]:
        """Folders sorted by level, creation order kept within a level."""
        return sorted(self.folders, key=lambda f: f.level)


def build_solution_model(
    scans: Iterable[SubmoduleScan],
    existing_folder_ids: Mapping[str, str] | None = None,
    existing_project_ids: Mapping[str, str] | None = None,
) -> SolutionModel:
    """Build folders and project entries from scan results.

    Args:
        scans: Per-submodule scan results, in manifest order.
        existing_folder_ids: Folder path -> GUID already registered in a
            prior solution file; these GUIDs are reused.
        existing_project_ids: Project path -> GUID already registered.

    Returns:
        The assembled ``SolutionModel``. Duplicate project paths keep the
        first occurrence; duplicate items are dropped.
    """
    hierarchy = FolderHierarchy(existing_folder_ids)
    project_ids = {path_key(k): v for k, v in (existing_project_ids or {}).items()}
    model = SolutionModel()
    seen_projects: set[str] = set()
    seen_items: set[tuple[str, str]] = set()

    for scan in scans:
        for project in scan.projects:
            key = path_key(project.path)
            if key in seen_projects:
                logger.debug("Skipping duplicate project path %s", project.path)
                continue
            seen_projects.add(key)
            folder = hierarchy.ensure(project.folder_path)
            model.projects.append(ProjectEntry(
                name=project.name,
                path=project.path,
                guid=project_ids.get(key) or stable_guid("project", project.path),
                folder=folder,
                kind=project.kind,
            ))
        for item in scan.items:
            folder = hierarchy.ensure(item.folder_path)
            item_key = (path_key(folder.path), path_key(item.path))
            if item_key in seen_items:
                continue
            seen_items.add(item_key)
            model.items.setdefault(item_key[0], []).append(item)

    model.folders = hierarchy.nodes
    return model
