"""Structural model of a parsed solution file.

A ``SolutionDocument`` keeps the original lines alongside the blocks
recognized in them. Every block records the zero-based line index of its
opening and closing marker, so the patcher can splice new lines at exact
positions without re-rendering untouched content.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from slnsync.core.hierarchy import path_key
from slnsync.discovery.classify import FOLDER_SEPARATOR
from slnsync.discovery.patterns import SOLUTION_FOLDER_TYPE
from slnsync.exceptions import SolutionParseError


@dataclass
class SectionBlock:
    """A ``ProjectSection`` or ``GlobalSection`` block.

    Attributes:
        name: Section name, e.g. ``NestedProjects``.
        phase: ``preProject``/``postProject``/``preSolution``/``postSolution``.
        start: Line index of the opening marker.
        end: Line index of the ``End...Section`` marker.
        entries: ``key = value`` pairs in file order.
    """

    name: str
    phase: str
    start: int
    end: int = -1
    entries: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class ProjectBlock:
    """A ``Project(...) ... EndProject`` block.

    Attributes:
        type_guid: Project type GUID (the folder type for solution folders).
        name: Display name.
        path: Path field; equals the name for solution folders.
        guid: Identifier of this entry.
        start: Line index of the ``Project(`` line.
        end: Line index of ``EndProject``.
        sections: Nested ``ProjectSection`` blocks.
    """

    type_guid: str
    name: str
    path: str
    guid: str
    start: int
    end: int = -1
    sections: list[SectionBlock] = field(default_factory=list)

    @property
    def is_folder(self) -> bool:
        """True for solution folder (grouping) entries."""
        return self.type_guid.upper() == SOLUTION_FOLDER_TYPE

    def section(self, name: str) -> SectionBlock | None:
        """Return the named project section, if present."""
        for section in self.sections:
            if section.name == name:
                return section
        return None


@dataclass
class ExistingSolutionState:
    """Entries already registered in a solution file.

    Attributes:
        folder_ids: Full folder path -> GUID.
        project_ids: Project path (as written in the file) -> GUID.
        folder_blocks: Folder path key -> its ``ProjectBlock``.
        blocks_by_guid: Upper-case GUID -> block, for every entry in the file.
        nested: Child GUID -> parent GUID (upper-case).
    """

    folder_ids: dict[str, str] = field(default_factory=dict)
    project_ids: dict[str, str] = field(default_factory=dict)
    folder_blocks: dict[str, ProjectBlock] = field(default_factory=dict)
    blocks_by_guid: dict[str, ProjectBlock] = field(default_factory=dict)
    nested: dict[str, str] = field(default_factory=dict)

    def has_folder(self, path: str) -> bool:
        """Existence check by full hierarchical path."""
        return path_key(path) in self.folder_blocks

    def has_guid(self, guid: str) -> bool:
        return guid.upper() in self.blocks_by_guid

    def folder_block(self, path: str, guid: str) -> ProjectBlock | None:
        """Find the folder block registered for ``path``.

        Falls back to a folder block carrying ``guid`` when the path could
        not be reconstructed, e.g. because the nesting table is missing.
        """
        block = self.folder_blocks.get(path_key(path))
        if block is None:
            candidate = self.blocks_by_guid.get(guid.upper())
            if candidate is not None and candidate.is_folder:
                block = candidate
        return block


@dataclass
class SolutionDocument:
    """Parsed solution file: original lines plus located blocks.

    Attributes:
        lines: File content split into lines, without terminators.
        projects: ``Project`` blocks in file order.
        global_start: Line index of ``Global``.
        global_end: Line index of ``EndGlobal``.
        global_sections: ``GlobalSection`` blocks in file order.
    """

    lines: list[str]
    projects: list[ProjectBlock] = field(default_factory=list)
    global_start: int = -1
    global_end: int = -1
    global_sections: list[SectionBlock] = field(default_factory=list)

    def global_section(self, name: str) -> SectionBlock | None:
        """Return the named global section, if present."""
        for section in self.global_sections:
            if section.name == name:
                return section
        return None

    @property
    def folders(self) -> list[ProjectBlock]:
        return [p for p in self.projects if p.is_folder]

    @property
    def project_entries(self) -> list[ProjectBlock]:
        return [p for p in self.projects if not p.is_folder]

    def nesting(self) -> dict[str, str]:
        """Child GUID -> parent GUID from the ``NestedProjects`` section."""
        section = self.global_section("NestedProjects")
        if section is None:
            return {}
        return {child.upper(): parent.upper() for child, parent in section.entries}

    def folder_paths(self) -> dict[str, ProjectBlock]:
        """Reconstruct each folder's full path by following parent links.

        Returns:
            Full backslash-joined path -> folder block.

        Raises:
            SolutionParseError: If the nesting table contains a cycle.
        """
        by_guid = {block.guid.upper(): block for block in self.folders}
        nested = self.nesting()
        paths: dict[str, ProjectBlock] = {}
        for block in self.folders:
            names: list[str] = []
            seen: set[str] = set()
            current: ProjectBlock | None = block
            while current is not None:
                guid = current.guid.upper()
                if guid in seen:
                    raise SolutionParseError(
                        f"Cycle in NestedProjects involving folder {block.name!r}",
                        line=block.start + 1,
                    )
                seen.add(guid)
                names.append(current.name)
                parent_guid = nested.get(guid)
                current = by_guid.get(parent_guid) if parent_guid else None
            paths[FOLDER_SEPARATOR.join(reversed(names))] = block
        return paths

    def existing_state(self) -> ExistingSolutionState:
        """Summarize the registered folders and projects."""
        state = ExistingSolutionState(nested=self.nesting())
        for block in self.projects:
            state.blocks_by_guid[block.guid.upper()] = block
        for path, block in self.folder_paths().items():
            state.folder_ids[path] = block.guid
            state.folder_blocks[path_key(path)] = block
        for block in self.project_entries:
            state.project_ids[block.path] = block.guid
        return state
