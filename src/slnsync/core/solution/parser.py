"""Line-oriented parser for the solution file block grammar.

Grammar (leading whitespace is insignificant)::

    document       := header* project* global trailer*
    project        := 'Project("' TYPE '") = "' NAME '", "' PATH '", "' GUID '"'
                      (project_section | other)*
                      'EndProject'
    project_section:= 'ProjectSection(' NAME ') = ' PHASE  entry*  'EndProjectSection'
    global         := 'Global'  global_section*  'EndGlobal'
    global_section := 'GlobalSection(' NAME ') = ' PHASE  entry*  'EndGlobalSection'
    entry          := KEY '=' VALUE

Anything that breaks the grammar (an unterminated block, a stray end
marker, a section outside its parent, a malformed ``Project`` header, or a
missing ``Global`` block) raises ``SolutionParseError`` so a patch is
never spliced into a file whose structure was misread.
"""

from __future__ import annotations

import re

from slnsync.core.solution.models import ProjectBlock, SectionBlock, SolutionDocument
from slnsync.exceptions import SolutionParseError

_PROJECT_RE = re.compile(
    r'^Project\("(?P<type>\{[0-9A-Fa-f-]+\})"\)\s*=\s*'
    r'"(?P<name>[^"]*)"\s*,\s*"(?P<path>[^"]*)"\s*,\s*"(?P<guid>\{[0-9A-Fa-f-]+\})"\s*$'
)
_SECTION_RE = re.compile(
    r"^(?P<kind>ProjectSection|GlobalSection)\((?P<name>[^)]*)\)\s*=\s*(?P<phase>\w+)\s*$"
)

# Parser states.
_TOP = "top"
_PROJECT = "project"
_PROJECT_SECTION = "project-section"
_GLOBAL = "global"
_GLOBAL_SECTION = "global-section"
_DONE = "done"


def _entry(line: str) -> tuple[str, str] | None:
    key, sep, value = line.partition("=")
    if not sep:
        return None
    return key.strip(), value.strip()


def parse_solution(text: str) -> SolutionDocument:
    """Parse solution file text into a ``SolutionDocument``.

    Args:
        text: Full file content (a leading BOM is tolerated).

    Returns:
        The parsed document with block line spans.

    Raises:
        SolutionParseError: On any structural violation.
    """
    lines = text.lstrip("\ufeff").splitlines()
    doc = SolutionDocument(lines=lines)
    state = _TOP
    project: ProjectBlock | None = None
    section: SectionBlock | None = None

    for index, raw in enumerate(lines):
        line = raw.strip()
        lineno = index + 1
        if not line:
            continue

        if state == _TOP:
            if line.startswith("Project("):
                match = _PROJECT_RE.match(line)
                if match is None:
                    raise SolutionParseError("Malformed Project header", line=lineno)
                project = ProjectBlock(
                    type_guid=match.group("type"),
                    name=match.group("name"),
                    path=match.group("path"),
                    guid=match.group("guid"),
                    start=index,
                )
                state = _PROJECT
            elif line == "Global":
                doc.global_start = index
                state = _GLOBAL
            elif line in ("EndProject", "EndGlobal", "EndProjectSection", "EndGlobalSection"):
                raise SolutionParseError(f"Unexpected {line} outside of a block", line=lineno)

        elif state == _PROJECT:
            assert project is not None
            if line == "EndProject":
                project.end = index
                doc.projects.append(project)
                project = None
                state = _TOP
            elif line.startswith("ProjectSection("):
                match = _SECTION_RE.match(line)
                if match is None:
                    raise SolutionParseError("Malformed ProjectSection header", line=lineno)
                section = SectionBlock(match.group("name"), match.group("phase"), start=index)
                state = _PROJECT_SECTION
            elif line.startswith("Project(") or line in ("Global", "EndGlobal"):
                raise SolutionParseError(
                    f"Project {project.name!r} is missing EndProject", line=lineno,
                )

        elif state == _PROJECT_SECTION:
            assert project is not None and section is not None
            if line == "EndProjectSection":
                section.end = index
                project.sections.append(section)
                section = None
                state = _PROJECT
            elif line == "EndProject" or line.startswith(("Project(", "ProjectSection(")):
                raise SolutionParseError(
                    f"ProjectSection {section.name!r} is missing EndProjectSection",
                    line=lineno,
                )
            else:
                entry = _entry(line)
                if entry is not None:
                    section.entries.append(entry)

        elif state == _GLOBAL:
            if line == "EndGlobal":
                doc.global_end = index
                state = _DONE
            elif line.startswith("GlobalSection("):
                match = _SECTION_RE.match(line)
                if match is None:
                    raise SolutionParseError("Malformed GlobalSection header", line=lineno)
                section = SectionBlock(match.group("name"), match.group("phase"), start=index)
                state = _GLOBAL_SECTION
            elif line.startswith("Project(") or line == "Global":
                raise SolutionParseError(f"Unexpected {line.split('(')[0]} inside Global", line=lineno)

        elif state == _GLOBAL_SECTION:
            assert section is not None
            if line == "EndGlobalSection":
                section.end = index
                doc.global_sections.append(section)
                section = None
                state = _GLOBAL
            elif line == "EndGlobal" or line.startswith("GlobalSection("):
                raise SolutionParseError(
                    f"GlobalSection {section.name!r} is missing EndGlobalSection",
                    line=lineno,
                )
            else:
                entry = _entry(line)
                if entry is not None:
                    section.entries.append(entry)

        else:  # _DONE
            if line.startswith("Project(") or line == "Global":
                raise SolutionParseError("Unexpected content after EndGlobal", line=lineno)

    if state in (_PROJECT, _PROJECT_SECTION):
        assert project is not None
        raise SolutionParseError(f"Project {project.name!r} is missing EndProject")
    if state in (_GLOBAL, _GLOBAL_SECTION):
        raise SolutionParseError("Global block is missing EndGlobal")
    if doc.global_start < 0:
        raise SolutionParseError("Solution file has no Global section")

    return doc
