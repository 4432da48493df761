"""Solution file format: parsing, full rewrite, and incremental patching.

The package is split into focused submodules:

- ``models``: ``SolutionDocument`` and its located blocks, plus the
  ``ExistingSolutionState`` summary used for incremental updates.
- ``parser``: the line-oriented block grammar parser.
- ``writer``: line builders, full rendering, backup and file I/O.
- ``patcher``: splicing new entries into an existing document.
"""

from slnsync.core.solution.models import (
    ExistingSolutionState,
    ProjectBlock,
    SectionBlock,
    SolutionDocument,
)
from slnsync.core.solution.parser import parse_solution
from slnsync.core.solution.patcher import PatchResult, patch_solution
from slnsync.core.solution.writer import (
    backup_solution,
    read_solution_text,
    render_solution,
    write_solution_text,
)

__all__ = [
    "ExistingSolutionState",
    "PatchResult",
    "ProjectBlock",
    "SectionBlock",
    "SolutionDocument",
    "backup_solution",
    "parse_solution",
    "patch_solution",
    "read_solution_text",
    "render_solution",
    "write_solution_text",
]
