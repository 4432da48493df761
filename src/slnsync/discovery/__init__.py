"""Submodule discovery: manifest listing, path classification, and scanning.

Public API::

    from slnsync.discovery import SubmoduleScanner, list_submodules

    submodules = list_submodules(Path(".gitmodules"))
    scans = SubmoduleScanner().scan_all(Path("."), submodules)
    for scan in scans:
        print(f"{scan.submodule}: {len(scan.projects)} project(s)")
"""

from __future__ import annotations

from slnsync.discovery.classify import (
    Classification,
    ProjectCategory,
    classify_category,
    classify_path,
)
from slnsync.discovery.manifest import list_submodules, parse_manifest
from slnsync.discovery.models import DiscoveredProject, SolutionItemFile, SubmoduleScan
from slnsync.discovery.scanner import SubmoduleScanner

__all__ = [
    "Classification",
    "DiscoveredProject",
    "ProjectCategory",
    "SolutionItemFile",
    "SubmoduleScan",
    "SubmoduleScanner",
    "classify_category",
    "classify_path",
    "list_submodules",
    "parse_manifest",
]
