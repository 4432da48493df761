"""slnsync: Regenerate an IDE solution file from a repository's Git submodules."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
