"""Optional remote update of submodules before scanning."""

from __future__ import annotations

from slnsync.git.updater import SubmoduleUpdater, UpdateReport

__all__ = ["SubmoduleUpdater", "UpdateReport"]
