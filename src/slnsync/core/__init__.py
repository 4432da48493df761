"""Core synthesis: folder hierarchy, solution format, and the sync service."""
