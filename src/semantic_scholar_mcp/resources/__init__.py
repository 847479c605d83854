"""
Resources layer for data management.

Handles storage and retrieval of cached tool responses
as human-readable JSON files.
"""

from .disk_cache import FileCache

__all__ = ["FileCache"]
