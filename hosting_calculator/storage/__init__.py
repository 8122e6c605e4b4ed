"""
Storage backends for calculator session state.

Both stores satisfy the session persistence port (load/save by key).
"""

from .repository import MemoryStateStore, SqliteStateStore, get_store

__all__ = ["MemoryStateStore", "SqliteStateStore", "get_store"]
