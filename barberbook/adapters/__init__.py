"""
Adapters layer - Store integrations (hosted REST tables and in-memory mock).
"""

from .mock_store import MockStore
from .postgrest_store import PostgrestStore

__all__ = ["MockStore", "PostgrestStore"]
