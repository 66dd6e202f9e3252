"""
Adapters layer - Storage backends and the Cal.in REST client.
"""

from .api_client import CalinApiClient
from .json_store import JsonStore
from .memory_store import InMemoryStore

__all__ = ["CalinApiClient", "InMemoryStore", "JsonStore"]
