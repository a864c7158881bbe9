"""API module for tournament document stores."""

from .appwrite_api import AppwriteAPI
from .memory_store import InMemoryStore
from .store import TournamentStore

__all__ = ["AppwriteAPI", "InMemoryStore", "TournamentStore"]
