"""
Session Module - Keeps live games and serialises access to them.

Games are EPHEMERAL:
- Held in a store (in-memory by default)
- One lock per game around every engine call
- Evicted after a period of inactivity
"""

from .store import GameStore, InMemoryGameStore
from .manager import SessionManager, GameSession, GameNotFoundError

__all__ = [
    "GameStore",
    "InMemoryGameStore",
    "SessionManager",
    "GameSession",
    "GameNotFoundError",
]
