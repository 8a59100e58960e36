"""
Game store - where live games are kept between requests.

Only an in-memory store ships; anything offering the same four
methods can stand in for it.
"""

from __future__ import annotations
from typing import Protocol
import threading

from ..engine_core.state import GameState


class GameStore(Protocol):
    def get(self, game_id: str) -> GameState | None: ...

    def set(self, game_id: str, state: GameState) -> None: ...

    def delete(self, game_id: str) -> bool: ...

    def list(self) -> list[GameState]: ...


class InMemoryGameStore:
    """Dict-backed store. Nothing survives the process."""

    def __init__(self):
        self._games: dict[str, GameState] = {}
        self._lock = threading.Lock()

    def get(self, game_id: str) -> GameState | None:
        with self._lock:
            return self._games.get(game_id)

    def set(self, game_id: str, state: GameState) -> None:
        with self._lock:
            self._games[game_id] = state

    def delete(self, game_id: str) -> bool:
        with self._lock:
            return self._games.pop(game_id, None) is not None

    def list(self) -> list[GameState]:
        with self._lock:
            return list(self._games.values())
