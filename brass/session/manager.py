"""
Session Manager - Creates games and serialises access to each one.

The engine assumes a single writer per game. Every call that reads or
mutates a game goes through the game's own lock, held across the whole
validate+execute pair, so two requests for the same game never
interleave. Different games never share a lock.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, TypeVar
import logging
import random
import threading
import time
import uuid

from ..engine_core.action import Action, ActionResult, ActionValidation, StateChange
from ..engine_core.engine import GameEngine
from ..engine_core.state import GameState
from ..games.birmingham.setup import GameConfig, create_game
from .store import GameStore, InMemoryGameStore


logger = logging.getLogger(__name__)

T = TypeVar("T")


class GameNotFoundError(KeyError):
    """Raised when a game id is not in the store."""


@dataclass
class GameSession:
    game_id: str
    created_at: float
    last_activity: float
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class SessionManager:
    """
    Manages live games.

    Responsibilities:
    - Create games and put them in the store
    - Run engine calls under the per-game lock
    - Drop games that have been idle too long
    """

    def __init__(self, store: GameStore | None = None, engine: GameEngine | None = None,
                 default_seed: int | None = None):
        self.store = store or InMemoryGameStore()
        self.engine = engine or GameEngine()
        self.default_seed = default_seed
        self._sessions: dict[str, GameSession] = {}
        self._registry_lock = threading.Lock()

    def create_game(self, config: GameConfig, player_ids: list[str],
                    seed: int | None = None) -> GameState:
        if seed is None:
            seed = self.default_seed
        rng = random.Random(seed)
        state = create_game(config, player_ids, rng=rng, seed=seed, game_id=str(uuid.uuid4()))
        now = time.time()
        with self._registry_lock:
            self._sessions[state.game_id] = GameSession(state.game_id, created_at=now, last_activity=now)
        self.store.set(state.game_id, state)
        return state

    def _session(self, game_id: str) -> GameSession:
        with self._registry_lock:
            session = self._sessions.get(game_id)
            if session is None and self.store.get(game_id) is not None:
                # Game put into the store by someone else
                now = time.time()
                session = self._sessions[game_id] = GameSession(game_id, now, now)
        if session is None:
            raise GameNotFoundError(game_id)
        return session

    def _state(self, game_id: str) -> GameState:
        state = self.store.get(game_id)
        if state is None:
            raise GameNotFoundError(game_id)
        return state

    def get_game(self, game_id: str) -> GameState | None:
        return self.store.get(game_id)

    def list_games(self) -> list[GameState]:
        return self.store.list()

    def delete_game(self, game_id: str) -> bool:
        with self._registry_lock:
            self._sessions.pop(game_id, None)
        return self.store.delete(game_id)

    def read(self, game_id: str, fn: Callable[[GameState], T]) -> T:
        """Call `fn` with the game while holding its lock."""
        session = self._session(game_id)
        with session.lock:
            return fn(self._state(game_id))

    def validate(self, game_id: str, action: Action) -> ActionValidation:
        session = self._session(game_id)
        with session.lock:
            return self.engine.validate_action(self._state(game_id), action)

    def submit(self, game_id: str, action: Action) -> ActionResult:
        """Validate and execute one action under the game's lock."""
        session = self._session(game_id)
        with session.lock:
            state = self._state(game_id)
            result = self.engine.execute_action(state, action)
            session.last_activity = time.time()
            if result.success:
                self.store.set(game_id, state)
            return result

    def collect_income(self, game_id: str) -> list[StateChange]:
        session = self._session(game_id)
        with session.lock:
            state = self._state(game_id)
            changes = self.engine.collect_income(state)
            session.last_activity = time.time()
            self.store.set(game_id, state)
            return changes

    def cleanup_stale_games(self, max_idle_seconds: int = 3600) -> list[str]:
        """
        Delete games idle for longer than `max_idle_seconds`.

        Returns the ids removed.
        """
        cutoff = time.time() - max_idle_seconds
        with self._registry_lock:
            stale = [gid for gid, s in self._sessions.items() if s.last_activity < cutoff]
        for game_id in stale:
            self.delete_game(game_id)
            logger.info("Evicted idle game %s", game_id)
        return stale
