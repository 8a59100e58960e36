"""
Birmingham Game Setup - Creates initial game state.

This module handles:
- Building the board, markets and merchants for the player count
- Creating and shuffling the deck with a seeded RNG
- Dealing 8 cards plus 1 face-down discard per player
- Randomising the first turn order

The same seed and player ids always produce the same game.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import random

from ...engine_core.enums import Era, GamePhase
from ...engine_core.ids import IdGenerator
from ...engine_core.state import GameState, PlayerState, TurnOrderEntry, HAND_SIZE
from .board import LOCATION_NAMES, build_board
from .deck import create_card_deck
from .tiles import create_player_mat


logger = logging.getLogger(__name__)

MIN_PLAYERS = 2
MAX_PLAYERS = 4
MAX_ROUNDS_BY_PLAYER_COUNT = {2: 10, 3: 9, 4: 8}


class GameSetupError(ValueError):
    """Raised when a game cannot be created from the given configuration."""


@dataclass
class GameConfig:
    player_count: int
    max_rounds: int | None = None


def create_game(
    config: GameConfig,
    player_ids: list[str],
    rng: random.Random | None = None,
    seed: int | None = None,
    game_id: str | None = None,
) -> GameState:
    """
    Set up a new game.

    Args:
        config: Player count and optional round limit
        player_ids: One id per seat, in seat order
        rng: Random source; built from `seed` when omitted
        seed: Seed for deterministic shuffling
        game_id: Id for the game (derived from the RNG when omitted)

    Returns:
        GameState in the Playing phase, Canal era, round 1
    """
    count = config.player_count
    if not MIN_PLAYERS <= count <= MAX_PLAYERS:
        raise GameSetupError(f"Player count must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {count}")
    if len(player_ids) != count:
        raise GameSetupError(f"Expected {count} players, got {len(player_ids)}")
    if len(set(player_ids)) != len(player_ids):
        raise GameSetupError("Player ids must be unique")

    rng = rng or random.Random(seed)
    ids = IdGenerator()

    deck = create_card_deck(count, LOCATION_NAMES, ids, rng)
    players = [
        PlayerState(player_id=player_id, industry_tiles=create_player_mat(player_id))
        for player_id in player_ids
    ]
    for player in players:
        for _ in range(HAND_SIZE):
            player.hand.append(deck.draw())
        player.discard_pile.append(deck.draw())

    seats = list(player_ids)
    rng.shuffle(seats)
    turn_order = [TurnOrderEntry(player_id=pid, order=index) for index, pid in enumerate(seats)]

    state = GameState(
        game_id=game_id or f"game-{rng.randrange(16 ** 8):08x}",
        board=build_board(count),
        card_deck=deck,
        player_count=count,
        phase=GamePhase.PLAYING,
        era=Era.CANAL,
        current_round=1,
        max_rounds=config.max_rounds or MAX_ROUNDS_BY_PLAYER_COUNT[count],
        players=players,
        turn_order=turn_order,
        current_player_index=0,
        is_first_round=True,
        random_seed=seed,
        rng=rng,
        id_generator=ids,
    )
    state.reset_action_budgets()
    logger.info("Created game %s for %d players", state.game_id, count)
    return state
