"""
Birmingham - the board, tiles and deck of Brass: Birmingham.

This module contains:
- Board topology, merchants and market ladders
- The industry tile catalogue
- Deck composition per player count
- The game factory
"""

from .setup import GameConfig, GameSetupError, create_game
from .board import LOCATION_NAMES, build_board
from .tiles import MAT_LAYOUT, create_player_mat
from .deck import create_card_deck

__all__ = [
    "GameConfig",
    "GameSetupError",
    "create_game",
    "LOCATION_NAMES",
    "build_board",
    "MAT_LAYOUT",
    "create_player_mat",
    "create_card_deck",
]
