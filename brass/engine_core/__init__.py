"""
Engine Core - Deterministic rules engine for the game.

The engine is the runtime that:
1. Holds the GameState data model
2. Validates actions against the rules
3. Executes them atomically
4. Advances turns, rounds and eras to a final score
"""

from .state import GameState, PlayerState, BoardState, PlacedIndustryTile
from .action import Action, ActionType, ActionResult, ActionValidation, Sale, StateChange
from .cards import Card, CardDeck
from .engine import GameEngine, GameSummary, PlayerSummary
from .enums import Era, GamePhase, IndustryType, MerchantBonusType, ResourceType

__all__ = [
    "GameState",
    "PlayerState",
    "BoardState",
    "PlacedIndustryTile",
    "Action",
    "ActionType",
    "ActionResult",
    "ActionValidation",
    "Sale",
    "StateChange",
    "Card",
    "CardDeck",
    "GameEngine",
    "GameSummary",
    "PlayerSummary",
    "Era",
    "GamePhase",
    "IndustryType",
    "MerchantBonusType",
    "ResourceType",
]
