"""
Enumerations shared by the data model, the rules and the API layer.
"""

from __future__ import annotations
from enum import Enum


class GamePhase(Enum):
    """High-level game phases."""
    SETUP = "setup"
    PLAYING = "playing"
    ERA_TRANSITION = "era_transition"
    FINISHED = "finished"


class Era(Enum):
    CANAL = "canal"
    RAIL = "rail"


class IndustryType(Enum):
    COTTON_MILL = "cotton_mill"
    COAL_MINE = "coal_mine"
    IRON_WORKS = "iron_works"
    MANUFACTURER = "manufacturer"
    POTTERY = "pottery"
    BREWERY = "brewery"


class ResourceType(Enum):
    COAL = "coal"
    IRON = "iron"
    BEER = "beer"


class LinkType(Enum):
    CANAL = "canal"
    RAIL = "rail"


class MerchantBonusType(Enum):
    DEVELOP = "develop"
    INCOME = "income"
    VP = "vp"
    MONEY = "money"


# Industries that are sold to merchants rather than producing resources
SELLABLE_INDUSTRIES = frozenset({
    IndustryType.COTTON_MILL,
    IndustryType.MANUFACTURER,
    IndustryType.POTTERY,
})
