"""
Cards - The four card variants and the deck container.

Cards form a closed set of variants. Code that needs to tell them
apart uses isinstance() against the concrete classes below; there is
no string tag to switch on.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .enums import IndustryType


class CardType(Enum):
    LOCATION = "location"
    INDUSTRY = "industry"
    WILD_LOCATION = "wild_location"
    WILD_INDUSTRY = "wild_industry"


@dataclass(frozen=True)
class LocationCard:
    """Licenses a build at exactly one named location."""
    card_id: str
    location: str
    min_player_count: int = 2

    @property
    def card_type(self) -> CardType:
        return CardType.LOCATION


@dataclass(frozen=True)
class IndustryCard:
    """Licenses a build of one industry type inside the player's network."""
    card_id: str
    industry_type: IndustryType
    min_player_count: int = 2

    @property
    def card_type(self) -> CardType:
        return CardType.INDUSTRY


@dataclass(frozen=True)
class WildLocationCard:
    card_id: str

    @property
    def card_type(self) -> CardType:
        return CardType.WILD_LOCATION


@dataclass(frozen=True)
class WildIndustryCard:
    card_id: str

    @property
    def card_type(self) -> CardType:
        return CardType.WILD_INDUSTRY


Card = Union[LocationCard, IndustryCard, WildLocationCard, WildIndustryCard]


def is_wild(card: Card) -> bool:
    return isinstance(card, (WildLocationCard, WildIndustryCard))


def describe_card(card: Card) -> str:
    """Short human-readable label, used in logs and state changes."""
    if isinstance(card, LocationCard):
        return f"location:{card.location}"
    if isinstance(card, IndustryCard):
        return f"industry:{card.industry_type.value}"
    if isinstance(card, WildLocationCard):
        return "wild_location"
    if isinstance(card, WildIndustryCard):
        return "wild_industry"
    raise TypeError(f"Unknown card variant: {type(card).__name__}")


@dataclass
class CardDeck:
    """
    Shared card supply.

    The draw pile is shuffled at setup and again at the era change.
    Wild cards live in their own supplies and are only handed out by
    the Scout action.
    """
    draw_pile: list[Card] = field(default_factory=list)
    discard_pile: list[Card] = field(default_factory=list)
    wild_location_cards: list[WildLocationCard] = field(default_factory=list)
    wild_industry_cards: list[WildIndustryCard] = field(default_factory=list)

    def draw(self) -> Card | None:
        """Take the top card of the draw pile, or None when it is empty."""
        if not self.draw_pile:
            return None
        return self.draw_pile.pop(0)

    def return_wild(self, card: Card) -> None:
        """Put a used wild card back into its supply."""
        if isinstance(card, WildLocationCard):
            self.wild_location_cards.append(card)
        elif isinstance(card, WildIndustryCard):
            self.wild_industry_cards.append(card)
        else:
            raise TypeError(f"{describe_card(card)} is not a wild card")
