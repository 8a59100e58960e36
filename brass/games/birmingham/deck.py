"""
Card deck composition per player count.
"""

from __future__ import annotations
import random

from ...engine_core.cards import (
    Card, CardDeck, IndustryCard, LocationCard, WildIndustryCard, WildLocationCard,
)
from ...engine_core.enums import IndustryType
from ...engine_core.ids import IdGenerator


CARDS_PER_LOCATION = 2
WILD_CARDS_PER_KIND = 4

# Locations whose cards only join the deck at higher player counts
LOCATION_MIN_PLAYERS: dict[str, int] = {
    "REDDITCH": 3,
    "STAFFORD": 3,
    "STOURBRIDGE": 3,
    "UTTOXETER": 3,
    "WEDNESBURY": 4,
}

# (industry, min players, copies)
INDUSTRY_CARDS: tuple[tuple[IndustryType, int, int], ...] = (
    (IndustryType.COTTON_MILL, 2, 5),
    (IndustryType.COTTON_MILL, 3, 1),
    (IndustryType.COTTON_MILL, 4, 1),
    (IndustryType.COAL_MINE, 2, 4),
    (IndustryType.IRON_WORKS, 2, 3),
    (IndustryType.IRON_WORKS, 3, 1),
    (IndustryType.MANUFACTURER, 2, 5),
    (IndustryType.MANUFACTURER, 3, 1),
    (IndustryType.MANUFACTURER, 4, 1),
    (IndustryType.POTTERY, 2, 3),
    (IndustryType.POTTERY, 3, 1),
    (IndustryType.BREWERY, 2, 4),
)


def location_cards(player_count: int, locations, ids: IdGenerator) -> list[LocationCard]:
    """Two cards for every non-farm location allowed at this player count."""
    cards = []
    for name in locations:
        if name.startswith("FARM_BREWERY"):
            continue
        min_players = LOCATION_MIN_PLAYERS.get(name, 2)
        if player_count < min_players:
            continue
        for _ in range(CARDS_PER_LOCATION):
            cards.append(LocationCard(ids.next_id("card"), name, min_players))
    return cards


def industry_cards(player_count: int, ids: IdGenerator) -> list[IndustryCard]:
    return [
        IndustryCard(ids.next_id("card"), industry, min_players)
        for industry, min_players, copies in INDUSTRY_CARDS
        if player_count >= min_players
        for _ in range(copies)
    ]


def create_card_deck(player_count: int, locations, ids: IdGenerator,
                     rng: random.Random) -> CardDeck:
    """Shuffled draw pile plus the two wild supplies."""
    draw_pile: list[Card] = [
        *location_cards(player_count, locations, ids),
        *industry_cards(player_count, ids),
    ]
    rng.shuffle(draw_pile)
    return CardDeck(
        draw_pile=draw_pile,
        wild_location_cards=[WildLocationCard(ids.next_id("card")) for _ in range(WILD_CARDS_PER_KIND)],
        wild_industry_cards=[WildIndustryCard(ids.next_id("card")) for _ in range(WILD_CARDS_PER_KIND)],
    )
