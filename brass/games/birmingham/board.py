"""
Birmingham board - locations, adjacency, merchants and market ladders.

Coordinates are on a 0-1000 render scale. Adjacency is symmetric.
"""

from __future__ import annotations
from dataclasses import dataclass

from ...engine_core.enums import IndustryType, MerchantBonusType, ResourceType
from ...engine_core.state import (
    BoardLocation, BoardState, IndustrySlot, MarketSpace, Merchant, ResourceMarket,
)


COTTON = IndustryType.COTTON_MILL
COAL = IndustryType.COAL_MINE
IRON = IndustryType.IRON_WORKS
MANUFACTURER = IndustryType.MANUFACTURER
POTTERY = IndustryType.POTTERY
BREWERY = IndustryType.BREWERY


@dataclass(frozen=True)
class LocationSpec:
    name: str
    slots: tuple[IndustryType, ...]  # One industry per slot
    adjacent: tuple[str, ...]
    coordinates: tuple[int, int]


LOCATIONS: tuple[LocationSpec, ...] = (
    LocationSpec("BELPER", (COTTON, COTTON), ("DERBY",), (650, 300)),
    LocationSpec("BIRMINGHAM", (MANUFACTURER,) * 4,
                 ("COVENTRY", "DUDLEY", "NUNEATON", "WALSALL", "WOLVERHAMPTON"), (400, 500)),
    LocationSpec("BURTON_ON_TRENT", (BREWERY, BREWERY, POTTERY), ("DERBY", "TAMWORTH"), (550, 400)),
    LocationSpec("CANNOCK", (COAL, COAL), ("FARM_BREWERY_2", "WALSALL", "WOLVERHAMPTON"), (350, 400)),
    LocationSpec("COALBROOKDALE", (COAL, IRON, IRON, BREWERY),
                 ("SHREWSBURY", "WOLVERHAMPTON", "WORCESTER"), (200, 450)),
    LocationSpec("COVENTRY", (MANUFACTURER,) * 3, ("BIRMINGHAM", "NUNEATON", "OXFORD"), (500, 600)),
    LocationSpec("DERBY", (IRON, POTTERY, POTTERY),
                 ("BELPER", "BURTON_ON_TRENT", "LEEK", "NOTTINGHAM"), (600, 350)),
    LocationSpec("DUDLEY", (COAL, IRON), ("BIRMINGHAM", "KIDDERMINSTER", "WORCESTER"), (300, 550)),
    LocationSpec("FARM_BREWERY_1", (BREWERY,), ("STONE",), (250, 250)),
    LocationSpec("FARM_BREWERY_2", (BREWERY,), ("CANNOCK", "STONE"), (300, 300)),
    LocationSpec("FARM_BREWERY_3", (BREWERY,), ("KIDDERMINSTER", "WORCESTER"), (200, 600)),
    LocationSpec("GLOUCESTER", (COAL, BREWERY), ("OXFORD", "WORCESTER"), (300, 700)),
    LocationSpec("KIDDERMINSTER", (COAL, COTTON), ("DUDLEY", "FARM_BREWERY_3", "WORCESTER"), (250, 600)),
    LocationSpec("LEEK", (COTTON, POTTERY), ("DERBY", "STONE", "UTTOXETER"), (500, 250)),
    LocationSpec("MARKET_HARBOROUGH", (BREWERY,), ("NOTTINGHAM", "NUNEATON", "OXFORD"), (650, 500)),
    LocationSpec("NANWICH", (COTTON, POTTERY), ("STONE", "WARRINGTON"), (300, 150)),
    LocationSpec("NOTTINGHAM", (COTTON, COTTON, MANUFACTURER), ("DERBY", "MARKET_HARBOROUGH"), (700, 400)),
    LocationSpec("NUNEATON", (COAL, BREWERY),
                 ("BIRMINGHAM", "COVENTRY", "MARKET_HARBOROUGH", "TAMWORTH"), (500, 500)),
    LocationSpec("OXFORD", (MANUFACTURER, MANUFACTURER),
                 ("COVENTRY", "GLOUCESTER", "MARKET_HARBOROUGH"), (500, 700)),
    LocationSpec("REDDITCH", (COAL,), ("WORCESTER",), (350, 650)),
    LocationSpec("SHREWSBURY", (COAL, POTTERY), ("COALBROOKDALE", "STONE", "WOLVERHAMPTON"), (200, 300)),
    LocationSpec("STAFFORD", (BREWERY,), ("STONE", "UTTOXETER"), (400, 300)),
    LocationSpec("STONE", (COTTON, POTTERY),
                 ("FARM_BREWERY_1", "FARM_BREWERY_2", "LEEK", "NANWICH", "SHREWSBURY", "STAFFORD"),
                 (350, 250)),
    LocationSpec("STOURBRIDGE", (COAL, IRON), ("WORCESTER",), (300, 600)),
    LocationSpec("TAMWORTH", (BREWERY,), ("BURTON_ON_TRENT", "NUNEATON", "WALSALL"), (450, 450)),
    LocationSpec("UTTOXETER", (COAL, BREWERY), ("LEEK", "STAFFORD"), (450, 300)),
    LocationSpec("WALSALL", (MANUFACTURER,),
                 ("BIRMINGHAM", "CANNOCK", "TAMWORTH", "WOLVERHAMPTON"), (400, 450)),
    LocationSpec("WARRINGTON", (COTTON, COTTON, BREWERY), ("NANWICH",), (250, 100)),
    LocationSpec("WEDNESBURY", (COAL,), ("WOLVERHAMPTON",), (350, 450)),
    LocationSpec("WOLVERHAMPTON", (MANUFACTURER, MANUFACTURER),
                 ("BIRMINGHAM", "CANNOCK", "COALBROOKDALE", "SHREWSBURY", "WALSALL", "WEDNESBURY"),
                 (300, 400)),
    LocationSpec("WORCESTER", (COTTON, POTTERY),
                 ("COALBROOKDALE", "DUDLEY", "FARM_BREWERY_3", "GLOUCESTER",
                  "KIDDERMINSTER", "REDDITCH", "STOURBRIDGE"),
                 (250, 650)),
)

LOCATION_NAMES = tuple(loc.name for loc in LOCATIONS)


@dataclass(frozen=True)
class MerchantSpec:
    location: str
    industry_type: IndustryType
    bonus_type: MerchantBonusType
    bonus_value: int
    min_player_count: int = 2
    has_beer_space: bool = True


MERCHANTS: tuple[MerchantSpec, ...] = (
    MerchantSpec("GLOUCESTER", MANUFACTURER, MerchantBonusType.DEVELOP, 1),
    MerchantSpec("GLOUCESTER", POTTERY, MerchantBonusType.DEVELOP, 1, min_player_count=3),
    MerchantSpec("OXFORD", MANUFACTURER, MerchantBonusType.INCOME, 2),
    MerchantSpec("OXFORD", COTTON, MerchantBonusType.INCOME, 2, min_player_count=4),
    MerchantSpec("WARRINGTON", COTTON, MerchantBonusType.MONEY, 5),
    MerchantSpec("WARRINGTON", COTTON, MerchantBonusType.MONEY, 5, min_player_count=3),
    MerchantSpec("NOTTINGHAM", COTTON, MerchantBonusType.VP, 3),
    MerchantSpec("NOTTINGHAM", MANUFACTURER, MerchantBonusType.VP, 3, min_player_count=3),
    MerchantSpec("SHREWSBURY", POTTERY, MerchantBonusType.VP, 5),
)

# (price, capacity, starting count); the unlimited top tier is the ceiling price
COAL_MARKET = ((1, 2, 1), (2, 3, 3), (3, 4, 4), (4, 5, 5), (5, 5, 5), (6, 5, 5), (7, 6, 6))
COAL_CEILING_PRICE = 8
IRON_MARKET = ((1, 2, 0), (2, 3, 3), (3, 4, 4), (4, 4, 4), (5, 5, 5))
IRON_CEILING_PRICE = 6


def build_locations() -> dict[str, BoardLocation]:
    return {
        loc.name: BoardLocation(
            name=loc.name,
            industry_slots=[IndustrySlot(allowed_industries=(industry,)) for industry in loc.slots],
            adjacent_locations=loc.adjacent,
            coordinates=loc.coordinates,
        )
        for loc in LOCATIONS
    }


def build_merchants(player_count: int) -> list[Merchant]:
    """Merchants in play for a player count, numbered after filtering."""
    in_play = [m for m in MERCHANTS if m.min_player_count <= player_count]
    return [
        Merchant(
            merchant_id=f"merchant-{index}",
            location=m.location,
            industry_type=m.industry_type,
            bonus_type=m.bonus_type,
            bonus_value=m.bonus_value,
            has_beer_space=m.has_beer_space,
            current_beer=1 if m.has_beer_space else 0,
            min_player_count=m.min_player_count,
        )
        for index, m in enumerate(in_play)
    ]


def build_market(resource: ResourceType) -> ResourceMarket:
    if resource == ResourceType.COAL:
        tiers, ceiling = COAL_MARKET, COAL_CEILING_PRICE
    elif resource == ResourceType.IRON:
        tiers, ceiling = IRON_MARKET, IRON_CEILING_PRICE
    else:
        raise ValueError(f"There is no market for {resource.value}")
    return ResourceMarket(
        resource=resource,
        spaces=[MarketSpace(price=p, count=count, max_count=cap) for p, cap, count in tiers],
        ceiling_price=ceiling,
    )


def build_board(player_count: int) -> BoardState:
    return BoardState(
        locations=build_locations(),
        coal_market=build_market(ResourceType.COAL),
        iron_market=build_market(ResourceType.IRON),
        merchants=build_merchants(player_count),
    )
