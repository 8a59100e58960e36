"""
Resource sourcing - where coal, iron and beer come from, and what they cost.

Finders are pure: they return an ordered list of ResourceSource, one
entry per unit, never more than requested. consume_resources() is the
only place tiles, market tiers and merchant beer are decremented, and
add_resources_to_market() the only place markets are refilled.

A `reserved` mapping (source key -> units already claimed) lets a
caller price several requests within one action without counting the
same unit twice.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import logging

from .action import StateChange, StateChangeType
from .enums import IndustryType, ResourceType
from .network import are_connected
from .state import GameState, ResourceMarket


logger = logging.getLogger(__name__)


class SourceKind(Enum):
    TILE = "tile"
    MARKET = "market"
    MERCHANT = "merchant"


@dataclass(frozen=True)
class ResourceSource:
    """
    One unit of a resource and where it comes from.

    `synthetic` marks a unit priced at the ceiling because the market is
    physically empty; consuming it removes nothing from the board.
    """
    kind: SourceKind
    resource: ResourceType
    cost: int = 0
    tile_id: str | None = None
    merchant_id: str | None = None
    synthetic: bool = False

    @property
    def key(self) -> str:
        if self.kind == SourceKind.TILE:
            return f"tile:{self.tile_id}"
        if self.kind == SourceKind.MERCHANT:
            return f"merchant:{self.merchant_id}"
        if self.synthetic:
            return f"ceiling:{self.resource.value}"
        return f"market:{self.resource.value}:{self.cost}"


Reserved = dict[str, int]


def reserve(reserved: Reserved, sources: list[ResourceSource]) -> None:
    """Record sources as claimed so later finder calls skip them."""
    for source in sources:
        reserved[source.key] = reserved.get(source.key, 0) + 1


def total_cost(sources: list[ResourceSource]) -> int:
    return sum(source.cost for source in sources)


def uses_ceiling_price(sources: list[ResourceSource]) -> bool:
    return any(source.synthetic for source in sources)


# =============================================================================
# Finders
# =============================================================================

def _from_tiles(state: GameState, industry_type: IndustryType, resource: ResourceType,
                quantity: int, reserved: Reserved, accept) -> list[ResourceSource]:
    sources: list[ResourceSource] = []
    for tile in state.placed_industries.values():
        if len(sources) >= quantity:
            break
        if tile.industry_type != industry_type or tile.is_flipped:
            continue
        key = f"tile:{tile.tile_id}"
        available = tile.current_resources - reserved.get(key, 0)
        if available <= 0 or not accept(tile):
            continue
        take = min(available, quantity - len(sources))
        sources.extend(
            ResourceSource(SourceKind.TILE, resource, cost=0, tile_id=tile.tile_id)
            for _ in range(take)
        )
    return sources


def _from_market(market: ResourceMarket, quantity: int,
                 reserved: Reserved) -> list[ResourceSource]:
    sources: list[ResourceSource] = []
    for space in sorted(market.spaces, key=lambda s: s.price):
        if len(sources) >= quantity:
            break
        key = f"market:{market.resource.value}:{space.price}"
        available = space.count - reserved.get(key, 0)
        if available <= 0:
            continue
        take = min(available, quantity - len(sources))
        sources.extend(
            ResourceSource(SourceKind.MARKET, market.resource, cost=space.price)
            for _ in range(take)
        )
    return sources


def _at_ceiling(market: ResourceMarket, quantity: int) -> list[ResourceSource]:
    return [
        ResourceSource(SourceKind.MARKET, market.resource, cost=market.ceiling_price, synthetic=True)
        for _ in range(quantity)
    ]


def find_coal_sources(state: GameState, player_id: str, location: str, quantity: int,
                      reserved: Reserved | None = None) -> list[ResourceSource]:
    """
    Coal for a build or rail link at `location`.

    Connected coal mines first (free, placement order), then the market
    cheapest first, then ceiling-priced units.
    """
    if quantity <= 0:
        return []
    reserved = reserved or {}
    sources = _from_tiles(
        state, IndustryType.COAL_MINE, ResourceType.COAL, quantity, reserved,
        lambda tile: are_connected(state, location, tile.location),
    )
    market = state.board.coal_market
    sources += _from_market(market, quantity - len(sources), reserved)
    sources += _at_ceiling(market, quantity - len(sources))
    return sources


def find_iron_sources(state: GameState, player_id: str, quantity: int,
                      reserved: Reserved | None = None) -> list[ResourceSource]:
    """Iron works anywhere on the board (free), then market, then ceiling."""
    if quantity <= 0:
        return []
    reserved = reserved or {}
    sources = _from_tiles(
        state, IndustryType.IRON_WORKS, ResourceType.IRON, quantity, reserved,
        lambda tile: True,
    )
    market = state.board.iron_market
    sources += _from_market(market, quantity - len(sources), reserved)
    sources += _at_ceiling(market, quantity - len(sources))
    return sources


def find_beer_sources(state: GameState, player_id: str, location: str, quantity: int,
                      allow_merchant: bool = False,
                      reserved: Reserved | None = None,
                      merchant_id: str | None = None) -> list[ResourceSource]:
    """
    Beer for a sale or a double rail link.

    Own breweries anywhere, then connected opponent breweries, then (when
    selling) connected merchant beer, trying `merchant_id` first. Beer has
    no market, so the result may be shorter than `quantity`.
    """
    if quantity <= 0:
        return []
    reserved = reserved or {}
    sources = _from_tiles(
        state, IndustryType.BREWERY, ResourceType.BEER, quantity, reserved,
        lambda tile: tile.player_id == player_id,
    )
    sources += _from_tiles(
        state, IndustryType.BREWERY, ResourceType.BEER, quantity - len(sources), reserved,
        lambda tile: tile.player_id != player_id and are_connected(state, location, tile.location),
    )
    if allow_merchant:
        merchants = sorted(state.board.merchants, key=lambda m: m.merchant_id != merchant_id)
        for merchant in merchants:
            if len(sources) >= quantity:
                break
            key = f"merchant:{merchant.merchant_id}"
            available = merchant.current_beer - reserved.get(key, 0)
            if available <= 0 or not are_connected(state, location, merchant.location):
                continue
            take = min(available, quantity - len(sources))
            sources.extend(
                ResourceSource(SourceKind.MERCHANT, ResourceType.BEER, merchant_id=merchant.merchant_id)
                for _ in range(take)
            )
    return sources


def beer_sources_from_keys(state: GameState, player_id: str, location: str,
                           keys: tuple[str, ...] | list[str],
                           reserved: Reserved | None = None,
                           ) -> tuple[list[ResourceSource], list[str]]:
    """
    Resolve beer sources nominated by the seller.

    Returns (sources, errors). Each key is "tile:<id>" or
    "merchant:<id>" and must name beer the player may legally use.
    """
    reserved = dict(reserved or {})
    sources: list[ResourceSource] = []
    errors: list[str] = []
    for key in keys:
        kind, _, ref = key.partition(":")
        if kind == SourceKind.TILE.value:
            tile = state.placed_industries.get(ref)
            if tile is None or tile.industry_type != IndustryType.BREWERY:
                errors.append(f"Brewery {ref} not found")
                continue
            if tile.is_flipped or tile.current_resources - reserved.get(key, 0) <= 0:
                errors.append(f"Brewery {ref} has no beer")
                continue
            if tile.player_id != player_id and not are_connected(state, location, tile.location):
                errors.append(f"Brewery {ref} is not connected to {location}")
                continue
            source = ResourceSource(SourceKind.TILE, ResourceType.BEER, tile_id=ref)
        elif kind == SourceKind.MERCHANT.value:
            merchant = state.board.get_merchant(ref)
            if merchant is None:
                errors.append(f"Merchant {ref} not found")
                continue
            if merchant.current_beer - reserved.get(key, 0) <= 0:
                errors.append(f"Merchant {ref} has no beer")
                continue
            if not are_connected(state, location, merchant.location):
                errors.append(f"Merchant {ref} is not connected to {location}")
                continue
            source = ResourceSource(SourceKind.MERCHANT, ResourceType.BEER, merchant_id=ref)
        else:
            errors.append(f"Unknown beer source: {key}")
            continue
        reserved[key] = reserved.get(key, 0) + 1
        sources.append(source)
    return sources, errors


# =============================================================================
# Mutation
# =============================================================================

def consume_resources(state: GameState, sources: list[ResourceSource],
                      changes: list[StateChange] | None = None) -> int:
    """
    Take every source off the board and return the money owed for them.

    A tile emptied here flips and credits its owner's income bonus.
    """
    cost = 0
    for source in sources:
        cost += source.cost
        if source.synthetic:
            continue

        if source.kind == SourceKind.TILE:
            tile = state.placed_industries.get(source.tile_id)
            if tile is None or tile.current_resources <= 0:
                raise ValueError(f"Tile {source.tile_id} has no {source.resource.value} left")
            tile.current_resources -= 1
            if tile.current_resources == 0 and not tile.is_flipped:
                tile.is_flipped = True
                owner = state.get_player(tile.player_id)
                new_income = owner.adjust_income(tile.income_bonus) if owner else None
                logger.debug("Tile %s emptied and flipped", tile.tile_id)
                if changes is not None:
                    changes.append(StateChange(
                        StateChangeType.TILE_FLIPPED, tile.player_id, {"tile_id": tile.tile_id},
                    ))
                    changes.append(StateChange(
                        StateChangeType.INCOME, tile.player_id,
                        {"change": tile.income_bonus, "new_income": new_income},
                    ))

        elif source.kind == SourceKind.MARKET:
            space = state.board.market_for(source.resource).space_at(source.cost)
            if space is None or space.count <= 0:
                raise ValueError(f"No {source.resource.value} left at £{source.cost}")
            space.count -= 1

        elif source.kind == SourceKind.MERCHANT:
            merchant = state.board.get_merchant(source.merchant_id)
            if merchant is None or merchant.current_beer <= 0:
                raise ValueError(f"Merchant {source.merchant_id} has no beer")
            merchant.current_beer -= 1

    return cost


def add_resources_to_market(state: GameState, resource: ResourceType, quantity: int) -> int:
    """
    Sell units into a market, most expensive free space first.

    Returns the money earned. Units that find no free space are
    discarded.
    """
    market = state.board.market_for(resource)
    earned = 0
    for space in sorted(market.spaces, key=lambda s: s.price, reverse=True):
        if quantity <= 0:
            break
        added = min(space.max_count - space.count, quantity)
        if added <= 0:
            continue
        space.count += added
        earned += added * space.price
        quantity -= added
    return earned
