"""
Game State - The authoritative state of one game.

Design principles:
- One aggregate: everything the rules look at hangs off GameState
- Mutated in place, but only by executors and the turn/era machine
- Cloneable: the engine snapshots before executing so a failed
  execution can be rolled back
- Deterministic: the RNG and the id generator live on the state
"""

from __future__ import annotations
from dataclasses import dataclass, field
from copy import deepcopy
import random

from .cards import Card, CardDeck
from .enums import Era, GamePhase, IndustryType, LinkType, MerchantBonusType, ResourceType
from .ids import IdGenerator
from .income import STARTING_INCOME, clamp_income


HAND_SIZE = 8
STARTING_MONEY = 17
STARTING_LINK_TILES = 14
FIRST_ROUND_ACTIONS = 1
ACTIONS_PER_TURN = 2


# =============================================================================
# Industry tiles
# =============================================================================

@dataclass(frozen=True)
class IndustryTileDefinition:
    """Static template for one tile of a given industry type and level."""
    industry_type: IndustryType
    level: int
    money_cost: int
    income_bonus: int
    victory_points: int
    available_in_eras: tuple[Era, ...]
    coal_cost: int = 0
    iron_cost: int = 0
    resource_capacity: int = 0
    resource_type: ResourceType | None = None
    beer_required: int = 0
    must_connect_to_merchant: bool = False
    has_lightbulb: bool = False  # Top pottery tiles cannot be developed

    def available_in(self, era: Era) -> bool:
        return era in self.available_in_eras


@dataclass
class IndustryTile:
    """
    A tile instance owned by a player.

    Sits on the player mat until built; once built it is wrapped in a
    PlacedIndustryTile.
    """
    tile_id: str
    player_id: str
    definition: IndustryTileDefinition
    is_flipped: bool = False
    current_resources: int = 0

    @property
    def industry_type(self) -> IndustryType:
        return self.definition.industry_type

    @property
    def level(self) -> int:
        return self.definition.level

    @property
    def income_bonus(self) -> int:
        return self.definition.income_bonus

    @property
    def victory_points(self) -> int:
        return self.definition.victory_points


@dataclass
class PlacedIndustryTile(IndustryTile):
    location: str = ""
    placed_in_era: Era = Era.CANAL

    @classmethod
    def from_tile(cls, tile: IndustryTile, location: str, era: Era) -> PlacedIndustryTile:
        return cls(
            tile_id=tile.tile_id,
            player_id=tile.player_id,
            definition=tile.definition,
            is_flipped=False,
            current_resources=tile.definition.resource_capacity,
            location=location,
            placed_in_era=era,
        )


# =============================================================================
# Board
# =============================================================================

@dataclass
class IndustrySlot:
    allowed_industries: tuple[IndustryType, ...]
    current_tile: str | None = None

    def accepts(self, industry_type: IndustryType) -> bool:
        return self.current_tile is None and industry_type in self.allowed_industries


@dataclass
class BoardLocation:
    name: str
    industry_slots: list[IndustrySlot]
    adjacent_locations: tuple[str, ...]
    coordinates: tuple[int, int] = (0, 0)  # 0-1000 render scale

    @property
    def is_farm_brewery(self) -> bool:
        return self.name.startswith("FARM_BREWERY")

    @property
    def occupied(self) -> bool:
        return any(slot.current_tile for slot in self.industry_slots)

    def slot_holding(self, tile_id: str) -> IndustrySlot | None:
        for slot in self.industry_slots:
            if slot.current_tile == tile_id:
                return slot
        return None


@dataclass
class Link:
    """A placed canal or rail link between two adjacent locations."""
    link_id: str
    from_location: str
    to_location: str
    link_type: LinkType
    player_id: str

    def joins(self, a: str, b: str) -> bool:
        return {self.from_location, self.to_location} == {a, b}

    def other_end(self, location: str) -> str:
        return self.to_location if location == self.from_location else self.from_location


@dataclass
class Merchant:
    merchant_id: str
    location: str
    industry_type: IndustryType
    bonus_type: MerchantBonusType
    bonus_value: int
    has_beer_space: bool = True
    current_beer: int = 1
    min_player_count: int = 2


@dataclass
class MarketSpace:
    price: int
    count: int
    max_count: int


@dataclass
class ResourceMarket:
    """A price ladder; spaces are kept cheapest first."""
    resource: ResourceType
    spaces: list[MarketSpace]
    ceiling_price: int  # Price paid when the ladder is physically empty

    @property
    def total_available(self) -> int:
        return sum(space.count for space in self.spaces)

    def space_at(self, price: int) -> MarketSpace | None:
        for space in self.spaces:
            if space.price == price:
                return space
        return None


@dataclass
class BoardState:
    """
    Locations, placed links, merchants and the two markets.

    `link_version` is bumped on every link change; the connectivity
    analyzer keys its component cache on it.
    """
    locations: dict[str, BoardLocation]
    coal_market: ResourceMarket
    iron_market: ResourceMarket
    links: list[Link] = field(default_factory=list)
    merchants: list[Merchant] = field(default_factory=list)
    link_version: int = 0
    _components: dict[str, int] | None = field(default=None, repr=False, compare=False)
    _components_version: int = field(default=-1, repr=False, compare=False)

    def add_link(self, link: Link) -> None:
        self.links.append(link)
        self._invalidate_links()

    def remove_link(self, link_id: str) -> Link | None:
        for index, link in enumerate(self.links):
            if link.link_id == link_id:
                del self.links[index]
                self._invalidate_links()
                return link
        return None

    def get_link(self, link_id: str) -> Link | None:
        for link in self.links:
            if link.link_id == link_id:
                return link
        return None

    def link_between(self, a: str, b: str) -> Link | None:
        for link in self.links:
            if link.joins(a, b):
                return link
        return None

    def get_merchant(self, merchant_id: str) -> Merchant | None:
        for merchant in self.merchants:
            if merchant.merchant_id == merchant_id:
                return merchant
        return None

    def market_for(self, resource: ResourceType) -> ResourceMarket:
        if resource == ResourceType.COAL:
            return self.coal_market
        if resource == ResourceType.IRON:
            return self.iron_market
        raise ValueError(f"There is no market for {resource.value}")

    def _invalidate_links(self) -> None:
        self.link_version += 1
        self._components = None


# =============================================================================
# Players
# =============================================================================

@dataclass
class TurnOrderEntry:
    player_id: str
    money_spent: int = 0
    order: int = 0  # Tie-break index


@dataclass
class PlayerState:
    """State for a single player."""
    player_id: str
    money: int = STARTING_MONEY
    income: int = STARTING_INCOME  # Income level, -10..30
    victory_points: int = 0
    hand: list[Card] = field(default_factory=list)
    discard_pile: list[Card] = field(default_factory=list)
    link_tiles_remaining: int = STARTING_LINK_TILES

    # Player mat: tiles not yet built, lowest level first
    industry_tiles: dict[IndustryType, list[IndustryTile]] = field(default_factory=dict)

    placed_industries: list[str] = field(default_factory=list)
    placed_links: list[str] = field(default_factory=list)

    money_spent_this_round: int = 0
    actions_remaining: int = 1
    has_passed: bool = False

    # Era-end scoring, kept for the final standings
    link_vp_scored: int = 0
    tile_vp_scored: int = 0

    @property
    def can_act(self) -> bool:
        return not self.has_passed and self.actions_remaining > 0

    def find_card(self, card_id: str) -> Card | None:
        for card in self.hand:
            if card.card_id == card_id:
                return card
        return None

    def has_card(self, card_id: str) -> bool:
        return self.find_card(card_id) is not None

    def take_card(self, card_id: str) -> Card | None:
        """Remove a card from the hand and return it."""
        for index, card in enumerate(self.hand):
            if card.card_id == card_id:
                return self.hand.pop(index)
        return None

    def adjust_income(self, delta: int) -> int:
        """Move along the income track, clamped to [-10, 30]. Returns the new level."""
        self.income = clamp_income(self.income + delta)
        return self.income

    def spend(self, amount: int) -> None:
        self.money -= amount
        self.money_spent_this_round += amount

    def lowest_mat_tile(self, industry_type: IndustryType) -> IndustryTile | None:
        """The tile that would be built next for an industry type."""
        tiles = self.industry_tiles.get(industry_type) or []
        if not tiles:
            return None
        lowest = min(tile.level for tile in tiles)
        for tile in tiles:
            if tile.level == lowest:
                return tile
        return None

    def remove_mat_tile(self, tile_id: str) -> IndustryTile | None:
        for tiles in self.industry_tiles.values():
            for index, tile in enumerate(tiles):
                if tile.tile_id == tile_id:
                    return tiles.pop(index)
        return None


# =============================================================================
# Game
# =============================================================================

@dataclass
class GameState:
    """
    Complete game state at a point in time.

    `turn_order` is a permutation of the players; `current_player_index`
    indexes into it, not into `players`.
    """
    game_id: str
    board: BoardState
    card_deck: CardDeck
    player_count: int = 2
    phase: GamePhase = GamePhase.SETUP
    era: Era = Era.CANAL
    current_round: int = 1
    max_rounds: int = 10

    players: list[PlayerState] = field(default_factory=list)
    turn_order: list[TurnOrderEntry] = field(default_factory=list)
    current_player_index: int = 0

    placed_industries: dict[str, PlacedIndustryTile] = field(default_factory=dict)
    is_first_round: bool = True

    # Determinism
    random_seed: int | None = None
    rng: random.Random = field(default_factory=random.Random, repr=False)
    id_generator: IdGenerator = field(default_factory=IdGenerator, repr=False)

    @property
    def current_player(self) -> PlayerState | None:
        """The player whose turn it is, resolved through turn order."""
        if not 0 <= self.current_player_index < len(self.turn_order):
            return None
        return self.get_player(self.turn_order[self.current_player_index].player_id)

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def all_hands_empty(self) -> bool:
        return all(not p.hand for p in self.players)

    def reset_action_budgets(self) -> None:
        """One action each in the first round of an era, two afterwards."""
        actions = FIRST_ROUND_ACTIONS if self.is_first_round else ACTIONS_PER_TURN
        for p in self.players:
            p.actions_remaining = actions
            p.has_passed = False

    def get_player(self, player_id: str) -> PlayerState | None:
        """Get player by ID."""
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def tiles_of(self, player_id: str) -> list[PlacedIndustryTile]:
        """Placed tiles owned by a player, in placement order."""
        return [tile for tile in self.placed_industries.values() if tile.player_id == player_id]

    def remove_placed_tile(self, tile_id: str) -> PlacedIndustryTile | None:
        """
        Take a built tile off the board.

        Clears the board slot, the placed-tile map and the owner's list
        together so the three never disagree.
        """
        tile = self.placed_industries.pop(tile_id, None)
        if tile is None:
            return None
        location = self.board.locations.get(tile.location)
        if location:
            slot = location.slot_holding(tile_id)
            if slot:
                slot.current_tile = None
        owner = self.get_player(tile.player_id)
        if owner and tile_id in owner.placed_industries:
            owner.placed_industries.remove(tile_id)
        return tile

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)

    def restore(self, snapshot: GameState) -> None:
        """Overwrite this state in place with a snapshot taken by clone()."""
        self.__dict__.update(deepcopy(snapshot).__dict__)
