"""
Pytest fixtures for Brass tests.
"""

import pytest

from ..engine_core.engine import GameEngine
from ..engine_core.enums import IndustryType, LinkType
from ..engine_core.state import GameState, Link, PlacedIndustryTile, PlayerState
from ..games.birmingham.setup import GameConfig, create_game


@pytest.fixture
def engine() -> GameEngine:
    return GameEngine()


@pytest.fixture
def game() -> GameState:
    """A seeded 2-player game in round 1 of the Canal era."""
    return create_game(GameConfig(player_count=2), ["alice", "bob"], seed=42)


@pytest.fixture
def three_player_game() -> GameState:
    return create_game(GameConfig(player_count=3), ["alice", "bob", "carol"], seed=7)


@pytest.fixture
def current(game: GameState) -> PlayerState:
    """The player whose turn it is in `game`."""
    return game.current_player


@pytest.fixture
def place_tile():
    """
    Put a tile from a player's mat straight onto the board.

    Usage: place_tile(state, player_id, IndustryType.COAL_MINE, "CANNOCK", level=1)
    """
    def _place(state: GameState, player_id: str, industry_type: IndustryType,
               location: str, level: int | None = None) -> PlacedIndustryTile:
        player = state.get_player(player_id)
        tiles = player.industry_tiles[industry_type]
        if level is None:
            tile = player.lowest_mat_tile(industry_type)
        else:
            tile = next(t for t in tiles if t.level == level)
        player.remove_mat_tile(tile.tile_id)

        placed = PlacedIndustryTile.from_tile(tile, location, state.era)
        slot = next(s for s in state.board.locations[location].industry_slots
                    if s.accepts(industry_type))
        slot.current_tile = placed.tile_id
        state.placed_industries[placed.tile_id] = placed
        player.placed_industries.append(placed.tile_id)
        return placed

    return _place


@pytest.fixture
def add_link():
    """Lay a link on the board for a player without going through an action."""
    counter = {"n": 0}

    def _add(state: GameState, player_id: str, a: str, b: str,
             link_type: LinkType = LinkType.CANAL) -> Link:
        counter["n"] += 1
        link = Link(
            link_id=f"test-link-{counter['n']}",
            from_location=a,
            to_location=b,
            link_type=link_type,
            player_id=player_id,
        )
        state.board.add_link(link)
        state.get_player(player_id).placed_links.append(link.link_id)
        return link

    return _add
