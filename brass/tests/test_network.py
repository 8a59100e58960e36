"""
Tests for network connectivity.

Tests:
- Symmetry and reflexivity of connectivity
- Component cache invalidation
- Player networks and buildable locations
- Shortest paths
"""

import itertools

from ..engine_core.enums import IndustryType
from ..engine_core.network import (
    are_adjacent, are_connected, buildable_locations, find_path,
    player_network, reachable_locations,
)


class TestConnectivity:
    """Tests for are_connected and reachable_locations."""

    def test_reflexive(self, game):
        """Every location is connected to itself, links or not."""
        assert are_connected(game, "BELPER", "BELPER")

    def test_unlinked_locations_not_connected(self, game):
        """Adjacency alone does not connect two locations."""
        assert not are_connected(game, "BELPER", "DERBY")

    def test_symmetric(self, game, add_link):
        """are_connected(a, b) == are_connected(b, a) for every pair."""
        add_link(game, "alice", "BELPER", "DERBY")
        add_link(game, "bob", "DERBY", "LEEK")
        add_link(game, "alice", "OXFORD", "COVENTRY")

        names = ["BELPER", "DERBY", "LEEK", "OXFORD", "COVENTRY", "STONE"]
        for a, b in itertools.combinations(names, 2):
            assert are_connected(game, a, b) == are_connected(game, b, a)
        assert are_connected(game, "BELPER", "LEEK")
        assert not are_connected(game, "LEEK", "OXFORD")

    def test_ownership_ignored(self, game, add_link):
        """Links of any player join locations."""
        add_link(game, "bob", "BELPER", "DERBY")
        assert are_connected(game, "BELPER", "DERBY")

    def test_cache_follows_link_changes(self, game, add_link):
        """Adding and removing a link invalidates the cached components."""
        assert not are_connected(game, "BELPER", "DERBY")
        link = add_link(game, "alice", "BELPER", "DERBY")
        assert are_connected(game, "BELPER", "DERBY")

        game.board.remove_link(link.link_id)
        assert not are_connected(game, "BELPER", "DERBY")

    def test_reachable_locations(self, game, add_link):
        """Reachability covers the whole linked component."""
        add_link(game, "alice", "BELPER", "DERBY")
        add_link(game, "alice", "DERBY", "NOTTINGHAM")

        assert reachable_locations(game, "BELPER") == {"BELPER", "DERBY", "NOTTINGHAM"}
        assert reachable_locations(game, "OXFORD") == {"OXFORD"}

    def test_static_adjacency(self, game):
        """Adjacency comes from the board, not from links."""
        assert are_adjacent(game, "BELPER", "DERBY")
        assert not are_adjacent(game, "BELPER", "OXFORD")
        assert not are_adjacent(game, "NOWHERE", "BELPER")


class TestPlayerNetwork:
    """Tests for player_network and buildable_locations."""

    def test_whole_board_before_first_tile(self, game):
        """A player with no tiles may build anywhere."""
        assert buildable_locations(game, "alice") == set(game.board.locations)

    def test_network_from_tiles(self, game, place_tile):
        """A built tile puts its location in the network."""
        place_tile(game, "alice", IndustryType.COTTON_MILL, "BELPER")
        assert player_network(game, "alice") == {"BELPER"}
        assert buildable_locations(game, "alice") == {"BELPER"}

    def test_network_expands_through_any_link(self, game, place_tile, add_link):
        """Other players' links extend a player's network."""
        place_tile(game, "alice", IndustryType.COTTON_MILL, "BELPER")
        add_link(game, "bob", "BELPER", "DERBY")
        add_link(game, "bob", "DERBY", "LEEK")

        assert player_network(game, "alice") == {"BELPER", "DERBY", "LEEK"}

    def test_own_link_ends_are_in_network(self, game, add_link):
        """Both ends of a player's own link are in their network."""
        add_link(game, "alice", "OXFORD", "COVENTRY")
        assert player_network(game, "alice") == {"OXFORD", "COVENTRY"}
        assert player_network(game, "bob") == set()


class TestFindPath:
    """Tests for shortest paths over links."""

    def test_path_over_links(self, game, add_link):
        """The shortest linked path is returned end to end."""
        add_link(game, "alice", "BELPER", "DERBY")
        add_link(game, "alice", "DERBY", "NOTTINGHAM")
        add_link(game, "bob", "NOTTINGHAM", "MARKET_HARBOROUGH")

        assert find_path(game, "BELPER", "MARKET_HARBOROUGH") == [
            "BELPER", "DERBY", "NOTTINGHAM", "MARKET_HARBOROUGH",
        ]

    def test_shortest_of_two_routes(self, game, add_link):
        """A direct link beats a detour."""
        add_link(game, "alice", "BELPER", "DERBY")
        add_link(game, "alice", "DERBY", "LEEK")
        add_link(game, "alice", "LEEK", "STONE")
        add_link(game, "alice", "DERBY", "BURTON_ON_TRENT")

        assert find_path(game, "BELPER", "LEEK") == ["BELPER", "DERBY", "LEEK"]

    def test_no_path(self, game):
        """Unconnected locations have no path."""
        assert find_path(game, "BELPER", "OXFORD") is None

    def test_path_to_self(self, game):
        """A location's path to itself is itself."""
        assert find_path(game, "BELPER", "BELPER") == ["BELPER"]
