"""
Tests for resource sourcing and consumption.
"""

import pytest

from ..engine_core.enums import IndustryType, ResourceType
from ..engine_core.resources import (
    SourceKind, add_resources_to_market, beer_sources_from_keys, consume_resources,
    find_beer_sources, find_coal_sources, find_iron_sources, reserve, total_cost,
    uses_ceiling_price,
)


class TestSourcingProperties:
    """Properties that hold for every request size."""

    @pytest.mark.parametrize("quantity", range(0, 40, 3))
    def test_coal_never_more_than_requested(self, game, quantity):
        """Coal sourcing returns at most the quantity asked for."""
        sources = find_coal_sources(game, "alice", "BELPER", quantity)
        assert len(sources) <= quantity

    @pytest.mark.parametrize("quantity", range(0, 40, 3))
    def test_coal_costs_non_decreasing(self, game, place_tile, quantity):
        """Cheaper coal is always taken first."""
        place_tile(game, "alice", IndustryType.COAL_MINE, "CANNOCK", level=2)
        sources = find_coal_sources(game, "alice", "CANNOCK", quantity)
        costs = [s.cost for s in sources]
        assert costs == sorted(costs)

    @pytest.mark.parametrize("quantity", range(0, 30, 4))
    def test_iron_costs_non_decreasing(self, game, quantity):
        """Iron follows the same ordering."""
        sources = find_iron_sources(game, "alice", quantity)
        costs = [s.cost for s in sources]
        assert len(sources) <= quantity
        assert costs == sorted(costs)


class TestCoalAndIron:
    """Tests for coal and iron finders."""

    def test_connected_mine_is_free(self, game, place_tile, add_link):
        """A mine linked to the build location supplies coal at no cost."""
        mine = place_tile(game, "bob", IndustryType.COAL_MINE, "CANNOCK", level=1)
        add_link(game, "bob", "CANNOCK", "WALSALL")

        sources = find_coal_sources(game, "alice", "WALSALL", 3)

        assert [s.kind for s in sources[:2]] == [SourceKind.TILE, SourceKind.TILE]
        assert all(s.tile_id == mine.tile_id for s in sources[:2])
        assert sources[2].kind == SourceKind.MARKET
        assert sources[2].cost == 1

    def test_unconnected_mine_ignored(self, game, place_tile):
        """Coal never comes from a mine off the network."""
        place_tile(game, "bob", IndustryType.COAL_MINE, "CANNOCK", level=1)
        sources = find_coal_sources(game, "alice", "BELPER", 1)
        assert sources[0].kind == SourceKind.MARKET

    def test_market_then_ceiling(self, game):
        """Past the last physical cube coal is priced at the ceiling."""
        market = game.board.coal_market
        available = market.total_available

        sources = find_coal_sources(game, "alice", "BELPER", available + 2)

        assert len(sources) == available + 2
        assert sources[-1].synthetic
        assert sources[-1].cost == market.ceiling_price
        assert uses_ceiling_price(sources)

    def test_iron_works_anywhere(self, game, place_tile):
        """Iron needs no connection."""
        works = place_tile(game, "bob", IndustryType.IRON_WORKS, "DUDLEY", level=1)
        sources = find_iron_sources(game, "alice", 2)
        assert all(s.tile_id == works.tile_id for s in sources)
        assert total_cost(sources) == 0

    def test_empty_iron_tier_skipped(self, game):
        """The £1 iron space starts empty, so the first iron costs £2."""
        sources = find_iron_sources(game, "alice", 1)
        assert sources[0].cost == 2

    def test_reserved_units_not_reused(self, game):
        """Reserved units are skipped by later calls."""
        reserved = {}
        first = find_coal_sources(game, "alice", "BELPER", 1, reserved)
        reserve(reserved, first)
        second = find_coal_sources(game, "alice", "BELPER", 1, reserved)

        assert first[0].cost == 1
        assert second[0].cost == 2


class TestBeer:
    """Tests for beer finders."""

    def test_own_brewery_anywhere(self, game, place_tile):
        """A player's own beer needs no connection."""
        brewery = place_tile(game, "alice", IndustryType.BREWERY, "STAFFORD", level=1)
        sources = find_beer_sources(game, "alice", "OXFORD", 1)
        assert sources[0].tile_id == brewery.tile_id

    def test_opponent_brewery_needs_connection(self, game, place_tile, add_link):
        """Opponent beer is only usable over links."""
        place_tile(game, "bob", IndustryType.BREWERY, "TAMWORTH", level=1)
        assert find_beer_sources(game, "alice", "NUNEATON", 1) == []

        add_link(game, "bob", "TAMWORTH", "NUNEATON")
        assert len(find_beer_sources(game, "alice", "NUNEATON", 1)) == 1

    def test_merchant_beer_only_when_allowed(self, game):
        """Merchant beer is offered to sales, not to links."""
        assert find_beer_sources(game, "alice", "OXFORD", 1) == []
        sources = find_beer_sources(game, "alice", "OXFORD", 1, allow_merchant=True)
        assert sources[0].kind == SourceKind.MERCHANT

    def test_keys_resolve(self, game, place_tile):
        """Nominated keys turn into sources."""
        brewery = place_tile(game, "alice", IndustryType.BREWERY, "STAFFORD", level=1)
        sources, errors = beer_sources_from_keys(game, "alice", "OXFORD", [f"tile:{brewery.tile_id}"])
        assert errors == []
        assert sources[0].tile_id == brewery.tile_id

    def test_keys_cannot_overdraw(self, game, place_tile):
        """Naming a one-beer brewery twice fails on the second unit."""
        brewery = place_tile(game, "alice", IndustryType.BREWERY, "STAFFORD", level=1)
        key = f"tile:{brewery.tile_id}"
        _, errors = beer_sources_from_keys(game, "alice", "OXFORD", [key, key])
        assert errors == [f"Brewery {brewery.tile_id} has no beer"]

    def test_unknown_key(self, game):
        """Keys must name a brewery or merchant."""
        _, errors = beer_sources_from_keys(game, "alice", "OXFORD", ["market:beer"])
        assert errors == ["Unknown beer source: market:beer"]


class TestConsumption:
    """Tests for consume_resources and add_resources_to_market."""

    def test_market_unit_removed(self, game):
        """Consuming market coal empties the matching price space."""
        sources = find_coal_sources(game, "alice", "BELPER", 2)
        cost = consume_resources(game, sources)

        assert cost == 1 + 2
        assert game.board.coal_market.space_at(1).count == 0
        assert game.board.coal_market.space_at(2).count == 2

    def test_ceiling_units_remove_nothing(self, game):
        """Ceiling-priced coal is paid for but takes nothing off the board."""
        market = game.board.coal_market
        for space in market.spaces:
            space.count = 0

        cost = consume_resources(game, find_coal_sources(game, "alice", "BELPER", 2))

        assert cost == 2 * market.ceiling_price
        assert market.total_available == 0

    def test_emptied_tile_flips_and_pays_income(self, game, place_tile):
        """Taking the last cube flips the tile for its owner."""
        mine = place_tile(game, "bob", IndustryType.COAL_MINE, "CANNOCK", level=1)
        bob = game.get_player("bob")
        changes = []

        consume_resources(game, find_coal_sources(game, "alice", "CANNOCK", 2), changes)

        assert mine.is_flipped
        assert bob.income == 14
        assert [c.type.value for c in changes] == ["tile_flipped", "income"]

    def test_stale_source_raises(self, game):
        """Consuming a unit that is no longer there is an error."""
        sources = find_coal_sources(game, "alice", "BELPER", 1)
        consume_resources(game, sources)
        with pytest.raises(ValueError):
            consume_resources(game, sources)

    def test_market_fills_from_the_top(self, game):
        """Selling to the market fills the most expensive free space."""
        market = game.board.iron_market
        for space in market.spaces:
            space.count = 0

        earned = add_resources_to_market(game, ResourceType.IRON, 6)

        assert earned == 5 * 5 + 4
        assert market.space_at(5).count == 5
        assert market.space_at(4).count == 1
