"""
Industry tile catalogue - every tile on a player mat, by type and level.
"""

from __future__ import annotations

from ...engine_core.enums import Era, IndustryType, ResourceType
from ...engine_core.state import IndustryTile, IndustryTileDefinition


CANAL_ONLY = (Era.CANAL,)
BOTH_ERAS = (Era.CANAL, Era.RAIL)


def _tiles(industry_type: IndustryType, rows, **shared) -> list[tuple[IndustryTileDefinition, int]]:
    """
    Expand catalogue rows into (definition, copies) pairs.

    A row is (level, copies, money, coal, iron, income, vp, extras);
    level 1 is Canal-only unless `level_one_both_eras` is set.
    """
    level_one_both_eras = shared.pop("level_one_both_eras", False)
    result = []
    for level, copies, money, coal, iron, income, vp, extras in rows:
        eras = CANAL_ONLY if level == 1 and not level_one_both_eras else BOTH_ERAS
        definition = IndustryTileDefinition(
            industry_type=industry_type,
            level=level,
            money_cost=money,
            coal_cost=coal,
            iron_cost=iron,
            income_bonus=income,
            victory_points=vp,
            available_in_eras=eras,
            **shared,
            **extras,
        )
        result.append((definition, copies))
    return result


COTTON_MILL_TILES = _tiles(IndustryType.COTTON_MILL, [
    (1, 3, 12, 1, 0, 5, 3, {"beer_required": 0}),
    (2, 3, 14, 1, 1, 4, 5, {"beer_required": 1}),
    (3, 3, 16, 1, 1, 3, 9, {"beer_required": 1}),
    (4, 2, 18, 1, 1, 2, 12, {"beer_required": 1}),
])

COAL_MINE_TILES = _tiles(IndustryType.COAL_MINE, [
    (1, 2, 5, 0, 0, 4, 1, {"resource_capacity": 2}),
    (2, 2, 7, 0, 0, 7, 2, {"resource_capacity": 3}),
    (3, 2, 8, 0, 1, 6, 3, {"resource_capacity": 4}),
    (4, 1, 10, 0, 1, 5, 4, {"resource_capacity": 5}),
], resource_type=ResourceType.COAL, must_connect_to_merchant=True)

IRON_WORKS_TILES = _tiles(IndustryType.IRON_WORKS, [
    (1, 1, 5, 1, 0, 3, 3, {"resource_capacity": 4}),
    (2, 1, 7, 1, 0, 3, 5, {"resource_capacity": 4}),
    (3, 2, 9, 1, 0, 2, 7, {"resource_capacity": 5}),
], resource_type=ResourceType.IRON)

MANUFACTURER_TILES = _tiles(IndustryType.MANUFACTURER, [
    (1, 3, 8, 1, 0, 5, 3, {"beer_required": 0}),
    (2, 3, 10, 1, 1, 4, 5, {"beer_required": 1}),
    (3, 3, 12, 1, 1, 3, 8, {"beer_required": 1}),
    (4, 2, 14, 1, 1, 2, 11, {"beer_required": 1}),
])

POTTERY_TILES = _tiles(IndustryType.POTTERY, [
    (1, 1, 5, 1, 0, 5, 10, {"beer_required": 1}),
    (2, 1, 7, 1, 0, 4, 1, {"beer_required": 1}),
    (3, 1, 9, 1, 1, 3, 2, {"beer_required": 1, "has_lightbulb": True}),
    (4, 1, 11, 1, 1, 2, 1, {"beer_required": 2, "has_lightbulb": True}),
    (5, 1, 11, 1, 1, 1, 1, {"beer_required": 2, "has_lightbulb": True}),
], level_one_both_eras=True)

BREWERY_TILES = _tiles(IndustryType.BREWERY, [
    (1, 2, 5, 0, 0, 4, 4, {}),
    (2, 2, 7, 0, 0, 5, 5, {}),
    (3, 2, 9, 0, 0, 5, 7, {}),
    (4, 1, 9, 0, 0, 4, 10, {}),
], resource_type=ResourceType.BEER, resource_capacity=1)

MAT_LAYOUT: dict[IndustryType, list[tuple[IndustryTileDefinition, int]]] = {
    IndustryType.COTTON_MILL: COTTON_MILL_TILES,
    IndustryType.COAL_MINE: COAL_MINE_TILES,
    IndustryType.IRON_WORKS: IRON_WORKS_TILES,
    IndustryType.MANUFACTURER: MANUFACTURER_TILES,
    IndustryType.POTTERY: POTTERY_TILES,
    IndustryType.BREWERY: BREWERY_TILES,
}


def create_player_mat(player_id: str) -> dict[IndustryType, list[IndustryTile]]:
    """A full player mat, lowest level first. Tile ids are "<player>-tile-<n>"."""
    counter = 0
    mat: dict[IndustryType, list[IndustryTile]] = {}
    for industry_type, layout in MAT_LAYOUT.items():
        tiles = []
        for definition, copies in layout:
            for _ in range(copies):
                tiles.append(IndustryTile(
                    tile_id=f"{player_id}-tile-{counter}",
                    player_id=player_id,
                    definition=definition,
                    current_resources=definition.resource_capacity,
                ))
                counter += 1
        mat[industry_type] = tiles
    return mat
