"""
Develop - pay one iron per tile to take low-level tiles out of play.
"""

from __future__ import annotations

from ..action import (
    Action, ActionResult, ActionValidation, DevelopPayload, StateChange, StateChangeType,
)
from ..resources import consume_resources, find_iron_sources, total_cost
from ..state import GameState
from .common import common_errors, discard_card, pay, use_action


MAX_DEVELOP_TILES = 2


def _errors(state: GameState, action: Action) -> list[str]:
    player, errors = common_errors(state, action)
    if player is None:
        return errors
    payload = action.payload
    if not isinstance(payload, DevelopPayload):
        return errors + ["Develop action needs tile ids"]

    tile_ids = payload.tile_ids
    if not 1 <= len(tile_ids) <= MAX_DEVELOP_TILES:
        errors.append("Can only develop 1 or 2 tiles")
    if len(set(tile_ids)) != len(tile_ids):
        errors.append("The same tile cannot be developed twice")

    own_unflipped = [t for t in state.tiles_of(player.player_id) if not t.is_flipped]
    for tile_id in tile_ids:
        tile = state.placed_industries.get(tile_id)
        if tile is None:
            errors.append(f"Tile {tile_id} not found")
            continue
        if tile.player_id != player.player_id:
            errors.append("Can only develop own tiles")
            continue
        if tile.is_flipped:
            errors.append(f"Tile {tile_id} is already flipped")
            continue
        if tile.definition.has_lightbulb:
            errors.append("Cannot develop pottery tiles with lightbulb")
            continue
        lowest = min(t.level for t in own_unflipped if t.industry_type == tile.industry_type)
        if tile.level != lowest:
            errors.append(f"Must develop lowest level {tile.industry_type.value} first")

    iron = find_iron_sources(state, player.player_id, len(tile_ids))
    if len(iron) < len(tile_ids):
        errors.append(f"Not enough iron available (need {len(tile_ids)})")
    cost = total_cost(iron)
    if player.money < cost:
        errors.append(f"Not enough money for iron (need £{cost})")
    return errors


def validate_develop(state: GameState, action: Action) -> ActionValidation:
    return ActionValidation.from_errors(_errors(state, action))


def execute_develop(state: GameState, action: Action) -> ActionResult:
    errors = _errors(state, action)
    if errors:
        return ActionResult.failure(errors)

    player = state.get_player(action.player_id)
    tile_ids = action.payload.tile_ids
    changes: list[StateChange] = []

    iron = find_iron_sources(state, player.player_id, len(tile_ids))
    cost = consume_resources(state, iron, changes)
    changes.append(StateChange(
        StateChangeType.RESOURCE_CONSUMED, player.player_id,
        {"resource": "iron", "quantity": len(iron), "cost": cost},
    ))
    pay(player, cost, changes, reason="develop")

    for tile_id in tile_ids:
        tile = state.remove_placed_tile(tile_id)
        changes.append(StateChange(
            StateChangeType.TILE_REMOVED, player.player_id,
            {"tile_id": tile_id, "industry_type": tile.industry_type.value, "level": tile.level},
        ))

    discard_card(state, player, action.card_id, changes)
    use_action(player)
    return ActionResult.succeeded(changes)
