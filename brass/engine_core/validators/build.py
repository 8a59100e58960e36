"""
Build - place the next industry tile from the player's mat.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from ..action import (
    Action, ActionResult, ActionValidation, BuildPayload, StateChange, StateChangeType,
)
from ..cards import IndustryCard, LocationCard, WildIndustryCard, WildLocationCard
from ..enums import Era, IndustryType, ResourceType
from ..eras import RAIL_BREWERY_BEER
from ..network import are_connected, buildable_locations, player_network
from ..resources import (
    ResourceSource, add_resources_to_market, consume_resources,
    find_coal_sources, find_iron_sources, total_cost,
)
from ..state import GameState, IndustrySlot, IndustryTile, PlacedIndustryTile, PlayerState
from .common import common_errors, discard_card, pay, use_action


logger = logging.getLogger(__name__)

# Tiles that sell their whole output to the market as soon as they are built
MARKET_PRODUCERS = {
    IndustryType.COAL_MINE: ResourceType.COAL,
    IndustryType.IRON_WORKS: ResourceType.IRON,
}


@dataclass
class _BuildPlan:
    player: PlayerState
    tile: IndustryTile
    slot: IndustrySlot
    coal: list[ResourceSource]
    iron: list[ResourceSource]

    @property
    def cost(self) -> int:
        return self.tile.definition.money_cost + total_cost(self.coal) + total_cost(self.iron)


def _card_errors(state: GameState, player: PlayerState, card, payload: BuildPayload) -> list[str]:
    is_farm = payload.location.startswith("FARM_BREWERY")
    if isinstance(card, (WildLocationCard, WildIndustryCard)):
        if is_farm:
            return ["Wild cards cannot build at farm breweries"]
        return []
    if isinstance(card, LocationCard):
        if card.location != payload.location:
            return ["Location card does not match build location"]
        return []
    if isinstance(card, IndustryCard):
        if card.industry_type != payload.industry_type:
            return ["Industry card does not match industry type"]
        if payload.location not in player_network(state, player.player_id):
            return ["Industry card requires location in network"]
        return []
    return ["Card cannot be used to build"]


def _plan(state: GameState, action: Action) -> tuple[_BuildPlan | None, list[str]]:
    player, errors = common_errors(state, action)
    if player is None:
        return None, errors
    payload = action.payload
    if not isinstance(payload, BuildPayload):
        return None, errors + ["Build action needs a location and an industry type"]

    location = state.board.locations.get(payload.location)
    if location is None:
        return None, errors + [f"Location {payload.location} not found"]

    card = player.find_card(action.card_id)
    if card is not None:
        errors += _card_errors(state, player, card, payload)

    if payload.location not in buildable_locations(state, player.player_id):
        errors.append("Location not in player network")

    tile = player.lowest_mat_tile(payload.industry_type)
    if tile is None:
        errors.append(f"No {payload.industry_type.value} tiles left")
    elif not tile.definition.available_in(state.era):
        errors.append(
            f"Level {tile.level} {payload.industry_type.value} not available in {state.era.value} era"
        )

    slot = None
    if state.era == Era.CANAL and location.occupied:
        errors.append("Only one industry per location in Canal era")
    else:
        slot = next((s for s in location.industry_slots if s.accepts(payload.industry_type)), None)
        if slot is None:
            errors.append("No available space for this industry")

    if tile is None or slot is None or errors:
        return None, errors

    definition = tile.definition
    coal = find_coal_sources(state, player.player_id, payload.location, definition.coal_cost)
    iron = find_iron_sources(state, player.player_id, definition.iron_cost)
    if len(coal) < definition.coal_cost:
        errors.append(f"Not enough coal available (need {definition.coal_cost})")
    if len(iron) < definition.iron_cost:
        errors.append(f"Not enough iron available (need {definition.iron_cost})")

    plan = _BuildPlan(player=player, tile=tile, slot=slot, coal=coal, iron=iron)
    if player.money < plan.cost:
        errors.append(f"Not enough money (need £{plan.cost}, have £{player.money})")

    if definition.must_connect_to_merchant and not any(
        are_connected(state, payload.location, m.location) for m in state.board.merchants
    ):
        errors.append("Coal mine must connect to a merchant")

    return (None, errors) if errors else (plan, [])


def validate_build(state: GameState, action: Action) -> ActionValidation:
    _, errors = _plan(state, action)
    return ActionValidation.from_errors(errors)


def execute_build(state: GameState, action: Action) -> ActionResult:
    plan, errors = _plan(state, action)
    if plan is None:
        return ActionResult.failure(errors)

    payload: BuildPayload = action.payload
    player = plan.player
    changes: list[StateChange] = []

    coal_cost = consume_resources(state, plan.coal, changes)
    iron_cost = consume_resources(state, plan.iron, changes)
    for resource, sources, cost in (("coal", plan.coal, coal_cost), ("iron", plan.iron, iron_cost)):
        if sources:
            changes.append(StateChange(
                StateChangeType.RESOURCE_CONSUMED, player.player_id,
                {"resource": resource, "quantity": len(sources), "cost": cost},
            ))
    pay(player, plan.cost, changes, reason="build")

    player.remove_mat_tile(plan.tile.tile_id)
    placed = PlacedIndustryTile.from_tile(plan.tile, payload.location, state.era)
    if placed.industry_type == IndustryType.BREWERY and state.era == Era.RAIL:
        placed.current_resources = RAIL_BREWERY_BEER
    state.placed_industries[placed.tile_id] = placed
    player.placed_industries.append(placed.tile_id)
    plan.slot.current_tile = placed.tile_id
    changes.append(StateChange(
        StateChangeType.TILE_PLACED, player.player_id,
        {
            "tile_id": placed.tile_id,
            "location": payload.location,
            "industry_type": placed.industry_type.value,
            "level": placed.level,
        },
    ))

    resource = MARKET_PRODUCERS.get(placed.industry_type)
    if resource is not None and placed.current_resources > 0:
        quantity = placed.current_resources
        earned = add_resources_to_market(state, resource, quantity)
        player.money += earned
        placed.current_resources = 0
        placed.is_flipped = True
        player.adjust_income(placed.income_bonus)
        changes += [
            StateChange(StateChangeType.MARKET_CHANGED, player.player_id,
                        {"resource": resource.value, "quantity": quantity, "money_earned": earned}),
            StateChange(StateChangeType.TILE_FLIPPED, player.player_id, {"tile_id": placed.tile_id}),
            StateChange(StateChangeType.INCOME, player.player_id,
                        {"change": placed.income_bonus, "new_income": player.income}),
        ]

    discard_card(state, player, action.card_id, changes)
    use_action(player)
    logger.debug("%s built %s at %s", player.player_id, placed.tile_id, payload.location)
    return ActionResult.succeeded(changes)
