"""
Sell - flip cotton mills, manufacturers and potteries by selling to
connected merchants.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..action import (
    Action, ActionResult, ActionValidation, Sale, SellPayload, StateChange, StateChangeType,
)
from ..enums import MerchantBonusType, SELLABLE_INDUSTRIES
from ..network import are_connected
from ..resources import (
    Reserved, ResourceSource, SourceKind, beer_sources_from_keys,
    consume_resources, find_beer_sources, reserve,
)
from ..state import GameState, Merchant, PlacedIndustryTile, PlayerState
from .common import common_errors, discard_card, use_action


@dataclass
class _SalePlan:
    sale: Sale
    tile: PlacedIndustryTile
    merchant: Merchant
    beer: list[ResourceSource]

    @property
    def earns_bonus(self) -> bool:
        return any(
            source.kind == SourceKind.MERCHANT and source.merchant_id == self.merchant.merchant_id
            for source in self.beer
        )


def _plan_sale(state: GameState, player: PlayerState, sale: Sale,
               reserved: Reserved) -> tuple[_SalePlan | None, list[str]]:
    tile = state.placed_industries.get(sale.tile_id)
    if tile is None:
        return None, [f"Tile {sale.tile_id} not found"]
    if tile.player_id != player.player_id:
        return None, ["Can only sell own tiles"]
    if tile.is_flipped:
        return None, [f"Tile {sale.tile_id} is already sold"]
    if tile.industry_type not in SELLABLE_INDUSTRIES:
        return None, [f"Cannot sell {tile.industry_type.value}"]

    merchant = state.board.get_merchant(sale.merchant_id)
    if merchant is None:
        return None, [f"Merchant {sale.merchant_id} not found"]
    if merchant.industry_type != tile.industry_type:
        return None, [f"Merchant does not accept {tile.industry_type.value}"]
    if not are_connected(state, tile.location, merchant.location):
        return None, [f"Tile at {tile.location} not connected to merchant at {merchant.location}"]

    required = tile.definition.beer_required
    if sale.beer_sources is not None:
        if len(sale.beer_sources) != required:
            return None, [f"Sale of {sale.tile_id} needs exactly {required} beer"]
        beer, errors = beer_sources_from_keys(
            state, player.player_id, tile.location, sale.beer_sources, reserved,
        )
        if errors:
            return None, errors
    else:
        beer = find_beer_sources(
            state, player.player_id, tile.location, required, allow_merchant=True, reserved=reserved,
            merchant_id=merchant.merchant_id,
        )
        if len(beer) < required:
            return None, [f"Not enough beer available (need {required})"]

    reserve(reserved, beer)
    return _SalePlan(sale=sale, tile=tile, merchant=merchant, beer=beer), []


def _plan(state: GameState, action: Action) -> tuple[list[_SalePlan] | None, list[str]]:
    player, errors = common_errors(state, action)
    if player is None:
        return None, errors
    payload = action.payload
    if not isinstance(payload, SellPayload) or not payload.sales:
        return None, errors + ["Sell action needs at least one sale"]

    tile_ids = [sale.tile_id for sale in payload.sales]
    if len(set(tile_ids)) != len(tile_ids):
        errors.append("A tile can only be sold once per action")

    reserved: Reserved = {}
    plans = []
    for sale in payload.sales:
        plan, sale_errors = _plan_sale(state, player, sale, reserved)
        errors += sale_errors
        if plan:
            plans.append(plan)
    return (None, errors) if errors else (plans, [])


def validate_sell(state: GameState, action: Action) -> ActionValidation:
    _, errors = _plan(state, action)
    return ActionValidation.from_errors(errors)


def _apply_bonus(player: PlayerState, merchant: Merchant, changes: list[StateChange]) -> None:
    bonus = merchant.bonus_type
    if bonus == MerchantBonusType.DEVELOP:
        # Recorded for the client; the free develop is not resolved here
        changes.append(StateChange(
            StateChangeType.INCOME, player.player_id,
            {"bonus": "free_develop", "merchant": merchant.merchant_id},
        ))
    elif bonus == MerchantBonusType.INCOME:
        player.adjust_income(merchant.bonus_value)
        changes.append(StateChange(
            StateChangeType.INCOME, player.player_id,
            {"change": merchant.bonus_value, "new_income": player.income},
        ))
    elif bonus == MerchantBonusType.VP:
        player.victory_points += merchant.bonus_value
        changes.append(StateChange(
            StateChangeType.VP, player.player_id,
            {"change": merchant.bonus_value, "new_vp": player.victory_points},
        ))
    elif bonus == MerchantBonusType.MONEY:
        player.money += merchant.bonus_value
        changes.append(StateChange(
            StateChangeType.MONEY, player.player_id,
            {"amount": merchant.bonus_value, "new_total": player.money},
        ))
    else:
        raise ValueError(f"Unknown merchant bonus {bonus}")


def execute_sell(state: GameState, action: Action) -> ActionResult:
    plans, errors = _plan(state, action)
    if plans is None:
        return ActionResult.failure(errors)

    player = state.get_player(action.player_id)
    changes: list[StateChange] = []
    for plan in plans:
        if plan.beer:
            consume_resources(state, plan.beer, changes)
            changes.append(StateChange(
                StateChangeType.RESOURCE_CONSUMED, player.player_id,
                {"resource": "beer", "quantity": len(plan.beer), "cost": 0},
            ))
            if plan.earns_bonus:
                _apply_bonus(player, plan.merchant, changes)

        plan.tile.is_flipped = True
        player.adjust_income(plan.tile.income_bonus)
        changes += [
            StateChange(StateChangeType.TILE_FLIPPED, player.player_id, {"tile_id": plan.tile.tile_id}),
            StateChange(StateChangeType.INCOME, player.player_id,
                        {"change": plan.tile.income_bonus, "new_income": player.income}),
        ]

    discard_card(state, player, action.card_id, changes)
    use_action(player)
    return ActionResult.succeeded(changes)
