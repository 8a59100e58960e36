"""
Scout - discard three cards for one wild location and one wild industry.
"""

from __future__ import annotations

from ..action import Action, ActionResult, ActionValidation, ScoutPayload, StateChange, StateChangeType
from ..cards import describe_card, is_wild
from ..state import GameState
from .common import common_errors, discard_card, use_action


SCOUT_EXTRA_DISCARDS = 2


def validate_scout(state: GameState, action: Action) -> ActionValidation:
    player, errors = common_errors(state, action)
    if player is None:
        return ActionValidation.from_errors(errors)
    payload = action.payload
    if not isinstance(payload, ScoutPayload):
        return ActionValidation.from_errors(errors + ["Scout action needs two extra cards"])

    if any(is_wild(card) for card in player.hand):
        errors.append("Cannot scout while holding a wild card")

    extra = payload.additional_card_ids
    if len(extra) != SCOUT_EXTRA_DISCARDS or len(set(extra)) != len(extra):
        errors.append("Must discard exactly 2 additional cards")
    if action.card_id in extra:
        errors.append("The action card cannot also be an additional discard")
    for card_id in extra:
        if not player.has_card(card_id):
            errors.append(f"Card {card_id} not in player hand")

    deck = state.card_deck
    if not deck.wild_location_cards or not deck.wild_industry_cards:
        errors.append("No wild cards left in the supply")
    return ActionValidation.from_errors(errors)


def execute_scout(state: GameState, action: Action) -> ActionResult:
    validation = validate_scout(state, action)
    if not validation.valid:
        return ActionResult.from_validation(validation)

    player = state.get_player(action.player_id)
    changes: list[StateChange] = []
    for card_id in (action.card_id, *action.payload.additional_card_ids):
        discard_card(state, player, card_id, changes)

    deck = state.card_deck
    for wild in (deck.wild_location_cards.pop(0), deck.wild_industry_cards.pop(0)):
        player.hand.append(wild)
        changes.append(StateChange(
            StateChangeType.CARD_DRAWN, player.player_id,
            {"card_id": wild.card_id, "card": describe_card(wild)},
        ))

    use_action(player)
    return ActionResult.succeeded(changes)
