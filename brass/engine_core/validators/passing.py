"""
Pass - discard a card and give up the rest of the turn.
"""

from __future__ import annotations

from ..action import Action, ActionResult, ActionValidation, StateChange
from ..state import GameState
from .common import common_errors, discard_card


def validate_pass(state: GameState, action: Action) -> ActionValidation:
    _, errors = common_errors(state, action)
    return ActionValidation.from_errors(errors)


def execute_pass(state: GameState, action: Action) -> ActionResult:
    validation = validate_pass(state, action)
    if not validation.valid:
        return ActionResult.from_validation(validation)

    player = state.get_player(action.player_id)
    changes: list[StateChange] = []
    discard_card(state, player, action.card_id, changes)
    player.has_passed = True
    player.actions_remaining = 0
    return ActionResult.succeeded(changes)
