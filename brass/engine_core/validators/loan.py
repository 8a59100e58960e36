"""
Loan - take £30 and drop three income levels.
"""

from __future__ import annotations

from ..action import Action, ActionResult, ActionValidation, StateChange, StateChangeType
from ..income import MIN_INCOME
from ..state import GameState
from .common import common_errors, discard_card, use_action


LOAN_AMOUNT = 30
LOAN_INCOME_PENALTY = 3


def validate_loan(state: GameState, action: Action) -> ActionValidation:
    player, errors = common_errors(state, action)
    if player is not None and player.income - LOAN_INCOME_PENALTY < MIN_INCOME:
        errors.append(f"Cannot take loan - would go below {MIN_INCOME} income")
    return ActionValidation.from_errors(errors)


def execute_loan(state: GameState, action: Action) -> ActionResult:
    validation = validate_loan(state, action)
    if not validation.valid:
        return ActionResult.from_validation(validation)

    player = state.get_player(action.player_id)
    changes: list[StateChange] = []
    player.money += LOAN_AMOUNT
    player.adjust_income(-LOAN_INCOME_PENALTY)
    changes += [
        StateChange(StateChangeType.MONEY, player.player_id,
                    {"amount": LOAN_AMOUNT, "new_total": player.money, "reason": "loan"}),
        StateChange(StateChangeType.INCOME, player.player_id,
                    {"change": -LOAN_INCOME_PENALTY, "new_income": player.income}),
    ]
    discard_card(state, player, action.card_id, changes)
    use_action(player)
    return ActionResult.succeeded(changes)
