"""
Checks and effects shared by every action kind.
"""

from __future__ import annotations

from ..action import Action, StateChange, StateChangeType
from ..cards import describe_card, is_wild
from ..state import GameState, PlayerState


def common_errors(state: GameState, action: Action) -> tuple[PlayerState | None, list[str]]:
    """
    The acting player must exist, hold the turn, still be able to act
    and hold the card being played.
    """
    player = state.get_player(action.player_id)
    if player is None:
        return None, [f"Player {action.player_id} not found"]

    errors: list[str] = []
    current = state.current_player
    if current is None or current.player_id != player.player_id:
        errors.append(f"Not {action.player_id}'s turn")
    if player.has_passed:
        errors.append("Player has already passed")
    elif player.actions_remaining <= 0:
        errors.append("No actions remaining this turn")
    if not player.has_card(action.card_id):
        errors.append("Card not in player hand")
    return player, errors


def discard_card(state: GameState, player: PlayerState, card_id: str,
                 changes: list[StateChange]) -> None:
    """Move a played card out of the hand. Wild cards go back to their supply."""
    card = player.take_card(card_id)
    if card is None:
        raise ValueError(f"Card {card_id} not in hand of {player.player_id}")
    if is_wild(card):
        state.card_deck.return_wild(card)
    else:
        player.discard_pile.append(card)
    changes.append(StateChange(
        StateChangeType.CARD_DISCARDED, player.player_id,
        {"card_id": card_id, "card": describe_card(card)},
    ))


def pay(player: PlayerState, amount: int, changes: list[StateChange], **details) -> None:
    player.spend(amount)
    changes.append(StateChange(
        StateChangeType.MONEY, player.player_id,
        {"amount": -amount, "new_total": player.money, **details},
    ))


def use_action(player: PlayerState) -> None:
    player.actions_remaining = max(0, player.actions_remaining - 1)
