"""
Turn and round progression.

A turn ends when the acting player runs out of actions, passes or has
no cards left. Each time play wraps back to the first seat a new round
starts; when every hand is empty the era ends instead.
"""

from __future__ import annotations
import logging

from .action import StateChange, StateChangeType
from .cards import describe_card
from .eras import end_era
from .enums import GamePhase
from .state import GameState, PlayerState, TurnOrderEntry, HAND_SIZE


logger = logging.getLogger(__name__)


def calculate_next_turn_order(state: GameState) -> list[TurnOrderEntry]:
    """Least money spent goes first; the previous order breaks ties."""
    entries = []
    for entry in state.turn_order:
        player = state.get_player(entry.player_id)
        entries.append(TurnOrderEntry(
            player_id=entry.player_id,
            money_spent=player.money_spent_this_round if player else 0,
            order=entry.order,
        ))
    entries.sort(key=lambda e: (e.money_spent, e.order))
    for index, entry in enumerate(entries):
        entry.order = index
    return entries


def reset_money_spent(state: GameState) -> None:
    for player in state.players:
        player.money_spent_this_round = 0
    for entry in state.turn_order:
        entry.money_spent = 0


def refill_hand(state: GameState, player: PlayerState) -> list[StateChange]:
    """Draw up to a full hand. Does nothing once the draw pile is empty."""
    changes = []
    while len(player.hand) < HAND_SIZE:
        card = state.card_deck.draw()
        if card is None:
            break
        player.hand.append(card)
        changes.append(StateChange(
            StateChangeType.CARD_DRAWN, player.player_id,
            {"card_id": card.card_id, "card": describe_card(card)},
        ))
    return changes


def turn_is_over(player: PlayerState) -> bool:
    return player.has_passed or player.actions_remaining <= 0 or not player.hand


def end_turn(state: GameState) -> list[StateChange]:
    """
    Finish the current player's turn and move play on.

    Players left holding no cards are skipped; the wrap back to seat 0
    always closes the round, so this loop ends within one lap.
    """
    player = state.current_player
    changes = refill_hand(state, player) if player else []

    seats = len(state.turn_order)
    while True:
        state.current_player_index = (state.current_player_index + 1) % seats
        if state.current_player_index == 0:
            era = state.era
            end_round(state)
            if state.phase != GamePhase.PLAYING or state.era != era:
                break
        current = state.current_player
        if current is not None and current.hand:
            break

    return changes


def end_round(state: GameState) -> None:
    """
    Close the round: reorder seats by money spent, then either end the
    era (every hand empty) or start the next round.
    """
    state.turn_order = calculate_next_turn_order(state)
    reset_money_spent(state)

    if state.all_hands_empty:
        end_era(state)
        return

    state.current_round += 1
    state.is_first_round = False
    state.reset_action_budgets()
    state.current_player_index = 0
    logger.debug("Game %s: round %d begins", state.game_id, state.current_round)
