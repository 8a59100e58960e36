"""
Engine - The single entry point for validating and executing actions.

Design principles:
- Validate, then execute, then advance the turn
- Dispatch through an explicit handler table keyed by ActionType
- Atomic: the state is snapshotted before execution and restored if
  anything raises, so a failed action never leaves partial changes
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable
import logging

from .action import (
    Action, ActionResult, ActionType, ActionValidation, StateChange,
    GAME_NOT_ACTIVE, HANDLER_ERROR, INVALID_ACTION, NOT_YOUR_TURN, UNKNOWN_ACTION,
)
from .enums import GamePhase
from .eras import Standing, collect_income, determine_winner, final_standings
from .state import GameState
from .turns import end_turn, turn_is_over
from . import validators


logger = logging.getLogger(__name__)

Validator = Callable[[GameState, Action], ActionValidation]
Executor = Callable[[GameState, Action], ActionResult]


@dataclass
class PlayerSummary:
    player_id: str
    money: int
    income: int
    victory_points: int
    hand_size: int
    link_tiles_remaining: int
    actions_remaining: int
    has_passed: bool


@dataclass
class GameSummary:
    game_id: str
    phase: GamePhase
    era: str
    round: int
    max_rounds: int
    current_player_id: str | None
    players: list[PlayerSummary] = field(default_factory=list)


class GameEngine:
    """
    Stateless rules engine; every call takes the GameState it acts on.
    """

    def __init__(self) -> None:
        self._handlers: dict[ActionType, tuple[Validator, Executor]] = {
            ActionType.BUILD: (validators.validate_build, validators.execute_build),
            ActionType.NETWORK: (validators.validate_network, validators.execute_network),
            ActionType.SELL: (validators.validate_sell, validators.execute_sell),
            ActionType.DEVELOP: (validators.validate_develop, validators.execute_develop),
            ActionType.LOAN: (validators.validate_loan, validators.execute_loan),
            ActionType.SCOUT: (validators.validate_scout, validators.execute_scout),
            ActionType.PASS: (validators.validate_pass, validators.execute_pass),
        }

    def _get_handler(self, action_type) -> tuple[Validator, Executor] | None:
        return self._handlers.get(action_type)

    def _check_turn(self, state: GameState, action: Action) -> ActionValidation | None:
        """Phase and turn checks that come before any rule of the action itself."""
        if state.phase != GamePhase.PLAYING:
            return ActionValidation.from_errors(
                [f"Game is not in progress ({state.phase.value})"], GAME_NOT_ACTIVE,
            )
        player = state.get_player(action.player_id)
        if player is None:
            return ActionValidation.from_errors([f"Player {action.player_id} not found"])
        current = state.current_player
        if current is None or current.player_id != player.player_id:
            return ActionValidation.from_errors([f"Not {action.player_id}'s turn"], NOT_YOUR_TURN)
        if not player.can_act:
            return ActionValidation.from_errors(["No actions remaining this turn"], INVALID_ACTION)
        return None

    def validate_action(self, state: GameState, action: Action) -> ActionValidation:
        """Check an action without touching the state."""
        handler = self._get_handler(action.action_type)
        if handler is None:
            return ActionValidation.from_errors(["Unknown action type"], UNKNOWN_ACTION)
        failed = self._check_turn(state, action)
        if failed is not None:
            return failed
        validate, _ = handler
        return validate(state, action)

    def execute_action(self, state: GameState, action: Action) -> ActionResult:
        """
        Validate and apply an action, then end the turn if it is over.

        Returns ActionResult with the state changes or the errors.
        """
        validation = self.validate_action(state, action)
        if not validation.valid:
            logger.debug("Rejected %s by %s: %s",
                         action.action_type, action.player_id, validation.errors)
            return ActionResult.from_validation(validation)

        _, execute = self._get_handler(action.action_type)
        snapshot = state.clone()
        try:
            result = execute(state, action)
            if not result.success:
                state.restore(snapshot)
                return result

            player = state.get_player(action.player_id)
            if turn_is_over(player):
                result.state_changes += end_turn(state)
        except Exception as e:
            logger.exception("Executing %s for %s failed in game %s",
                             action.action_type.value, action.player_id, state.game_id)
            state.restore(snapshot)
            return ActionResult.failure(str(e), error_code=HANDLER_ERROR)

        logger.info("Game %s: %s played %s", state.game_id, action.player_id, action.action_type.value)
        return result

    def get_available_actions(self, state: GameState) -> list[ActionType]:
        """
        Every action kind while the current player can act, else nothing.

        This is not a legality filter; use validate_action for that.
        """
        if state.phase != GamePhase.PLAYING:
            return []
        player = state.current_player
        if player is None or not player.can_act or not player.hand:
            return []
        return list(self._handlers)

    def get_game_summary(self, state: GameState) -> GameSummary:
        current = state.current_player
        return GameSummary(
            game_id=state.game_id,
            phase=state.phase,
            era=state.era.value,
            round=state.current_round,
            max_rounds=state.max_rounds,
            current_player_id=current.player_id if current else None,
            players=[
                PlayerSummary(
                    player_id=p.player_id,
                    money=p.money,
                    income=p.income,
                    victory_points=p.victory_points,
                    hand_size=len(p.hand),
                    link_tiles_remaining=p.link_tiles_remaining,
                    actions_remaining=p.actions_remaining,
                    has_passed=p.has_passed,
                )
                for p in state.players
            ],
        )

    def collect_income(self, state: GameState) -> list[StateChange]:
        """Pay income to every player. Not allowed once the game is over."""
        if state.phase == GamePhase.FINISHED:
            raise ValueError("No income is collected after the game has ended")
        return collect_income(state)

    def is_game_finished(self, state: GameState) -> bool:
        return state.phase == GamePhase.FINISHED

    def determine_winner(self, state: GameState) -> str | None:
        return determine_winner(state)

    def final_standings(self, state: GameState) -> list[Standing]:
        return final_standings(state)
