"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests into engine actions
2. Runs them through the session manager
3. Formats engine results as response models

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    ActionRequest,
    CreateGameRequest,
    # Responses
    ActionResponse,
    AvailableActionsResponse,
    CardInfo,
    ErrorResponse,
    GameResponse,
    IncomeResponse,
    PlayerInfo,
    StandingInfo,
    StandingsResponse,
    StateChangeInfo,
    ValidationResponse,
    # Enums
    ErrorCode,
)
from ..engine_core.action import Action, ActionType, Sale, StateChange
from ..engine_core.cards import describe_card
from ..engine_core.enums import IndustryType
from ..engine_core.state import GameState
from ..games.birmingham.setup import GameConfig, GameSetupError
from ..session import GameNotFoundError, SessionManager


logger = logging.getLogger(__name__)


class RequestError(ValueError):
    """An action request that cannot be turned into an engine action."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_ACTION):
        super().__init__(message)
        self.error_code = error_code


def _not_found(game_id: str) -> ErrorResponse:
    return ErrorResponse(error=f"Game {game_id} not found", error_code=ErrorCode.GAME_NOT_FOUND)


def to_action(request: ActionRequest) -> Action:
    """Build the engine Action for a request, or raise RequestError."""
    try:
        action_type = ActionType(request.action_type)
    except ValueError:
        raise RequestError("Unknown action type", ErrorCode.UNKNOWN_ACTION)

    pid, card = request.player_id, request.card_id
    if action_type == ActionType.BUILD:
        if not request.location or not request.industry_type:
            raise RequestError("Build needs a location and an industry_type")
        try:
            industry = IndustryType(request.industry_type)
        except ValueError:
            raise RequestError(f"Unknown industry type: {request.industry_type}")
        return Action.build(pid, card, request.location, industry)
    if action_type == ActionType.NETWORK:
        return Action.network(pid, card, [(link.from_location, link.to_location) for link in request.links])
    if action_type == ActionType.SELL:
        sales = [
            Sale(
                tile_id=s.tile_id,
                merchant_id=s.merchant_id,
                beer_sources=tuple(s.beer_sources) if s.beer_sources is not None else None,
            )
            for s in request.sales
        ]
        return Action.sell(pid, card, sales)
    if action_type == ActionType.DEVELOP:
        return Action.develop(pid, card, request.tile_ids)
    if action_type == ActionType.SCOUT:
        return Action.scout(pid, card, request.additional_card_ids)
    if action_type == ActionType.LOAN:
        return Action.loan(pid, card)
    return Action.pass_turn(pid, card)


def _changes(changes: list[StateChange]) -> list[StateChangeInfo]:
    return [
        StateChangeInfo(type=c.type.value, player_id=c.player_id, details=c.details)
        for c in changes
    ]


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        game = service.create_game(CreateGameRequest(player_ids=["a", "b"]))
        result = service.submit_action(game.game_id, request)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    stale_game_seconds: int = 3600

    def create_game(self, request: CreateGameRequest) -> GameResponse | ErrorResponse:
        self.session_manager.cleanup_stale_games(self.stale_game_seconds)
        config = GameConfig(player_count=len(request.player_ids), max_rounds=request.max_rounds)
        try:
            state = self.session_manager.create_game(config, request.player_ids, seed=request.seed)
        except GameSetupError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.SETUP_ERROR)
        return self._game_response(state)

    def get_game(self, game_id: str) -> GameResponse | ErrorResponse:
        try:
            return self.session_manager.read(game_id, self._game_response)
        except GameNotFoundError:
            return _not_found(game_id)

    def list_games(self) -> list[str]:
        return [state.game_id for state in self.session_manager.list_games()]

    def delete_game(self, game_id: str) -> bool:
        return self.session_manager.delete_game(game_id)

    def get_available_actions(self, game_id: str) -> AvailableActionsResponse | ErrorResponse:
        def available(state: GameState) -> AvailableActionsResponse:
            current = state.current_player
            actions = self.session_manager.engine.get_available_actions(state)
            return AvailableActionsResponse(
                game_id=game_id,
                player_id=current.player_id if current else None,
                actions=[a.value for a in actions],
            )

        try:
            return self.session_manager.read(game_id, available)
        except GameNotFoundError:
            return _not_found(game_id)

    def validate_action(self, game_id: str, request: ActionRequest) -> ValidationResponse | ErrorResponse:
        try:
            action = to_action(request)
            validation = self.session_manager.validate(game_id, action)
        except GameNotFoundError:
            return _not_found(game_id)
        except RequestError as e:
            return ValidationResponse(valid=False, errors=[str(e)], error_code=e.error_code.value)
        return ValidationResponse(
            valid=validation.valid,
            errors=validation.errors,
            error_code=validation.error_code,
        )

    def submit_action(self, game_id: str, request: ActionRequest) -> ActionResponse | ErrorResponse:
        """
        Execute one action.

        Rule failures come back as an ActionResponse with success=False;
        only a missing game is an ErrorResponse.
        """
        try:
            action = to_action(request)
            result = self.session_manager.submit(game_id, action)
        except GameNotFoundError:
            return _not_found(game_id)
        except RequestError as e:
            return ActionResponse(success=False, errors=[str(e)], error_code=e.error_code.value)

        try:
            game = self.session_manager.read(game_id, self._game_response)
        except GameNotFoundError:
            game = None
        return ActionResponse(
            success=result.success,
            errors=result.errors,
            error_code=result.error_code,
            state_changes=_changes(result.state_changes),
            game=game,
        )

    def collect_income(self, game_id: str) -> IncomeResponse | ErrorResponse:
        try:
            changes = self.session_manager.collect_income(game_id)
        except GameNotFoundError:
            return _not_found(game_id)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.GAME_NOT_ACTIVE)
        try:
            game = self.session_manager.read(game_id, self._game_response)
        except GameNotFoundError:
            return _not_found(game_id)
        return IncomeResponse(game_id=game_id, state_changes=_changes(changes), game=game)

    def get_standings(self, game_id: str) -> StandingsResponse | ErrorResponse:
        try:
            return self.session_manager.read(game_id, self._standings)
        except GameNotFoundError:
            return _not_found(game_id)

    def _standings(self, state: GameState) -> StandingsResponse:
        engine = self.session_manager.engine
        game_id = state.game_id
        return StandingsResponse(
            game_id=game_id,
            finished=engine.is_game_finished(state),
            winner=engine.determine_winner(state),
            standings=[
                StandingInfo(
                    player_id=s.player_id,
                    placement=s.placement,
                    victory_points=s.victory_points,
                    income=s.income,
                    money=s.money,
                    tile_vp=s.tile_vp,
                    link_vp=s.link_vp,
                )
                for s in engine.final_standings(state)
            ],
        )

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    def _game_response(self, state: GameState) -> GameResponse:
        summary = self.session_manager.engine.get_game_summary(state)
        hands = {p.player_id: p.hand for p in state.players}
        return GameResponse(
            game_id=summary.game_id,
            phase=summary.phase.value,
            era=summary.era,
            round=summary.round,
            max_rounds=summary.max_rounds,
            current_player_id=summary.current_player_id,
            turn_order=[entry.player_id for entry in state.turn_order],
            draw_pile_size=len(state.card_deck.draw_pile),
            players=[
                PlayerInfo(
                    player_id=p.player_id,
                    money=p.money,
                    income=p.income,
                    victory_points=p.victory_points,
                    hand_size=p.hand_size,
                    link_tiles_remaining=p.link_tiles_remaining,
                    actions_remaining=p.actions_remaining,
                    has_passed=p.has_passed,
                    is_current_turn=p.player_id == summary.current_player_id,
                    hand=[
                        CardInfo(card_id=c.card_id, card_type=c.card_type.value, label=describe_card(c))
                        for c in hands[p.player_id]
                    ],
                )
                for p in summary.players
            ],
        )
