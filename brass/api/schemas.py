"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models are the contract between clients and the engine. Engine
dataclasses never leave the service layer; everything crossing HTTP is
one of the models below.

Error Codes:
- GAME_NOT_FOUND: Game does not exist or has been evicted
- INVALID_ACTION: Action breaks a rule (errors list the reasons)
- NOT_YOUR_TURN: Acting player is not the current player
- GAME_NOT_ACTIVE: Game is not in the Playing phase
- UNKNOWN_ACTION: Action type is not one of the seven kinds
- HANDLER_ERROR: Engine failed while executing; state was rolled back
- SETUP_ERROR: Game could not be created from the request
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    INVALID_ACTION = "INVALID_ACTION"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    GAME_NOT_ACTIVE = "GAME_NOT_ACTIVE"
    UNKNOWN_ACTION = "UNKNOWN_ACTION"
    HANDLER_ERROR = "HANDLER_ERROR"
    SETUP_ERROR = "SETUP_ERROR"


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to create a new game."""
    player_ids: list[str] = Field(min_length=2, max_length=4, description="One id per seat")
    seed: Optional[int] = Field(default=None, description="Seed for a reproducible game")
    max_rounds: Optional[int] = Field(default=None, ge=1, description="Override the round limit")


class LinkModel(BaseModel):
    from_location: str
    to_location: str


class SaleModel(BaseModel):
    """One tile sold to one merchant."""
    tile_id: str
    merchant_id: str
    beer_sources: Optional[list[str]] = Field(
        default=None,
        description='Beer source keys such as "tile:<id>" or "merchant:<id>"; omit to let the engine choose',
    )


class ActionRequest(BaseModel):
    """
    One action. Only the fields used by `action_type` are read.

    - build: location, industry_type
    - network: links
    - sell: sales
    - develop: tile_ids
    - scout: additional_card_ids
    - loan, pass: nothing extra
    """
    action_type: str = Field(description="build, network, sell, develop, loan, scout or pass")
    player_id: str
    card_id: str
    location: Optional[str] = None
    industry_type: Optional[str] = None
    links: list[LinkModel] = Field(default_factory=list)
    sales: list[SaleModel] = Field(default_factory=list)
    tile_ids: list[str] = Field(default_factory=list)
    additional_card_ids: list[str] = Field(default_factory=list)


# =============================================================================
# Response Models
# =============================================================================

class CardInfo(BaseModel):
    card_id: str
    card_type: str
    label: str


class PlayerInfo(BaseModel):
    """Player information for display."""
    player_id: str
    money: int
    income: int
    victory_points: int
    hand_size: int
    link_tiles_remaining: int
    actions_remaining: int
    has_passed: bool
    is_current_turn: bool = False
    hand: list[CardInfo] = Field(default_factory=list)


class GameResponse(BaseModel):
    """Summary of one game."""
    game_id: str
    phase: str
    era: str
    round: int
    max_rounds: int
    current_player_id: Optional[str] = None
    turn_order: list[str] = Field(default_factory=list)
    draw_pile_size: int = 0
    players: list[PlayerInfo] = Field(default_factory=list)


class GameListResponse(BaseModel):
    games: list[str]
    count: int


class DeleteGameResponse(BaseModel):
    success: bool
    game_id: str


class AvailableActionsResponse(BaseModel):
    game_id: str
    player_id: Optional[str] = None
    actions: list[str] = Field(default_factory=list)


class StateChangeInfo(BaseModel):
    type: str
    player_id: str
    details: dict[str, Any] = Field(default_factory=dict)


class ValidationResponse(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)
    error_code: Optional[str] = None


class ActionResponse(BaseModel):
    """Result of an executed action."""
    success: bool
    errors: list[str] = Field(default_factory=list)
    error_code: Optional[str] = None
    state_changes: list[StateChangeInfo] = Field(default_factory=list)
    game: Optional[GameResponse] = None


class IncomeResponse(BaseModel):
    game_id: str
    state_changes: list[StateChangeInfo] = Field(default_factory=list)
    game: GameResponse


class StandingInfo(BaseModel):
    player_id: str
    placement: int
    victory_points: int
    income: int
    money: int
    tile_vp: int
    link_vp: int


class StandingsResponse(BaseModel):
    game_id: str
    finished: bool
    winner: Optional[str] = None
    standings: list[StandingInfo] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
