"""
FastAPI Application - REST API for the rules engine.

Endpoints:
    POST   /api/v1/games                      Create a game
    GET    /api/v1/games                      List live games
    GET    /api/v1/games/{id}                 Game summary
    DELETE /api/v1/games/{id}                 Drop a game
    GET    /api/v1/games/{id}/actions         Action kinds open to the current player
    POST   /api/v1/games/{id}/validate        Check an action without applying it
    POST   /api/v1/games/{id}/actions         Execute an action
    POST   /api/v1/games/{id}/income          Pay income to every player
    GET    /api/v1/games/{id}/standings       Ranked players and winner
    GET    /api/v1/health                     Health check

All requests and responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional, Union
import logging

from ..config import Settings


logger = logging.getLogger(__name__)

# HTTP status for each engine error code on a rejected action
ACTION_ERROR_STATUS = {
    "INVALID_ACTION": 400,
    "UNKNOWN_ACTION": 400,
    "NOT_YOUR_TURN": 409,
    "GAME_NOT_ACTIVE": 409,
    "HANDLER_ERROR": 500,
}


def create_app(service=None, settings: Optional[Settings] = None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    from fastapi import FastAPI
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse

    from .service import APIService
    from .schemas import (
        # Request models
        ActionRequest,
        CreateGameRequest,
        # Response models
        ActionResponse,
        AvailableActionsResponse,
        DeleteGameResponse,
        ErrorResponse,
        GameListResponse,
        GameResponse,
        HealthResponse,
        IncomeResponse,
        StandingsResponse,
        ValidationResponse,
        # Enums
        ErrorCode,
    )
    from ..session import SessionManager

    settings = settings or Settings.from_env()

    app = FastAPI(
        title="Brass Engine API",
        description="""
Rules engine for Brass: Birmingham. Every action is validated against
the full rule set before it is applied.

## Error Codes

| Code | Description |
|------|-------------|
| `GAME_NOT_FOUND` | Game does not exist |
| `INVALID_ACTION` | Action breaks a rule |
| `NOT_YOUR_TURN` | Acting player is not the current player |
| `GAME_NOT_ACTIVE` | Game is not being played |
| `UNKNOWN_ACTION` | Action type is not recognised |
| `SETUP_ERROR` | Game could not be created |
        """,
        version="1.0.0",
        docs_url=None if settings.is_production else "/api/docs",
        redoc_url=None if settings.is_production else "/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(
        session_manager=SessionManager(default_seed=settings.seed),
        stale_game_seconds=settings.stale_game_seconds,
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def from_error(response: ErrorResponse) -> JSONResponse:
        status = 404 if response.error_code == ErrorCode.GAME_NOT_FOUND else 400
        if response.error_code == ErrorCode.GAME_NOT_ACTIVE:
            status = 409
        return make_error_response(response.error_code, response.error, status, response.details)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=GameResponse,
        status_code=201,
        responses={400: {"model": ErrorResponse, "description": "Invalid players"}},
        tags=["Games"],
        summary="Create a new game",
    )
    async def create_game(body: CreateGameRequest) -> Union[GameResponse, JSONResponse]:
        """
        Create a new game for 2-4 players.

        Pass a `seed` to get the same deck and turn order every time.
        """
        response = api_service.create_game(body)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        tags=["Games"],
        summary="List live games",
    )
    async def list_games() -> GameListResponse:
        games = api_service.list_games()
        return GameListResponse(games=games, count=len(games))

    @app.get(
        "/api/v1/games/{game_id}",
        response_model=GameResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get game summary",
    )
    async def get_game(game_id: str) -> Union[GameResponse, JSONResponse]:
        response = api_service.get_game(game_id)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.delete(
        "/api/v1/games/{game_id}",
        response_model=DeleteGameResponse,
        tags=["Games"],
        summary="Delete a game",
    )
    async def delete_game(game_id: str) -> DeleteGameResponse:
        success = api_service.delete_game(game_id)
        return DeleteGameResponse(success=success, game_id=game_id)

    # =========================================================================
    # Action Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/games/{game_id}/actions",
        response_model=AvailableActionsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Actions"],
        summary="Action kinds open to the current player",
    )
    async def get_available_actions(game_id: str) -> Union[AvailableActionsResponse, JSONResponse]:
        response = api_service.get_available_actions(game_id)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.post(
        "/api/v1/games/{game_id}/validate",
        response_model=ValidationResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Actions"],
        summary="Validate an action without applying it",
    )
    async def validate_action(game_id: str, body: ActionRequest) -> Union[ValidationResponse, JSONResponse]:
        response = api_service.validate_action(game_id, body)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.post(
        "/api/v1/games/{game_id}/actions",
        response_model=ActionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Action breaks a rule"},
            404: {"model": ErrorResponse, "description": "Game not found"},
            409: {"model": ErrorResponse, "description": "Not this player's turn"},
        },
        tags=["Actions"],
        summary="Execute an action",
    )
    async def submit_action(game_id: str, body: ActionRequest) -> Union[ActionResponse, JSONResponse]:
        """
        Validate and apply one action.

        A rejected action leaves the game untouched; the error lists every
        rule it broke in `details.errors`.
        """
        response = api_service.submit_action(game_id, body)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        if not response.success:
            code = response.error_code or ErrorCode.INVALID_ACTION.value
            return make_error_response(
                ErrorCode(code),
                "; ".join(response.errors) or "Action rejected",
                status_code=ACTION_ERROR_STATUS.get(code, 400),
                details={"errors": response.errors},
            )
        return response

    @app.post(
        "/api/v1/games/{game_id}/income",
        response_model=IncomeResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Actions"],
        summary="Collect income for every player",
    )
    async def collect_income(game_id: str) -> Union[IncomeResponse, JSONResponse]:
        response = api_service.collect_income(game_id)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.get(
        "/api/v1/games/{game_id}/standings",
        response_model=StandingsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Ranked players and winner",
    )
    async def get_standings(game_id: str) -> Union[StandingsResponse, JSONResponse]:
        response = api_service.get_standings(game_id)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    # =========================================================================
    # System Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="brass-engine",
            version="1.0.0",
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Brass Engine API",
            "version": "1.0.0",
            "docs": None if settings.is_production else "/api/docs",
            "health": "/api/v1/health",
        }

    return app
