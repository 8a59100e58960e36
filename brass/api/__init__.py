"""
API Module - HTTP interface to the engine.

Clients:
1. Create a game
2. Read its summary and the current player's options
3. Validate or submit actions
4. Trigger income collection and read the standings

All state lives in the session layer. No accounts, no persistence.
"""

from .schemas import (
    # Requests
    ActionRequest,
    CreateGameRequest,
    LinkModel,
    SaleModel,
    # Responses
    ActionResponse,
    ErrorResponse,
    GameResponse,
    StandingsResponse,
    ValidationResponse,
    # Enums
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "ActionRequest",
    "CreateGameRequest",
    "LinkModel",
    "SaleModel",
    # Responses
    "ActionResponse",
    "ErrorResponse",
    "GameResponse",
    "StandingsResponse",
    "ValidationResponse",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
