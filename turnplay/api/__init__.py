"""
API Module - HTTP interface.

Exposes the session manager via a REST API:
1. List game types
2. Create a game and seat players and bots
3. Start it and submit moves
4. Let bots play and report turn timeouts

FastAPI is imported lazily inside create_app().
"""

from .schemas import (
    # Requests
    CreateGameRequest,
    JoinGameRequest,
    AddBotRequest,
    MoveRequest,
    TimeoutRequest,
    # Responses
    ErrorResponse,
    HealthResponse,
    GameTypesResponse,
    GameStateResponse,
    TimeoutResponse,
    EndGameResponse,
    # Shared
    ErrorCode,
    PlayerInfo,
    GameTypeInfo,
)
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "JoinGameRequest",
    "AddBotRequest",
    "MoveRequest",
    "TimeoutRequest",
    # Responses
    "ErrorResponse",
    "HealthResponse",
    "GameTypesResponse",
    "GameStateResponse",
    "TimeoutResponse",
    "EndGameResponse",
    # Shared
    "ErrorCode",
    "PlayerInfo",
    "GameTypeInfo",
    "create_app",
]
