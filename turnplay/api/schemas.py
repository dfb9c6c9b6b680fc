"""
Pydantic Schemas for API - Request/response models for OpenAPI.

Error Codes:
- GAME_NOT_FOUND: No game stored under that id
- INVALID_STATE: Lobby or lifecycle operation outside its window
- MOVE_REJECTED: Move is not legal in the current state
- UNKNOWN_GAME_TYPE: Game type is not registered
- BOT_MISCONFIGURED: Bot requested for a game without bots, or bad difficulty
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..engine_core.state import GameState


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    INVALID_STATE = "INVALID_STATE"
    MOVE_REJECTED = "MOVE_REJECTED"
    UNKNOWN_GAME_TYPE = "UNKNOWN_GAME_TYPE"
    BOT_MISCONFIGURED = "BOT_MISCONFIGURED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# =============================================================================
# Shared Models
# =============================================================================

class PlayerInfo(BaseModel):
    """A seat in the game."""
    id: str
    name: str
    is_bot: bool = False
    bot_difficulty: Optional[str] = None

    model_config = {"from_attributes": True}


class GameTypeInfo(BaseModel):
    """A registered variant."""
    game_type: str
    name: str
    min_players: int
    max_players: int
    supports_bots: bool
    difficulties: list[str] = Field(default_factory=list)


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to create a new game."""
    game_type: str = Field(..., description="tic_tac_toe, rock_paper_scissors or guess_the_spy")
    game_id: Optional[str] = Field(None, description="Use this id instead of a generated one")
    mode: Optional[str] = Field(None, description="Rock paper scissors: best-of-3 or best-of-5")
    total_rounds: Optional[int] = Field(None, ge=1, le=10, description="Spy game rounds")
    seed: Optional[int] = Field(None, description="Spy game seed for role assignment")

    def engine_options(self) -> dict[str, Any]:
        options = {"mode": self.mode, "total_rounds": self.total_rounds, "seed": self.seed}
        return {key: value for key, value in options.items() if value is not None}


class JoinGameRequest(BaseModel):
    """Request to seat a human player."""
    player_id: str = Field(..., min_length=1)
    name: Optional[str] = Field(None, description="Display name (defaults to player_id)")


class AddBotRequest(BaseModel):
    """Request to seat a bot."""
    difficulty: Difficulty = Difficulty.MEDIUM
    name: Optional[str] = None


class MoveRequest(BaseModel):
    """A move submitted by a player."""
    player_id: str = Field(..., min_length=1)
    type: str = Field(..., description="Move tag, e.g. place, submit-choice, vote")
    data: dict[str, Any] = Field(default_factory=dict)


class TimeoutRequest(BaseModel):
    """Report that a player's turn ran out of time."""
    player_id: str = Field(..., min_length=1)


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    environment: str


class GameTypesResponse(BaseModel):
    game_types: list[GameTypeInfo] = Field(default_factory=list)


class GameStateResponse(BaseModel):
    """Full snapshot of a game."""
    game_id: str
    game_type: str
    status: str
    current_player_index: int
    players: list[PlayerInfo] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)
    winner: Optional[str] = None
    last_move_at: Optional[float] = None
    api_version: str = "v1"

    @classmethod
    def from_state(cls, state: GameState) -> "GameStateResponse":
        payload = state.to_dict()
        payload["players"] = [PlayerInfo.model_validate(p) for p in state.players]
        return cls(**payload)


class TimeoutResponse(BaseModel):
    game_id: str
    player_id: str
    applied: bool
    state: GameStateResponse


class EndGameResponse(BaseModel):
    success: bool
    game_id: str
