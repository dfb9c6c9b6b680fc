"""
Errors - Exception hierarchy for the engine and its driver.

Illegal moves are NOT errors: validate_move() returns False for those.
Exceptions are reserved for:
- Lobby/state transitions attempted outside their window
- Bot misconfiguration (a setup bug, not a runtime condition)
- Driver lookups and rejected submissions

Each exception keeps its context so the API layer can report it.
"""

from __future__ import annotations
from typing import Any


class TurnplayError(Exception):
    """Base exception for all turnplay errors."""

    error_code = "TURNPLAY_ERROR"

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Structured form used by API error responses and logs."""
        return {
            "error": self.message,
            "error_code": self.error_code,
            "details": dict(self.context) or None,
        }


class InvalidStateError(TurnplayError):
    """Raised when add_player/start_game is called outside its allowed window."""

    error_code = "INVALID_STATE"


class BotConfigurationError(TurnplayError):
    """Raised when a bot is used without an identity or for an unsupported game."""

    error_code = "BOT_MISCONFIGURED"


class UnknownGameTypeError(TurnplayError):
    """Raised when a game type is not in the registry."""

    error_code = "UNKNOWN_GAME_TYPE"

    def __init__(self, game_type: str):
        self.game_type = game_type
        super().__init__(f'Unknown game type: "{game_type}"', game_type=game_type)


class GameNotFoundError(TurnplayError):
    """Raised by the driver when no blob is stored for a game id."""

    error_code = "GAME_NOT_FOUND"

    def __init__(self, game_id: str):
        self.game_id = game_id
        super().__init__(f"Game {game_id} not found", game_id=game_id)


class MoveRejectedError(TurnplayError):
    """Raised by the driver when a submitted move fails validation."""

    error_code = "MOVE_REJECTED"

    def __init__(self, game_id: str, move: Any):
        self.game_id = game_id
        self.move = move
        super().__init__(
            f"Move '{move.type}' by {move.player_id} rejected in game {game_id}",
            game_id=game_id,
            player_id=move.player_id,
            move_type=move.type,
        )
