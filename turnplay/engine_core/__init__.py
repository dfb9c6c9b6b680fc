"""
Engine Core - Game-agnostic state machine.

The engine is the runtime that:
1. Holds one game's GameState
2. Grows the lobby and starts the game
3. Validates moves (never raising for illegal ones)
4. Applies moves and detects terminal conditions
5. Snapshots and restores itself from a serialized blob
"""

from .state import GameState, GameStatus, Player, serialize_state, deserialize_state
from .move import Move, MoveType
from .engine import GameEngine, GameConfig

__all__ = [
    "GameState",
    "GameStatus",
    "Player",
    "serialize_state",
    "deserialize_state",
    "Move",
    "MoveType",
    "GameEngine",
    "GameConfig",
]
