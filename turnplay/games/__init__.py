"""
Games - Built-in variants and the registry that selects them.

Each variant subclasses GameEngine and owns the shape of GameState.data:
- tic_tac_toe: three-in-a-row on a 3x3 board
- rock_paper_scissors: best-of-N simultaneous choices
- guess_the_spy: hidden-role deduction for 3-10 players
"""

from .tic_tac_toe import TicTacToeGame
from .rock_paper_scissors import RockPaperScissorsGame
from .spy import SpyGame, SpyPhase
from .registry import (
    GAME_REGISTRY,
    GameMetadata,
    create_game_engine,
    restore_game_engine,
    get_game_metadata,
    list_game_types,
    is_registered_game_type,
)

__all__ = [
    "TicTacToeGame",
    "RockPaperScissorsGame",
    "SpyGame",
    "SpyPhase",
    "GAME_REGISTRY",
    "GameMetadata",
    "create_game_engine",
    "restore_game_engine",
    "get_game_metadata",
    "list_game_types",
    "is_registered_game_type",
]
