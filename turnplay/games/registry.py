"""
Game Registry - Closed set of built-in variants.

Shared code never imports a concrete game class: it goes through
create_game_engine() / restore_game_engine() with a game type identifier.
"""

from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping

from ..engine_core.engine import GameEngine
from ..engine_core.state import GameState, deserialize_state
from ..errors import UnknownGameTypeError
from .rock_paper_scissors import RockPaperScissorsGame
from .spy import SpyGame
from .tic_tac_toe import TicTacToeGame


@dataclass(frozen=True)
class GameMetadata:
    """Display and lobby information for a variant."""
    game_type: str
    name: str
    min_players: int
    max_players: int
    supports_bots: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "game_type": self.game_type,
            "name": self.name,
            "min_players": self.min_players,
            "max_players": self.max_players,
            "supports_bots": self.supports_bots,
        }


@dataclass(frozen=True)
class _RegistryEntry:
    metadata: GameMetadata
    engine_class: Callable[..., GameEngine]


def _entry(engine_class: type[GameEngine], name: str, supports_bots: bool) -> _RegistryEntry:
    config = engine_class.default_config
    return _RegistryEntry(
        metadata=GameMetadata(
            game_type=engine_class.game_type,
            name=name,
            min_players=config.min_players,
            max_players=config.max_players,
            supports_bots=supports_bots,
        ),
        engine_class=engine_class,
    )


GAME_REGISTRY: Mapping[str, _RegistryEntry] = MappingProxyType({
    TicTacToeGame.game_type: _entry(TicTacToeGame, "Tic Tac Toe", supports_bots=True),
    RockPaperScissorsGame.game_type: _entry(
        RockPaperScissorsGame, "Rock Paper Scissors", supports_bots=True
    ),
    SpyGame.game_type: _entry(SpyGame, "Guess the Spy", supports_bots=False),
})


def _get_entry(game_type: str) -> _RegistryEntry:
    entry = GAME_REGISTRY.get(game_type)
    if entry is None:
        raise UnknownGameTypeError(game_type)
    return entry


def create_game_engine(game_type: str, game_id: str, **overrides: Any) -> GameEngine:
    """
    Build a fresh engine for a new game.

    Keyword overrides go to the variant constructor (config, mode,
    total_rounds, seed, ...). Raises UnknownGameTypeError.
    """
    return _get_entry(game_type).engine_class(game_id, **overrides)


def restore_game_engine(saved: GameState | Mapping[str, Any] | str | bytes) -> GameEngine:
    """Rehydrate an engine from a stored state or serialized blob."""
    if isinstance(saved, (str, bytes)):
        state = deserialize_state(saved)
    elif isinstance(saved, GameState):
        state = saved
    else:
        state = GameState.from_dict(saved)

    engine = create_game_engine(state.game_type, state.game_id)
    engine.restore_state(state)
    return engine


def get_game_metadata(game_type: str) -> GameMetadata:
    """Metadata for a registered variant. Raises UnknownGameTypeError."""
    return _get_entry(game_type).metadata


def list_game_types() -> list[str]:
    return list(GAME_REGISTRY)


def is_registered_game_type(value: str) -> bool:
    return value in GAME_REGISTRY
