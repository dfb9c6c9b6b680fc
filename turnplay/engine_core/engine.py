"""
Game Engine - Base state machine shared by every variant.

The engine owns one game's GameState and is the single point of mutation:

    add_player -> start_game -> (validate_move -> process_move)* -> finished

Variants implement the rule hooks (_validate_move, _apply_move,
_should_advance_turn, check_win_condition). The engine is rebuilt from a
stored state on every request and assumes it is never re-entered
concurrently; the driver serializes access per game.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, Mapping
import logging

from ..errors import InvalidStateError
from .move import Move
from .state import GameState, GameStatus, Player

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameConfig:
    """Player-count constraints of a variant."""
    min_players: int = 2
    max_players: int = 2


class GameEngine(ABC):
    """
    Abstract rules engine for one game instance.

    Usage:
        engine = TicTacToeGame("game-1")
        engine.add_player(Player(id="p1", name="Ada"))
        engine.add_player(Player(id="p2", name="Bob"))
        engine.start_game()

        move = Move.place("p1", 1, 1)
        if engine.validate_move(move):
            engine.process_move(move)
        blob = serialize_state(engine.get_state())
    """

    game_type: str = ""
    default_config: GameConfig = GameConfig()

    def __init__(self, game_id: str, config: GameConfig | None = None):
        self.game_id = game_id
        self.config = config or replace(self.default_config)
        self.state = GameState(
            game_id=game_id,
            game_type=self.game_type,
            data=self.get_initial_game_data(),
        )

    # =========================================================================
    # Rule hooks
    # =========================================================================

    @abstractmethod
    def get_initial_game_data(self) -> dict[str, Any]:
        """Fresh variant data (JSON-native values only)."""

    @abstractmethod
    def _validate_move(self, move: Move) -> bool:
        """Variant checks. Status and seat membership are already verified."""

    @abstractmethod
    def _apply_move(self, move: Move) -> None:
        """Mutate data for a valid move. Call _finish() on a terminal condition."""

    @abstractmethod
    def check_win_condition(self) -> Player | None:
        """Winning player once decided, else None."""

    @abstractmethod
    def get_game_rules(self) -> list[str]:
        """Human-readable rules summary."""

    def _should_advance_turn(self, move: Move) -> bool:
        """Sequential variants advance round-robin after every move."""
        return True

    def _on_start(self) -> None:
        """Hook run after the state switches to playing."""

    def _on_restore(self) -> None:
        """Hook run after restore_state(); re-read settings kept in data."""

    def active_player_ids(self) -> list[str]:
        """Seats allowed to move right now. Sequential variants: the current seat."""
        if self.state.status != GameStatus.PLAYING:
            return []
        current = self.state.current_player
        return [current.id] if current else []

    def timeout_move(self, player_id: str) -> Move | None:
        """Default move to play for a player whose turn timed out."""
        return None

    # =========================================================================
    # Lobby
    # =========================================================================

    def add_player(self, player: Player) -> None:
        """Append a seat. Only allowed while waiting and below max_players."""
        if self.state.status != GameStatus.WAITING:
            raise InvalidStateError(
                "Cannot add players after the game has started",
                game_id=self.game_id,
                status=self.state.status.value,
            )
        if len(self.state.players) >= self.config.max_players:
            raise InvalidStateError(
                f"Game is full ({self.config.max_players} players)",
                game_id=self.game_id,
                max_players=self.config.max_players,
            )
        if self.state.get_player(player.id) is not None:
            raise InvalidStateError(
                f"Player {player.id} already joined",
                game_id=self.game_id,
                player_id=player.id,
            )
        self.state.players.append(replace(player))

    def remove_player(self, player_id: str) -> bool:
        """Remove a seat while waiting. Returns False if the player is unknown."""
        if self.state.status != GameStatus.WAITING:
            raise InvalidStateError(
                "Cannot remove players after the game has started",
                game_id=self.game_id,
                status=self.state.status.value,
            )
        index = self.state.player_index(player_id)
        if index == -1:
            return False
        del self.state.players[index]
        if self.state.current_player_index >= len(self.state.players):
            self.state.current_player_index = 0
        return True

    def start_game(self) -> None:
        """Switch to playing. Requires min_players <= seats <= max_players."""
        if self.state.status != GameStatus.WAITING:
            raise InvalidStateError(
                "Game already started",
                game_id=self.game_id,
                status=self.state.status.value,
            )
        count = len(self.state.players)
        if not self.config.min_players <= count <= self.config.max_players:
            raise InvalidStateError(
                f"{self.game_type} needs {self.config.min_players}-"
                f"{self.config.max_players} players, has {count}",
                game_id=self.game_id,
                player_count=count,
            )

        self.state.status = GameStatus.PLAYING
        self.state.current_player_index = 0
        self.state.winner = None
        self.state.data = self.get_initial_game_data()
        self._on_start()
        logger.info("Game %s (%s) started with %d players", self.game_id, self.game_type, count)

    # =========================================================================
    # Moves
    # =========================================================================

    def validate_move(self, move: Move) -> bool:
        """Pure legality check. Never raises."""
        if self.state.status != GameStatus.PLAYING:
            return False
        if self.state.get_player(move.player_id) is None:
            return False
        return bool(self._validate_move(move))

    def process_move(self, move: Move) -> None:
        """
        Apply a move that passed validate_move().

        Mutates data, records the move time, advances the active seat for
        sequential variants and finishes the game on a terminal condition.
        """
        self._apply_move(move)
        self.state.last_move_at = move.timestamp
        if self.state.status == GameStatus.PLAYING and self._should_advance_turn(move):
            self.advance_turn()

    def make_move(self, move: Move) -> bool:
        """Validate then process. Returns False for an illegal move."""
        if not self.validate_move(move):
            logger.debug(
                "Rejected %s from %s in game %s", move.type, move.player_id, self.game_id
            )
            return False
        self.process_move(move)
        return True

    def advance_turn(self) -> None:
        if self.state.players:
            self.state.current_player_index = (
                self.state.current_player_index + 1
            ) % len(self.state.players)

    def _finish(self, winner_id: str | None) -> None:
        self.state.status = GameStatus.FINISHED
        self.state.winner = winner_id
        logger.info("Game %s finished, winner=%s", self.game_id, winner_id or "none")

    # =========================================================================
    # Snapshots
    # =========================================================================

    def get_state(self) -> GameState:
        """Deep copy of the current state."""
        return self.state.clone()

    def restore_state(self, state: GameState | Mapping[str, Any]) -> None:
        """Replace the in-memory state with a snapshot (deep copied)."""
        if not isinstance(state, GameState):
            state = GameState.from_dict(state)
        if state.game_type != self.game_type:
            raise InvalidStateError(
                f"Cannot restore {state.game_type} state into {self.game_type} engine",
                game_id=state.game_id,
            )
        self.state = state.clone()
        self.game_id = state.game_id
        self._on_restore()

    # =========================================================================
    # Queries
    # =========================================================================

    def get_current_player(self) -> Player | None:
        return self.state.current_player

    def get_players(self) -> list[Player]:
        return [replace(p) for p in self.state.players]

    def is_game_finished(self) -> bool:
        return self.state.status == GameStatus.FINISHED

    def get_config(self) -> GameConfig:
        return self.config
