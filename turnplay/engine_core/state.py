"""
Game State - Serializable snapshot of one game instance.

Design principles:
- Plain data: `data` holds only JSON-native values (dict, list, str, int,
  float, bool, None) so a blob round-trips losslessly
- Canonical copy lives in the store: engines are rebuilt from blobs
- Game-agnostic: each variant owns the shape of `data`
"""

from __future__ import annotations
from dataclasses import dataclass, field
from copy import deepcopy
from enum import Enum
from typing import Any, Mapping
import json


class GameStatus(str, Enum):
    """Lifecycle of a game instance."""
    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


@dataclass
class Player:
    """A seat in the game."""
    id: str
    name: str
    is_bot: bool = False
    bot_difficulty: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "is_bot": self.is_bot,
            "bot_difficulty": self.bot_difficulty,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Player:
        return cls(
            id=payload["id"],
            name=payload.get("name", payload["id"]),
            is_bot=bool(payload.get("is_bot", False)),
            bot_difficulty=payload.get("bot_difficulty"),
        )


@dataclass
class GameState:
    """
    Complete state of a game at a point in time.

    current_player_index is a valid index into players unless the
    game is finished.
    """
    game_id: str
    game_type: str
    status: GameStatus = GameStatus.WAITING
    current_player_index: int = 0
    players: list[Player] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)

    # Player id of the winner, once finished (None for draws)
    winner: str | None = None

    # Timestamp of the last applied move (seconds since epoch)
    last_move_at: float | None = None

    @property
    def current_player(self) -> Player | None:
        if 0 <= self.current_player_index < len(self.players):
            return self.players[self.current_player_index]
        return None

    def get_player(self, player_id: str) -> Player | None:
        """Get player by ID."""
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def player_index(self, player_id: str) -> int:
        """Seat index of a player, -1 if not seated."""
        for i, p in enumerate(self.players):
            if p.id == player_id:
                return i
        return -1

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "game_id": self.game_id,
            "game_type": self.game_type,
            "status": self.status.value,
            "current_player_index": self.current_player_index,
            "players": [p.to_dict() for p in self.players],
            "data": deepcopy(self.data),
            "winner": self.winner,
            "last_move_at": self.last_move_at,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> GameState:
        players = payload.get("players") or []
        return cls(
            game_id=payload["game_id"],
            game_type=payload["game_type"],
            status=GameStatus(payload.get("status", GameStatus.WAITING.value)),
            current_player_index=int(payload.get("current_player_index", 0)),
            players=[Player.from_dict(p) for p in players],
            data=deepcopy(dict(payload.get("data") or {})),
            winner=payload.get("winner"),
            last_move_at=payload.get("last_move_at"),
        )


def serialize_state(state: GameState) -> str:
    """State -> blob handed to the persistence collaborator."""
    return json.dumps(state.to_dict(), separators=(",", ":"))


def deserialize_state(blob: str | bytes) -> GameState:
    """Blob -> state. Inverse of serialize_state()."""
    return GameState.from_dict(json.loads(blob))
