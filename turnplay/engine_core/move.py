"""
Moves - A single player-submitted action.

A Move is immutable once built. Its `type` tag selects the handler in the
owning game engine; `data` is the variant-specific payload.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping
import time


class MoveType(str, Enum):
    """Move tags understood by the built-in variants."""
    # Tic-tac-toe
    PLACE = "place"

    # Rock/paper/scissors
    SUBMIT_CHOICE = "submit-choice"

    # Spy
    PLAYER_READY = "player-ready"
    ASK_QUESTION = "ask-question"
    ANSWER_QUESTION = "answer-question"
    SKIP_TURN = "skip-turn"
    VOTE = "vote"
    NEXT_ROUND = "next-round"


@dataclass(frozen=True)
class Move:
    """
    A move submitted by a player (human or bot).

    `type` is a plain string so unknown tags can reach validate_move()
    and be rejected there instead of failing at construction.
    """
    player_id: str
    type: str
    data: Mapping[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self):
        if isinstance(self.type, MoveType):
            object.__setattr__(self, "type", self.type.value)
        # Freeze the payload so the move cannot be altered after submission
        object.__setattr__(self, "data", MappingProxyType(dict(self.data or {})))

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_id": self.player_id,
            "type": self.type,
            "data": dict(self.data),
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Move:
        kwargs: dict[str, Any] = {
            "player_id": payload["player_id"],
            "type": payload["type"],
            "data": payload.get("data") or {},
        }
        if payload.get("timestamp") is not None:
            kwargs["timestamp"] = float(payload["timestamp"])
        return cls(**kwargs)

    @classmethod
    def place(cls, player_id: str, row: int, col: int) -> Move:
        """Factory for a tic-tac-toe placement."""
        return cls(player_id=player_id, type=MoveType.PLACE, data={"row": row, "col": col})

    @classmethod
    def submit_choice(cls, player_id: str, choice: str) -> Move:
        """Factory for a rock/paper/scissors choice."""
        return cls(player_id=player_id, type=MoveType.SUBMIT_CHOICE, data={"choice": choice})
