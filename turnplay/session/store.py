"""
Game Store - Persistence boundary for serialized game states.

The driver only talks to this interface: a blob goes in with its status,
the same blob comes out. How and where it is kept is up to the
implementation; there is no optimistic concurrency at this level (the
driver serializes writers per game).
"""

from __future__ import annotations
from typing import Protocol


class GameStore(Protocol):
    async def load(self, game_id: str) -> str | None:
        """Stored blob, or None if the game does not exist."""

    async def save(self, game_id: str, blob: str, status: str) -> None:
        """Insert or overwrite the blob of a game."""

    async def delete(self, game_id: str) -> bool:
        """Forget a game. Returns False if it was unknown."""


class InMemoryGameStore:
    """Process-local store. Blobs are lost when the process exits."""

    def __init__(self):
        self._blobs: dict[str, str] = {}
        self._statuses: dict[str, str] = {}

    async def load(self, game_id: str) -> str | None:
        return self._blobs.get(game_id)

    async def save(self, game_id: str, blob: str, status: str) -> None:
        self._blobs[game_id] = blob
        self._statuses[game_id] = status

    async def delete(self, game_id: str) -> bool:
        self._statuses.pop(game_id, None)
        return self._blobs.pop(game_id, None) is not None

    def status_of(self, game_id: str) -> str | None:
        return self._statuses.get(game_id)

    def game_ids(self) -> list[str]:
        return list(self._blobs)
