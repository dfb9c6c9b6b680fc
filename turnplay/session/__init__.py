"""
Session Module - Drives games between requests.

Engines are rebuilt from the stored blob on every call:
- GameSessionManager: per-game locking, bot turns, timeout moves, broadcast
- GameStore / InMemoryGameStore: persistence boundary
- TurnTimeoutController: per-seat turn watchdog
"""

from .manager import GameSessionManager
from .store import GameStore, InMemoryGameStore
from .turn_timer import TurnTimeoutController, TimerPhase

__all__ = [
    "GameSessionManager",
    "GameStore",
    "InMemoryGameStore",
    "TurnTimeoutController",
    "TimerPhase",
]
