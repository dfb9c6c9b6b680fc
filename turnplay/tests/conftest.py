"""
Pytest fixtures for Turnplay tests.
"""

import asyncio
import time

import pytest

from ..engine_core.move import Move, MoveType
from ..engine_core.state import Player
from ..games.rock_paper_scissors import RockPaperScissorsGame
from ..games.spy import SpyGame
from ..games.tic_tac_toe import TicTacToeGame


def seat(engine, *player_ids):
    """Add human players with their id as name."""
    for player_id in player_ids:
        engine.add_player(Player(id=player_id, name=player_id.upper()))
    return engine


def play(engine, *moves):
    """Apply moves, failing the test on the first illegal one."""
    for move in moves:
        assert engine.validate_move(move), f"illegal move {move.to_dict()}"
        engine.process_move(move)
    return engine


@pytest.fixture
def ttt_game() -> TicTacToeGame:
    """Started tic-tac-toe game, p1 is X and p2 is O."""
    engine = seat(TicTacToeGame("ttt-1"), "p1", "p2")
    engine.start_game()
    return engine


@pytest.fixture
def rps_game() -> RockPaperScissorsGame:
    """Started best-of-3 rock paper scissors game between p1 and p2."""
    engine = seat(RockPaperScissorsGame("rps-1"), "p1", "p2")
    engine.start_game()
    return engine


@pytest.fixture
def spy_game() -> SpyGame:
    """Started single-round spy game with four players and a fixed seed."""
    engine = seat(SpyGame("spy-1", total_rounds=1, seed=42), "p1", "p2", "p3", "p4")
    engine.start_game()
    return engine


@pytest.fixture
def spy_voting(spy_game) -> SpyGame:
    """Spy game advanced to the voting phase (everyone ready, all turns skipped)."""
    for player in spy_game.state.players:
        play(spy_game, Move(player_id=player.id, type=MoveType.PLAYER_READY))
    while spy_game.state.data["phase"] == "questioning":
        questioner = spy_game.state.data["current_questioner_id"]
        play(spy_game, Move(player_id=questioner, type=MoveType.SKIP_TURN))
    return spy_game


async def eventually(predicate, timeout=3.0):
    """Poll until predicate() holds, failing the test after timeout seconds."""
    deadline = time.monotonic() + timeout
    while not predicate():
        assert time.monotonic() < deadline, "condition not reached in time"
        await asyncio.sleep(0.01)
