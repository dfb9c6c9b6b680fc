"""
Tests for rock paper scissors.

Tests:
- Simultaneous submissions
- Round resolution, draws and scores
- Best-of-3 / best-of-5 end conditions
"""

import pytest

from ..engine_core.move import Move
from ..engine_core.state import GameStatus, deserialize_state, serialize_state
from ..games.registry import restore_game_engine
from ..games.rock_paper_scissors import RockPaperScissorsGame, resolve_round
from .conftest import play, seat


def round_of(engine, choice1, choice2):
    play(engine, Move.submit_choice("p1", choice1), Move.submit_choice("p2", choice2))


class TestSubmissions:
    """Tests for choice submission."""

    def test_either_seat_may_move_first(self, rps_game):
        assert rps_game.validate_move(Move.submit_choice("p2", "paper"))
        play(rps_game, Move.submit_choice("p2", "paper"))
        assert rps_game.state.current_player_index == 0
        assert rps_game.pending_players() == ["p1"]
        assert rps_game.active_player_ids() == ["p1"]

    def test_second_submission_in_round_rejected(self, rps_game):
        play(rps_game, Move.submit_choice("p1", "rock"))
        assert not rps_game.validate_move(Move.submit_choice("p1", "paper"))

    def test_invalid_choice_rejected(self, rps_game):
        assert not rps_game.validate_move(Move.submit_choice("p1", "lizard"))
        assert not rps_game.validate_move(Move(player_id="p1", type="submit-choice", data={}))

    def test_wrong_move_type_rejected(self, rps_game):
        assert not rps_game.validate_move(Move.place("p1", 0, 0))


class TestRounds:
    """Tests for round resolution."""

    def test_resolve_round(self):
        assert resolve_round("rock", "scissors") == 1
        assert resolve_round("rock", "paper") == 2
        assert resolve_round("paper", "paper") == 0

    def test_round_is_revealed_when_all_chose(self, rps_game):
        round_of(rps_game, "rock", "scissors")
        data = rps_game.state.data

        assert data["rounds"] == [{"choices": {"p1": "rock", "p2": "scissors"}, "winner": "p1"}]
        assert data["scores"] == {"p1": 1, "p2": 0}
        assert data["players_ready"] == []
        assert data["player_choices"] == {"p1": None, "p2": None}

    def test_draw_replays(self, rps_game):
        round_of(rps_game, "paper", "paper")
        data = rps_game.state.data
        assert data["rounds"][0]["winner"] == "draw"
        assert data["scores"] == {"p1": 0, "p2": 0}
        assert rps_game.state.status == GameStatus.PLAYING

    def test_best_of_three(self, rps_game):
        round_of(rps_game, "rock", "scissors")
        round_of(rps_game, "scissors", "rock")
        assert rps_game.state.status == GameStatus.PLAYING
        round_of(rps_game, "scissors", "paper")

        assert rps_game.state.status == GameStatus.FINISHED
        assert rps_game.state.winner == "p1"
        assert rps_game.state.data["game_winner"] == "p1"
        assert rps_game.check_win_condition().id == "p1"
        assert rps_game.active_player_ids() == []

    def test_best_of_five_needs_three_wins(self):
        engine = seat(RockPaperScissorsGame("g", mode="best-of-5"), "p1", "p2")
        engine.start_game()
        round_of(engine, "paper", "rock")
        round_of(engine, "paper", "rock")
        assert engine.state.status == GameStatus.PLAYING
        round_of(engine, "paper", "rock")
        assert engine.state.winner == "p1"

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            RockPaperScissorsGame("g", mode="best-of-7")

    def test_mode_survives_restore(self):
        engine = seat(RockPaperScissorsGame("g", mode="best-of-5"), "p1", "p2")
        engine.start_game()
        restored = restore_game_engine(serialize_state(engine.get_state()))
        assert restored.mode == "best-of-5"

    def test_finished_match_round_trips(self, rps_game):
        round_of(rps_game, "rock", "scissors")
        round_of(rps_game, "paper", "paper")
        round_of(rps_game, "paper", "rock")
        state = rps_game.get_state()
        assert state.status == GameStatus.FINISHED

        blob = serialize_state(state)
        assert deserialize_state(blob) == state
        restored = restore_game_engine(blob)
        assert restored.get_state() == state
        assert not restored.validate_move(Move.submit_choice("p2", "rock"))

    def test_no_timeout_move_from_engine(self, rps_game):
        # Timeouts in this variant are played by an easy bot in the driver
        assert rps_game.timeout_move("p1") is None
