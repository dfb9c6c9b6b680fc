"""
Tests for tic-tac-toe.

Tests:
- Turn order and cell validation
- Wins, winning line and draws
- Timeout default move
"""

from ..engine_core.move import Move
from ..engine_core.state import GameStatus
from ..games.tic_tac_toe import board_winner, empty_board, find_winning_line
from .conftest import play

DRAW_SEQUENCE = [(0, 0), (0, 1), (0, 2), (1, 1), (1, 0), (2, 0), (2, 1), (1, 2), (2, 2)]


def moves_for(cells):
    return [Move.place("p1" if i % 2 == 0 else "p2", r, c) for i, (r, c) in enumerate(cells)]


class TestTurns:
    """Tests for alternating turns."""

    def test_x_moves_first(self, ttt_game):
        assert ttt_game.state.data["current_symbol"] == "X"
        assert ttt_game.validate_move(Move.place("p1", 0, 0))
        assert not ttt_game.validate_move(Move.place("p2", 0, 0))

    def test_turn_alternates(self, ttt_game):
        play(ttt_game, Move.place("p1", 0, 0))
        assert ttt_game.state.current_player_index == 1
        assert ttt_game.state.data["current_symbol"] == "O"
        assert ttt_game.state.data["board"][0][0] == "X"

        play(ttt_game, Move.place("p2", 1, 1))
        assert ttt_game.state.current_player_index == 0
        assert ttt_game.state.data["move_count"] == 2

    def test_out_of_turn_move_leaves_index_alone(self, ttt_game):
        assert not ttt_game.make_move(Move.place("p2", 0, 0))
        assert ttt_game.state.current_player_index == 0

    def test_occupied_cell_rejected(self, ttt_game):
        play(ttt_game, Move.place("p1", 1, 1))
        assert not ttt_game.validate_move(Move.place("p2", 1, 1))

    def test_out_of_range_rejected(self, ttt_game):
        assert not ttt_game.validate_move(Move.place("p1", 3, 0))
        assert not ttt_game.validate_move(Move.place("p1", 0, -1))

    def test_boolean_coordinates_rejected(self, ttt_game):
        assert not ttt_game.validate_move(Move.place("p1", True, False))


class TestOutcome:
    """Tests for terminal conditions."""

    def test_row_win(self, ttt_game):
        play(ttt_game, *moves_for([(0, 0), (1, 0), (0, 1), (1, 1), (0, 2)]))

        assert ttt_game.state.status == GameStatus.FINISHED
        assert ttt_game.state.winner == "p1"
        assert ttt_game.state.data["winner"] == "X"
        assert ttt_game.state.data["winning_line"] == [[0, 0], [0, 1], [0, 2]]
        assert ttt_game.check_win_condition().id == "p1"

    def test_o_wins_diagonal(self, ttt_game):
        play(ttt_game, *moves_for([(0, 0), (0, 2), (1, 0), (1, 1), (2, 2), (2, 0)]))
        assert ttt_game.state.winner == "p2"
        assert ttt_game.state.data["winning_line"] == [[0, 2], [1, 1], [2, 0]]

    def test_draw(self, ttt_game):
        play(ttt_game, *moves_for(DRAW_SEQUENCE))

        assert ttt_game.state.status == GameStatus.FINISHED
        assert ttt_game.state.winner is None
        assert ttt_game.state.data["winner"] == "draw"
        assert ttt_game.state.data["winning_line"] is None
        assert ttt_game.check_win_condition() is None

    def test_finished_data_is_frozen(self, ttt_game):
        play(ttt_game, *moves_for([(0, 0), (1, 0), (0, 1), (1, 1), (0, 2)]))
        before = ttt_game.get_state()
        assert not ttt_game.make_move(Move.place("p2", 2, 2))
        assert ttt_game.get_state() == before


class TestHelpers:
    """Tests for board helpers."""

    def test_empty_board_has_no_winner(self):
        board = empty_board()
        assert board_winner(board) is None
        assert find_winning_line(board) is None

    def test_column_line(self):
        board = empty_board()
        for r in range(3):
            board[r][1] = "O"
        assert find_winning_line(board) == [[0, 1], [1, 1], [2, 1]]
        assert board_winner(board) == "O"


class TestTimeout:
    """Tests for the default timeout move."""

    def test_timeout_move_takes_first_empty_cell(self, ttt_game):
        play(ttt_game, Move.place("p1", 0, 0))
        move = ttt_game.timeout_move("p2")
        assert move.player_id == "p2"
        assert (move.data["row"], move.data["col"]) == (0, 1)
        assert ttt_game.validate_move(move)

    def test_no_timeout_move_for_waiting_seat(self, ttt_game):
        assert ttt_game.timeout_move("p2") is None

    def test_rules_are_listed(self, ttt_game):
        assert len(ttt_game.get_game_rules()) == 4
