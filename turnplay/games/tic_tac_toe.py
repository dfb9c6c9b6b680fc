"""
Tic-Tac-Toe - Three-in-a-row on a 3x3 grid.

Seat 0 plays X, seat 1 plays O. Players alternate; the first complete
row, column or diagonal wins, a full board without a line is a draw.

Data shape:
    board          3x3 list of "X" | "O" | None
    current_symbol mark to play next
    winner         "X" | "O" | "draw" | None
    winning_line   [[row, col], ...] when decided by a line
    move_count     number of placed marks
"""

from __future__ import annotations
from typing import Any

from ..engine_core.engine import GameConfig, GameEngine
from ..engine_core.move import Move, MoveType
from ..engine_core.state import Player

X = "X"
O = "O"
DRAW = "draw"
BOARD_SIZE = 3

# All eight lines, rows first, then columns, then diagonals
LINES: list[list[tuple[int, int]]] = (
    [[(r, c) for c in range(3)] for r in range(3)]
    + [[(r, c) for r in range(3)] for c in range(3)]
    + [[(0, 0), (1, 1), (2, 2)], [(0, 2), (1, 1), (2, 0)]]
)


def other_symbol(symbol: str) -> str:
    return O if symbol == X else X


def empty_board() -> list[list[str | None]]:
    return [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]


def find_winning_line(board: list[list[str | None]]) -> list[list[int]] | None:
    """First completed line in LINES order, as [[row, col], ...]."""
    for line in LINES:
        (r0, c0), (r1, c1), (r2, c2) = line
        first = board[r0][c0]
        if first is not None and first == board[r1][c1] == board[r2][c2]:
            return [[r, c] for r, c in line]
    return None


def board_winner(board: list[list[str | None]]) -> str | None:
    """Mark that completed a line, "draw" for a full board, else None."""
    line = find_winning_line(board)
    if line:
        r, c = line[0]
        return board[r][c]
    if all(cell is not None for row in board for cell in row):
        return DRAW
    return None


def empty_cells(board: list[list[str | None]]) -> list[tuple[int, int]]:
    """Empty cells in row-major order."""
    return [
        (r, c)
        for r in range(BOARD_SIZE)
        for c in range(BOARD_SIZE)
        if board[r][c] is None
    ]


def _is_coordinate(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < BOARD_SIZE


class TicTacToeGame(GameEngine):
    """Two-player three-in-a-row."""

    game_type = "tic_tac_toe"
    default_config = GameConfig(min_players=2, max_players=2)

    def get_initial_game_data(self) -> dict[str, Any]:
        return {
            "board": empty_board(),
            "current_symbol": X,
            "winner": None,
            "winning_line": None,
            "move_count": 0,
        }

    def _validate_move(self, move: Move) -> bool:
        data = self.state.data
        if move.type != MoveType.PLACE.value:
            return False
        if data["winner"] is not None:
            return False
        if self.state.player_index(move.player_id) != self.state.current_player_index:
            return False

        row = move.data.get("row")
        col = move.data.get("col")
        if not (_is_coordinate(row) and _is_coordinate(col)):
            return False
        return data["board"][row][col] is None

    def _apply_move(self, move: Move) -> None:
        data = self.state.data
        row, col = move.data["row"], move.data["col"]
        symbol = data["current_symbol"]

        data["board"][row][col] = symbol
        data["move_count"] += 1

        line = find_winning_line(data["board"])
        if line:
            data["winner"] = symbol
            data["winning_line"] = line
            self._finish(self._player_for_symbol(symbol))
            return

        if data["move_count"] == BOARD_SIZE * BOARD_SIZE:
            data["winner"] = DRAW
            data["winning_line"] = None
            self._finish(None)
            return

        data["current_symbol"] = other_symbol(symbol)

    def check_win_condition(self) -> Player | None:
        winner = self.state.data.get("winner")
        if winner in (None, DRAW):
            return None
        player_id = self._player_for_symbol(winner)
        return self.state.get_player(player_id) if player_id else None

    def get_game_rules(self) -> list[str]:
        return [
            "Two players take turns (X and O)",
            "Mark any empty cell on the 3x3 grid",
            "First to get 3 in a row wins (horizontal, vertical, or diagonal)",
            "If all 9 cells are filled with no winner, the game is a draw",
        ]

    def timeout_move(self, player_id: str) -> Move | None:
        if self.state.player_index(player_id) != self.state.current_player_index:
            return None
        cells = empty_cells(self.state.data["board"])
        if not cells:
            return None
        row, col = cells[0]
        return Move.place(player_id, row, col)

    def _player_for_symbol(self, symbol: str) -> str | None:
        index = 0 if symbol == X else 1
        if index < len(self.state.players):
            return self.state.players[index].id
        return None
