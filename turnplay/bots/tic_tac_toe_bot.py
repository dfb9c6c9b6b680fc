"""
Tic-Tac-Toe Bot.

Strategies by difficulty:
    easy    random empty cell
    medium  win, else block, else center, else random corner, else random
    hard    full minimax; among equal scores prefer center, then corners,
            then edges, then row-major order
"""

from __future__ import annotations
import math

from ..engine_core.move import MoveType
from ..engine_core.state import GameStatus
from ..errors import InvalidStateError
from ..games.tic_tac_toe import (
    TicTacToeGame,
    board_winner,
    empty_cells,
    other_symbol,
    DRAW,
)
from .policy import BaseBot, BotDecision, BotDifficulty

Board = list[list[str | None]]
Cell = tuple[int, int]

CENTER: Cell = (1, 1)
CORNERS: tuple[Cell, ...] = ((0, 0), (0, 2), (2, 0), (2, 2))

# Scores are 10 - depth for a win so faster wins (and slower losses) rank higher
WIN_SCORE = 10


def position_priority(cell: Cell) -> int:
    if cell == CENTER:
        return 3
    if cell in CORNERS:
        return 2
    return 1


def find_winning_cell(board: Board, symbol: str) -> Cell | None:
    """First empty cell (row-major) that completes a line for symbol."""
    for row, col in empty_cells(board):
        board[row][col] = symbol
        won = board_winner(board) == symbol
        board[row][col] = None
        if won:
            return row, col
    return None


def minimax(
    board: Board,
    maximizing: bool,
    me: str,
    opponent: str,
    depth: int,
    alpha: float = -math.inf,
    beta: float = math.inf,
) -> int:
    """Alpha-beta minimax. Exact when called with the full window."""
    winner = board_winner(board)
    if winner == me:
        return WIN_SCORE - depth
    if winner == opponent:
        return depth - WIN_SCORE
    if winner == DRAW:
        return 0

    symbol = me if maximizing else opponent
    best = -math.inf if maximizing else math.inf
    for row, col in empty_cells(board):
        board[row][col] = symbol
        score = minimax(board, not maximizing, me, opponent, depth + 1, alpha, beta)
        board[row][col] = None
        if maximizing:
            best = max(best, score)
            alpha = max(alpha, best)
        else:
            best = min(best, score)
            beta = min(beta, best)
        if beta <= alpha:
            break
    return best


def best_cell(board: Board, me: str) -> Cell:
    """Minimax choice with the center > corner > edge preference."""
    opponent = other_symbol(me)
    best_score = None
    best_cells: list[Cell] = []
    for row, col in empty_cells(board):
        board[row][col] = me
        score = minimax(board, False, me, opponent, 1)
        board[row][col] = None
        if best_score is None or score > best_score:
            best_score, best_cells = score, [(row, col)]
        elif score == best_score:
            best_cells.append((row, col))

    # sorted() is stable, so row-major order breaks the remaining ties
    return sorted(best_cells, key=position_priority, reverse=True)[0]


class TicTacToeBot(BaseBot[TicTacToeGame]):
    """Plays the mark that is currently to move."""

    async def make_decision(self) -> BotDecision:
        bot_user_id = self._require_bot_user_id()
        state = self.game_engine.state
        board = [list(row) for row in state.data["board"]]
        cells = empty_cells(board)
        if state.status != GameStatus.PLAYING or not cells:
            raise InvalidStateError(
                "No available moves for Tic-Tac-Toe bot",
                game_id=self.game_engine.game_id,
            )
        if not self._is_bot_turn():
            raise InvalidStateError(
                "Not the bot's turn",
                game_id=self.game_engine.game_id,
                bot_user_id=bot_user_id,
            )

        me = state.data["current_symbol"]
        if self.difficulty == BotDifficulty.EASY:
            cell, why = self.rng.choice(cells), "random cell"
        elif self.difficulty == BotDifficulty.HARD:
            cell, why = best_cell(board, me), "minimax"
        else:
            cell, why = self._medium_cell(board, me, cells)

        decision = BotDecision(
            move_type=MoveType.PLACE.value,
            data={"row": cell[0], "col": cell[1]},
            explanation=why,
        )
        self._log_decision(decision)
        return decision

    def _medium_cell(self, board: Board, me: str, cells: list[Cell]) -> tuple[Cell, str]:
        winning = find_winning_cell(board, me)
        if winning:
            return winning, "completing a line"

        blocking = find_winning_cell(board, other_symbol(me))
        if blocking:
            return blocking, "blocking a line"

        if board[CENTER[0]][CENTER[1]] is None:
            return CENTER, "taking the center"

        corners = [c for c in CORNERS if board[c[0]][c[1]] is None]
        if corners:
            return self.rng.choice(corners), "taking a corner"

        return self.rng.choice(cells), "random cell"

    def evaluate_state(self) -> str:
        state = self.game_engine.state
        data = state.data
        return (
            f"TicTacToe turn={state.current_player_index} "
            f"symbol={data['current_symbol']} moves={data['move_count']}"
        )
