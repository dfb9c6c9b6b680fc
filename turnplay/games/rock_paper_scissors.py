"""
Rock Paper Scissors - Simultaneous-choice tournament.

Both players submit a choice for the round in any order; the round is
revealed once every seat has submitted. Draws replay. The first player to
reach the required number of round wins takes the game.

The active seat never changes: any seat with a pending choice may move.

Data shape:
    mode            "best-of-3" | "best-of-5"
    rounds          [{"choices": {player_id: choice}, "winner": player_id | "draw"}]
    player_choices  {player_id: choice | None} for the current round
    scores          {player_id: round wins}
    players_ready   player ids that submitted this round, in submission order
    game_winner     player id once decided
"""

from __future__ import annotations
from typing import Any

from ..engine_core.engine import GameConfig, GameEngine
from ..engine_core.move import Move, MoveType
from ..engine_core.state import GameStatus, Player

ROCK = "rock"
PAPER = "paper"
SCISSORS = "scissors"
CHOICES = (ROCK, PAPER, SCISSORS)
DRAW = "draw"

# choice -> the choice it defeats
BEATS = {ROCK: SCISSORS, SCISSORS: PAPER, PAPER: ROCK}

# choice -> the choice that defeats it
COUNTER = {beaten: winner for winner, beaten in BEATS.items()}

WINS_NEEDED = {"best-of-3": 2, "best-of-5": 3}


def resolve_round(choice1: str, choice2: str) -> int:
    """1 if choice1 wins, 2 if choice2 wins, 0 for a draw."""
    if choice1 == choice2:
        return 0
    return 1 if BEATS[choice1] == choice2 else 2


class RockPaperScissorsGame(GameEngine):
    """Best-of-N rock/paper/scissors between two players."""

    game_type = "rock_paper_scissors"
    default_config = GameConfig(min_players=2, max_players=2)

    def __init__(self, game_id: str, config: GameConfig | None = None, mode: str = "best-of-3"):
        if mode not in WINS_NEEDED:
            raise ValueError(f"Unknown mode {mode!r}, expected one of {sorted(WINS_NEEDED)}")
        self.mode = mode
        super().__init__(game_id, config)

    def get_initial_game_data(self) -> dict[str, Any]:
        return {
            "mode": self.mode,
            "rounds": [],
            "player_choices": {},
            "scores": {},
            "players_ready": [],
            "game_winner": None,
        }

    def _on_start(self) -> None:
        data = self.state.data
        for player in self.state.players:
            data["scores"][player.id] = 0
            data["player_choices"][player.id] = None

    def _on_restore(self) -> None:
        self.mode = self.state.data.get("mode", self.mode)

    def _validate_move(self, move: Move) -> bool:
        data = self.state.data
        if move.type != MoveType.SUBMIT_CHOICE.value:
            return False
        if data["game_winner"] is not None:
            return False
        if move.data.get("choice") not in CHOICES:
            return False
        return move.player_id not in data["players_ready"]

    def _apply_move(self, move: Move) -> None:
        data = self.state.data
        data["player_choices"][move.player_id] = move.data["choice"]
        data["players_ready"].append(move.player_id)

        if len(data["players_ready"]) == len(self.state.players):
            self._reveal_round()

    def _should_advance_turn(self, move: Move) -> bool:
        return False

    def _reveal_round(self) -> None:
        data = self.state.data
        first, second = self.state.players[0], self.state.players[1]
        choice1 = data["player_choices"][first.id]
        choice2 = data["player_choices"][second.id]

        outcome = resolve_round(choice1, choice2)
        round_winner = {0: DRAW, 1: first.id, 2: second.id}[outcome]
        data["rounds"].append({
            "choices": {first.id: choice1, second.id: choice2},
            "winner": round_winner,
        })
        if round_winner != DRAW:
            data["scores"][round_winner] = data["scores"].get(round_winner, 0) + 1

        wins_needed = WINS_NEEDED[data["mode"]]
        for player in self.state.players:
            if data["scores"].get(player.id, 0) >= wins_needed:
                data["game_winner"] = player.id
                self._finish(player.id)
                return

        for player in self.state.players:
            data["player_choices"][player.id] = None
        data["players_ready"] = []

    def check_win_condition(self) -> Player | None:
        winner_id = self.state.data.get("game_winner")
        return self.state.get_player(winner_id) if winner_id else None

    def get_game_rules(self) -> list[str]:
        return [
            "Both players choose Rock, Paper, or Scissors simultaneously",
            "Rock beats Scissors, Scissors beats Paper, Paper beats Rock",
            "If both choose the same, the round is a draw - replay",
            "Best-of-3 or Best-of-5 format (decided at game start)",
            "First to win majority of rounds wins the game",
        ]

    def pending_players(self) -> list[str]:
        """Seats that still have to choose this round."""
        ready = set(self.state.data.get("players_ready", []))
        return [p.id for p in self.state.players if p.id not in ready]

    def active_player_ids(self) -> list[str]:
        if self.state.status != GameStatus.PLAYING:
            return []
        return self.pending_players()
