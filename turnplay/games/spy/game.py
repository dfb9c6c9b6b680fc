"""
Spy Game - Hidden-role deduction.

One seat is secretly the spy; everyone else learns the location and a
role there. Each round runs through four phases:

    role_reveal  every player confirms they saw their role (simultaneous)
    questioning  the questioner asks a seat, that seat answers (sequential)
    voting       every player accuses someone (simultaneous)
    results      votes tallied, scores updated; next-round starts the next one

The game finishes after the results of the last round. Role assignment is
drawn from a seed kept in the data, so replaying the same moves on the same
seed reproduces the same state.
"""

from __future__ import annotations
from enum import Enum
from typing import Any
import logging
import random

from ...engine_core.engine import GameConfig, GameEngine
from ...engine_core.move import Move, MoveType
from ...engine_core.state import GameStatus, Player
from .locations import CATEGORIES, LOCATIONS

logger = logging.getLogger(__name__)

SPY_ROLE = "Spy"
TIMEOUT_ANSWER = "I'd rather not say."

# Points awarded when votes are tallied
SPY_SURVIVES_POINTS = 300
SPY_CAUGHT_POINTS = 100
CORRECT_VOTE_POINTS = 50
WRONG_VOTE_POINTS = -10


class SpyPhase(str, Enum):
    WAITING = "waiting"
    ROLE_REVEAL = "role_reveal"
    QUESTIONING = "questioning"
    VOTING = "voting"
    RESULTS = "results"


def _non_empty_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def tally_votes(votes: dict[str, str]) -> str | None:
    """
    Player with the most votes.

    Ties go to the target that was voted for first.
    """
    counts: dict[str, int] = {}
    for target_id in votes.values():
        counts[target_id] = counts.get(target_id, 0) + 1

    eliminated = None
    best = 0
    for target_id, count in counts.items():
        if count > best:
            best = count
            eliminated = target_id
    return eliminated


class SpyGame(GameEngine):
    """Guess-the-spy for 3 to 10 players."""

    game_type = "guess_the_spy"
    default_config = GameConfig(min_players=3, max_players=10)

    def __init__(
        self,
        game_id: str,
        config: GameConfig | None = None,
        total_rounds: int = 3,
        seed: int | None = None,
    ):
        if total_rounds < 1:
            raise ValueError("total_rounds must be at least 1")
        self.total_rounds = total_rounds
        self.seed = seed
        super().__init__(game_id, config)

    def get_initial_game_data(self) -> dict[str, Any]:
        return {
            "phase": SpyPhase.WAITING.value,
            "current_round": 1,
            "total_rounds": self.total_rounds,
            "seed": self.seed,
            "location": "",
            "location_category": "",
            "spy_player_id": "",
            "player_roles": {},
            "votes": {},
            "question_history": [],
            "scores": {},
            "current_questioner_id": None,
            "current_target_id": None,
            "pending_question": None,
            "players_ready": [],
            "turns_taken": 0,
            "last_outcome": None,
        }

    def _on_start(self) -> None:
        data = self.state.data
        if data["seed"] is None:
            data["seed"] = random.randrange(2**31)
        for player in self.state.players:
            data["scores"][player.id] = 0
        self._setup_round()

    def _on_restore(self) -> None:
        self.total_rounds = self.state.data.get("total_rounds", self.total_rounds)
        self.seed = self.state.data.get("seed", self.seed)

    # =========================================================================
    # Rounds
    # =========================================================================

    def _setup_round(self) -> None:
        """Draw location, spy and roles for the current round."""
        data = self.state.data
        players = self.state.players
        rng = random.Random(data["seed"] * 100 + data["current_round"])

        location = rng.choice(LOCATIONS)
        spy_index = rng.randrange(len(players))
        roles = rng.sample(location.roles, len(players) - 1)

        data["location"] = location.name
        data["location_category"] = location.category
        data["spy_player_id"] = players[spy_index].id
        data["player_roles"] = {}
        role_iter = iter(roles)
        for i, player in enumerate(players):
            data["player_roles"][player.id] = SPY_ROLE if i == spy_index else next(role_iter)

        data["votes"] = {}
        data["question_history"] = []
        data["players_ready"] = []
        data["current_questioner_id"] = None
        data["current_target_id"] = None
        data["pending_question"] = None
        data["turns_taken"] = 0
        data["last_outcome"] = None
        data["phase"] = SpyPhase.ROLE_REVEAL.value
        self.state.current_player_index = 0

    # =========================================================================
    # Validation
    # =========================================================================

    def _validate_move(self, move: Move) -> bool:
        data = self.state.data
        phase = data["phase"]
        player_id = move.player_id

        if move.type == MoveType.PLAYER_READY.value:
            return phase == SpyPhase.ROLE_REVEAL.value and player_id not in data["players_ready"]

        if move.type == MoveType.ASK_QUESTION.value:
            target_id = move.data.get("target_id")
            return (
                phase == SpyPhase.QUESTIONING.value
                and data["current_questioner_id"] == player_id
                and data["pending_question"] is None
                and isinstance(target_id, str)
                and target_id != player_id
                and self.state.get_player(target_id) is not None
                and _non_empty_text(move.data.get("question"))
            )

        if move.type == MoveType.ANSWER_QUESTION.value:
            return (
                phase == SpyPhase.QUESTIONING.value
                and data["pending_question"] is not None
                and data["current_target_id"] == player_id
                and _non_empty_text(move.data.get("answer"))
            )

        if move.type == MoveType.SKIP_TURN.value:
            return (
                phase == SpyPhase.QUESTIONING.value
                and data["current_questioner_id"] == player_id
                and data["pending_question"] is None
            )

        if move.type == MoveType.VOTE.value:
            target_id = move.data.get("target_id")
            return (
                phase == SpyPhase.VOTING.value
                and player_id not in data["votes"]
                and isinstance(target_id, str)
                and target_id != player_id
                and self.state.get_player(target_id) is not None
            )

        if move.type == MoveType.NEXT_ROUND.value:
            return phase == SpyPhase.RESULTS.value

        return False

    # =========================================================================
    # Application
    # =========================================================================

    def _should_advance_turn(self, move: Move) -> bool:
        # The active seat follows the questioning order, not every move
        return False

    def _apply_move(self, move: Move) -> None:
        handlers = {
            MoveType.PLAYER_READY.value: self._handle_ready,
            MoveType.ASK_QUESTION.value: self._handle_ask,
            MoveType.ANSWER_QUESTION.value: self._handle_answer,
            MoveType.SKIP_TURN.value: self._handle_skip,
            MoveType.VOTE.value: self._handle_vote,
            MoveType.NEXT_ROUND.value: self._handle_next_round,
        }
        handlers[move.type](move)

    def _handle_ready(self, move: Move) -> None:
        data = self.state.data
        data["players_ready"].append(move.player_id)
        if len(data["players_ready"]) == len(self.state.players):
            data["phase"] = SpyPhase.QUESTIONING.value
            self._set_questioner(0)

    def _handle_ask(self, move: Move) -> None:
        data = self.state.data
        data["current_target_id"] = move.data["target_id"]
        data["pending_question"] = move.data["question"].strip()
        self.state.current_player_index = self.state.player_index(move.data["target_id"])

    def _handle_answer(self, move: Move) -> None:
        data = self.state.data
        data["question_history"].append({
            "asker_id": data["current_questioner_id"],
            "target_id": data["current_target_id"],
            "question": data["pending_question"],
            "answer": move.data["answer"].strip(),
        })
        data["pending_question"] = None
        self._end_questioning_turn()

    def _handle_skip(self, move: Move) -> None:
        self._end_questioning_turn()

    def _end_questioning_turn(self) -> None:
        data = self.state.data
        data["turns_taken"] += 1
        data["current_target_id"] = None

        if data["turns_taken"] >= len(self.state.players) * 2:
            data["phase"] = SpyPhase.VOTING.value
            data["current_questioner_id"] = None
            data["votes"] = {}
            return

        current = self.state.player_index(data["current_questioner_id"])
        self._set_questioner((current + 1) % len(self.state.players))

    def _set_questioner(self, index: int) -> None:
        self.state.data["current_questioner_id"] = self.state.players[index].id
        self.state.data["current_target_id"] = None
        self.state.current_player_index = index

    def _handle_vote(self, move: Move) -> None:
        data = self.state.data
        data["votes"][move.player_id] = move.data["target_id"]
        if len(data["votes"]) == len(self.state.players):
            self._calculate_results()

    def _calculate_results(self) -> None:
        data = self.state.data
        spy_id = data["spy_player_id"]
        scores = data["scores"]
        eliminated = tally_votes(data["votes"])
        spy_caught = eliminated == spy_id

        if spy_caught:
            for player in self.state.players:
                if player.id != spy_id:
                    scores[player.id] = scores.get(player.id, 0) + SPY_CAUGHT_POINTS
        else:
            scores[spy_id] = scores.get(spy_id, 0) + SPY_SURVIVES_POINTS

        for voter_id, target_id in data["votes"].items():
            bonus = CORRECT_VOTE_POINTS if target_id == spy_id else WRONG_VOTE_POINTS
            scores[voter_id] = scores.get(voter_id, 0) + bonus

        data["last_outcome"] = {
            "round": data["current_round"],
            "eliminated_id": eliminated,
            "spy_player_id": spy_id,
            "spy_caught": spy_caught,
            "location": data["location"],
        }
        data["phase"] = SpyPhase.RESULTS.value
        logger.debug(
            "Spy game %s round %d: eliminated=%s spy_caught=%s",
            self.game_id, data["current_round"], eliminated, spy_caught,
        )

        if data["current_round"] >= data["total_rounds"]:
            winner = self.check_win_condition()
            self._finish(winner.id if winner else None)

    def _handle_next_round(self, move: Move) -> None:
        self.state.data["current_round"] += 1
        self._setup_round()

    # =========================================================================
    # Queries
    # =========================================================================

    def check_win_condition(self) -> Player | None:
        """Highest score after the last round; earlier seats win ties."""
        data = self.state.data
        if data["phase"] != SpyPhase.RESULTS.value or data["current_round"] < data["total_rounds"]:
            return None

        best: Player | None = None
        best_score = 0
        for player in self.state.players:
            score = data["scores"].get(player.id, 0)
            if score > best_score:
                best, best_score = player, score
        return best

    def get_game_rules(self) -> list[str]:
        return [
            "3-10 players compete to find the spy",
            "One player is randomly assigned as the spy",
            "Regular players see a location, spy does not",
            "Players ask each other questions about the location",
            "Spy must blend in without knowing the location",
            "After questions, all players vote for who they think is the spy",
            "If spy is caught, regular players win. If innocent caught, spy wins",
            "Game consists of multiple rounds with new locations",
        ]

    def get_role_info(self, player_id: str) -> dict[str, Any]:
        """What a given player is allowed to see about their role."""
        data = self.state.data
        if player_id == data["spy_player_id"]:
            return {"role": SPY_ROLE, "possible_categories": list(CATEGORIES)}
        return {
            "role": "Regular Player",
            "location": data["location"],
            "location_role": data["player_roles"].get(player_id),
        }

    def active_player_ids(self) -> list[str]:
        """Ready and vote phases are simultaneous; seat 0 moves on from results."""
        if self.state.status != GameStatus.PLAYING:
            return []
        data = self.state.data
        phase = data["phase"]
        if phase == SpyPhase.ROLE_REVEAL.value:
            return [p.id for p in self.state.players if p.id not in data["players_ready"]]
        if phase == SpyPhase.VOTING.value:
            return [p.id for p in self.state.players if p.id not in data["votes"]]
        if phase == SpyPhase.RESULTS.value:
            return [self.state.players[0].id]
        current = self.state.current_player
        return [current.id] if current else []

    def timeout_move(self, player_id: str) -> Move | None:
        """Deterministic stand-in move for a player who ran out of time."""
        if self.state.status != GameStatus.PLAYING:
            return None
        data = self.state.data
        phase = data["phase"]

        if phase == SpyPhase.ROLE_REVEAL.value and player_id not in data["players_ready"]:
            return Move(player_id=player_id, type=MoveType.PLAYER_READY)

        if phase == SpyPhase.QUESTIONING.value:
            if data["pending_question"] is None and data["current_questioner_id"] == player_id:
                return Move(player_id=player_id, type=MoveType.SKIP_TURN)
            if data["pending_question"] is not None and data["current_target_id"] == player_id:
                return Move(
                    player_id=player_id,
                    type=MoveType.ANSWER_QUESTION,
                    data={"answer": TIMEOUT_ANSWER},
                )

        if phase == SpyPhase.VOTING.value and player_id not in data["votes"]:
            index = self.state.player_index(player_id)
            target = self.state.players[(index + 1) % len(self.state.players)]
            return Move(player_id=player_id, type=MoveType.VOTE, data={"target_id": target.id})

        if phase == SpyPhase.RESULTS.value and player_id in self.active_player_ids():
            return Move(player_id=player_id, type=MoveType.NEXT_ROUND)

        return None
