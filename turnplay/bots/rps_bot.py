"""
Rock Paper Scissors Bot.

Strategies by difficulty:
    easy    uniform random
    medium  counters the predicted choice 70% of the time, random otherwise
    hard    always counters the predicted choice

The prediction is the opponent's most frequent choice over completed
rounds. Ties go to the tied choice the opponent played most recently.
Without history every difficulty plays uniformly at random.
"""

from __future__ import annotations

from ..engine_core.move import MoveType
from ..errors import InvalidStateError
from ..games.rock_paper_scissors import CHOICES, COUNTER, RockPaperScissorsGame
from .policy import BaseBot, BotDecision, BotDifficulty

MEDIUM_COUNTER_PROBABILITY = 0.7


def predict_choice(history: list[str]) -> str | None:
    """
    Most frequent choice in history (oldest first).

    Ties go to the tied choice that appears latest in history.
    """
    counts = {choice: 0 for choice in CHOICES}
    last_seen: dict[str, int] = {}
    for i, choice in enumerate(history):
        if choice in counts:
            counts[choice] += 1
            last_seen[choice] = i

    best = max(counts.values())
    if best == 0:
        return None
    tied = [choice for choice in CHOICES if counts[choice] == best]
    return max(tied, key=lambda choice: last_seen[choice])


class RockPaperScissorsBot(BaseBot[RockPaperScissorsGame]):
    """Frequency-counting RPS opponent."""

    async def make_decision(self) -> BotDecision:
        self._require_bot_user_id()
        if self.game_engine.state.data.get("game_winner") is not None:
            raise InvalidStateError(
                "No decision to make: the match is decided",
                game_id=self.game_engine.game_id,
            )

        history = self.opponent_history()
        prediction = predict_choice(history)

        if self.difficulty == BotDifficulty.EASY or prediction is None:
            decision = self._choose(self.rng.choice(CHOICES), "random choice")
        elif self.difficulty == BotDifficulty.MEDIUM:
            if self.rng.random() < MEDIUM_COUNTER_PROBABILITY:
                decision = self._choose(COUNTER[prediction], f"countering predicted {prediction}")
            else:
                decision = self._choose(self.rng.choice(CHOICES), "random choice")
        else:
            decision = self._choose(COUNTER[prediction], f"countering predicted {prediction}")

        self._log_decision(decision)
        return decision

    def evaluate_state(self) -> str:
        state = self.game_engine.state
        data = state.data
        return (
            f"RPS rounds={len(data.get('rounds', []))} "
            f"playersReady={len(data.get('players_ready', []))} status={state.status.value}"
        )

    def opponent_history(self) -> list[str]:
        """Opponent's choices over completed rounds, oldest first."""
        opponent_id = self._opponent_id()
        if opponent_id is None:
            return []
        history = []
        for round_ in self.game_engine.state.data.get("rounds", []):
            choice = round_.get("choices", {}).get(opponent_id)
            if choice in CHOICES:
                history.append(choice)
        return history

    def _opponent_id(self) -> str | None:
        for player in self.game_engine.state.players:
            if player.id != self.bot_user_id:
                return player.id
        return None

    @staticmethod
    def _choose(choice: str, explanation: str) -> BotDecision:
        return BotDecision(
            move_type=MoveType.SUBMIT_CHOICE.value,
            data={"choice": choice},
            explanation=explanation,
        )
