"""
Bot Policy - Shared base for bot opponents.

A bot reads the game engine it plays in and returns a decision.
Decisions are converted to a Move and submitted exactly like a human move:
- make_decision() never mutates the engine
- decision_to_move() needs the bot's seat id
- Difficulty picks the strategy, the config holds pacing
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Generic, TypeVar
import asyncio
import logging
import random

from ..engine_core.engine import GameEngine
from ..engine_core.move import Move
from ..errors import BotConfigurationError

logger = logging.getLogger(__name__)

EngineT = TypeVar("EngineT", bound=GameEngine)


class BotDifficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass
class BotConfig:
    """Pacing for a difficulty level."""
    difficulty: BotDifficulty
    thinking_delay_ms: int = 300


DEFAULT_BOT_CONFIGS: dict[BotDifficulty, BotConfig] = {
    BotDifficulty.EASY: BotConfig(BotDifficulty.EASY, thinking_delay_ms=500),
    BotDifficulty.MEDIUM: BotConfig(BotDifficulty.MEDIUM, thinking_delay_ms=300),
    BotDifficulty.HARD: BotConfig(BotDifficulty.HARD, thinking_delay_ms=200),
}


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    `move_type` and `data` become the Move; the explanation is for logs
    and debugging only.
    """
    move_type: str
    data: dict[str, Any] = field(default_factory=dict)
    explanation: str = ""


class BaseBot(ABC, Generic[EngineT]):
    """
    Abstract base class for game bots.

    Usage:
        bot = RockPaperScissorsBot(engine, "hard", bot_user_id="bot-1")
        decision = await bot.make_decision()
        move = bot.decision_to_move(decision)
    """

    def __init__(
        self,
        game_engine: EngineT,
        difficulty: BotDifficulty | str = BotDifficulty.MEDIUM,
        bot_user_id: str | None = None,
        rng: random.Random | None = None,
    ):
        try:
            difficulty = BotDifficulty(difficulty)
        except ValueError:
            raise BotConfigurationError(
                f"Unknown bot difficulty: {difficulty!r}",
                difficulty=str(difficulty),
            ) from None
        self.game_engine = game_engine
        self.config = replace(DEFAULT_BOT_CONFIGS[difficulty])
        self.bot_user_id = bot_user_id
        self.rng = rng or random.Random()

    @property
    def difficulty(self) -> BotDifficulty:
        return self.config.difficulty

    @abstractmethod
    async def make_decision(self) -> BotDecision:
        """Pick a decision that passes validate_move for the bot's seat."""

    @abstractmethod
    def evaluate_state(self) -> str:
        """One-line summary of the position, for logs."""

    def decision_to_move(self, decision: BotDecision) -> Move:
        """Convert a decision into a Move for the bot's seat."""
        return Move(player_id=self._require_bot_user_id(), type=decision.move_type, data=decision.data)

    def set_config(self, **changes: Any) -> None:
        self.config = replace(self.config, **changes)

    def get_config(self) -> BotConfig:
        return replace(self.config)

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__

    async def delay(self, seconds: float | None = None) -> None:
        """Pause before acting; defaults to the difficulty's thinking delay."""
        if seconds is None:
            seconds = self.config.thinking_delay_ms / 1000
        await asyncio.sleep(seconds)

    def _is_bot_turn(self) -> bool:
        current = self.game_engine.get_current_player()
        return current is not None and current.id == self.bot_user_id

    def _require_bot_user_id(self) -> str:
        if not self.bot_user_id:
            raise BotConfigurationError(
                "bot user id is missing",
                bot=self.get_name(),
                game_id=self.game_engine.game_id,
            )
        return self.bot_user_id

    def _log_decision(self, decision: BotDecision) -> None:
        logger.debug(
            "%s (%s) in game %s: %s %s - %s",
            self.get_name(),
            self.difficulty.value,
            self.game_engine.game_id,
            decision.move_type,
            decision.data,
            decision.explanation,
        )
