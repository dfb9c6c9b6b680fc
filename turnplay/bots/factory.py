"""
Bot Factory - Picks the bot class for a game type.
"""

from __future__ import annotations
import random

from ..engine_core.engine import GameEngine
from ..errors import BotConfigurationError
from ..games.registry import get_game_metadata, is_registered_game_type
from ..games.rock_paper_scissors import RockPaperScissorsGame
from ..games.tic_tac_toe import TicTacToeGame
from .policy import BaseBot, BotDifficulty
from .rps_bot import RockPaperScissorsBot
from .tic_tac_toe_bot import TicTacToeBot

BOT_CLASSES: dict[str, type[BaseBot]] = {
    TicTacToeGame.game_type: TicTacToeBot,
    RockPaperScissorsGame.game_type: RockPaperScissorsBot,
}


def has_bot_support(game_type: str) -> bool:
    return (
        is_registered_game_type(game_type)
        and get_game_metadata(game_type).supports_bots
        and game_type in BOT_CLASSES
    )


def get_available_difficulties(game_type: str) -> list[str]:
    """Difficulty names offered for a game type (empty without bot support)."""
    if not has_bot_support(game_type):
        return []
    return [d.value for d in BotDifficulty]


def create_bot(
    game_engine: GameEngine,
    difficulty: BotDifficulty | str = BotDifficulty.MEDIUM,
    bot_user_id: str | None = None,
    rng: random.Random | None = None,
) -> BaseBot:
    """
    Build the bot for the engine's game type.

    Raises BotConfigurationError for game types without a bot.
    """
    game_type = game_engine.game_type
    if not has_bot_support(game_type):
        raise BotConfigurationError(
            f"Bot not implemented for game type: {game_type}",
            game_type=game_type,
        )
    return BOT_CLASSES[game_type](game_engine, difficulty, bot_user_id=bot_user_id, rng=rng)
