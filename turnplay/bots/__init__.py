"""
Bots module - Computer opponents.

Provides:
- BaseBot: make_decision / decision_to_move interface
- BotDifficulty, BotConfig: difficulty levels and pacing
- TicTacToeBot, RockPaperScissorsBot: per-variant strategies
- create_bot: factory keyed by game type
"""

from .policy import BaseBot, BotDecision, BotConfig, BotDifficulty, DEFAULT_BOT_CONFIGS
from .rps_bot import RockPaperScissorsBot, predict_choice
from .tic_tac_toe_bot import TicTacToeBot
from .factory import create_bot, has_bot_support, get_available_difficulties

__all__ = [
    "BaseBot",
    "BotDecision",
    "BotConfig",
    "BotDifficulty",
    "DEFAULT_BOT_CONFIGS",
    "RockPaperScissorsBot",
    "predict_choice",
    "TicTacToeBot",
    "create_bot",
    "has_bot_support",
    "get_available_difficulties",
]
