"""
Configuration - Settings read from the environment.

Environment variables:
    TURNPLAY_ENV                    development | production
    TURNPLAY_LOG_LEVEL              DEBUG, INFO, ...
    TURNPLAY_LOG_FILE               optional JSON-lines log file
    TURNPLAY_TURN_TIMER_LIMIT       seconds per turn (default 60)
    TURNPLAY_TIMEOUT_DEBOUNCE_MS    retry window after a failed timeout (default 1500)
    TURNPLAY_BOT_THINKING_DELAY_MS  pause before each bot move (default 0)
    TURNPLAY_MAX_BOT_MOVES          safety limit per bot-turn run (default 20)
    ALLOWED_ORIGINS                 comma separated CORS origins
"""

from __future__ import annotations
from dataclasses import dataclass, field
import os


DEFAULT_TURN_TIMER_LIMIT = 60.0
DEFAULT_TIMEOUT_DEBOUNCE_MS = 1500


@dataclass
class Settings:
    env: str = "development"
    log_level: str = "INFO"
    log_file: str | None = None

    turn_timer_limit: float = DEFAULT_TURN_TIMER_LIMIT
    timeout_debounce_ms: int = DEFAULT_TIMEOUT_DEBOUNCE_MS

    bot_thinking_delay_ms: int = 0
    max_bot_moves: int = 20

    allowed_origins: list[str] = field(default_factory=lambda: ["*"])

    @property
    def timeout_debounce(self) -> float:
        """Debounce window in seconds."""
        return self.timeout_debounce_ms / 1000

    @property
    def bot_thinking_delay(self) -> float:
        return self.bot_thinking_delay_ms / 1000

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from environment variables."""
        return cls(
            env=os.getenv("TURNPLAY_ENV", "development"),
            log_level=os.getenv("TURNPLAY_LOG_LEVEL", "INFO").upper(),
            log_file=os.getenv("TURNPLAY_LOG_FILE") or None,
            turn_timer_limit=float(
                os.getenv("TURNPLAY_TURN_TIMER_LIMIT", DEFAULT_TURN_TIMER_LIMIT)
            ),
            timeout_debounce_ms=int(
                os.getenv("TURNPLAY_TIMEOUT_DEBOUNCE_MS", DEFAULT_TIMEOUT_DEBOUNCE_MS)
            ),
            bot_thinking_delay_ms=int(os.getenv("TURNPLAY_BOT_THINKING_DELAY_MS", 0)),
            max_bot_moves=int(os.getenv("TURNPLAY_MAX_BOT_MOVES", 20)),
            allowed_origins=os.getenv("ALLOWED_ORIGINS", "*").split(","),
        )
