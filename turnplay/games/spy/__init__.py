"""
Spy - Hidden-role deduction game.

One seat is the spy and does not know the secret location; everyone else
must find them through questions and a vote.
"""

from .game import SpyGame, SpyPhase, tally_votes, SPY_ROLE
from .locations import SpyLocation, LOCATIONS, CATEGORIES, get_location

__all__ = [
    "SpyGame",
    "SpyPhase",
    "tally_votes",
    "SPY_ROLE",
    "SpyLocation",
    "LOCATIONS",
    "CATEGORIES",
    "get_location",
]
