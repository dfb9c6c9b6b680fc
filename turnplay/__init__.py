"""
Turnplay - Turn-based multiplayer game engine

A server-authoritative engine for small turn-based games with bot opponents.
The engine consumes a serialized state and a move and produces a new state:
- Game state machines (tic-tac-toe, rock paper scissors, guess the spy)
- Bot opponents with easy/medium/hard strategies
- A turn timeout watchdog with single-flight, debounced retries
"""

__version__ = "0.1.0"
