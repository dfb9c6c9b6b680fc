"""
Session Manager - Drives game engines against a store.

Every operation follows the same cycle, under the game's lock:

    load blob -> rehydrate engine -> mutate -> save (blob, status) -> broadcast

Engines are never kept between calls. Bots are driven here: when a bot seat
may move, its decision is fed back through the same validation as a human
move. Timeout moves for a seat that ran out of time also go through here,
which is what TurnTimeoutController's on_timeout callback calls.
"""

from __future__ import annotations
from typing import Any, Awaitable, Callable, Union
import asyncio
import inspect
import logging
import random
import uuid

from ..bots import BotDifficulty, create_bot, has_bot_support
from ..config import Settings
from ..engine_core.engine import GameEngine
from ..engine_core.move import Move
from ..engine_core.state import GameState, Player, serialize_state
from ..errors import (
    BotConfigurationError,
    GameNotFoundError,
    InvalidStateError,
    MoveRejectedError,
)
from ..games.registry import create_game_engine, restore_game_engine
from .store import GameStore, InMemoryGameStore

logger = logging.getLogger(__name__)

Listener = Callable[[GameState], Union[Awaitable[None], None]]


class GameSessionManager:
    """
    Serializes access to each game and runs bots and timeout moves.

    Usage:
        manager = GameSessionManager()
        state = await manager.create_game("tic_tac_toe")
        await manager.add_player(state.game_id, "p1", "Ada")
        await manager.add_bot(state.game_id, "hard")
        await manager.start_game(state.game_id)
        await manager.submit_move(state.game_id, Move.place("p1", 1, 1))
        state = await manager.run_bot_turns(state.game_id)
    """

    def __init__(
        self,
        store: GameStore | None = None,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ):
        self.store = store if store is not None else InMemoryGameStore()
        self.settings = settings or Settings()
        self.rng = rng or random.Random()
        self._locks: dict[str, asyncio.Lock] = {}
        self._listeners: dict[str, list[Listener]] = {}

    # =========================================================================
    # Lobby
    # =========================================================================

    async def create_game(
        self,
        game_type: str,
        game_id: str | None = None,
        **options: Any,
    ) -> GameState:
        """Create and store an empty game. Options go to the variant constructor."""
        game_id = game_id or str(uuid.uuid4())
        engine = create_game_engine(game_type, game_id, **options)
        async with self._lock(game_id):
            if await self.store.load(game_id) is not None:
                raise InvalidStateError(f"Game {game_id} already exists", game_id=game_id)
            state = await self._commit(engine)
        logger.info("Created %s game %s", game_type, game_id)
        return state

    async def get_state(self, game_id: str) -> GameState:
        engine = await self._load(game_id)
        return engine.get_state()

    async def add_player(self, game_id: str, player_id: str, name: str | None = None) -> GameState:
        return await self._add_seat(game_id, Player(id=player_id, name=name or player_id))

    async def add_bot(
        self,
        game_id: str,
        difficulty: BotDifficulty | str = BotDifficulty.MEDIUM,
        name: str | None = None,
    ) -> GameState:
        """Seat a bot. Raises BotConfigurationError for games without bots."""
        try:
            difficulty = BotDifficulty(difficulty)
        except ValueError:
            raise BotConfigurationError(
                f"Unknown bot difficulty: {difficulty!r}", difficulty=str(difficulty)
            ) from None

        state = await self.get_state(game_id)
        if not has_bot_support(state.game_type):
            raise BotConfigurationError(
                f"Bots are not supported for {state.game_type}",
                game_type=state.game_type,
            )

        bot_id = f"bot-{uuid.uuid4().hex[:8]}"
        player = Player(
            id=bot_id,
            name=name or f"{difficulty.value.title()} Bot",
            is_bot=True,
            bot_difficulty=difficulty.value,
        )
        return await self._add_seat(game_id, player)

    async def _add_seat(self, game_id: str, player: Player) -> GameState:
        async with await self._game_lock(game_id):
            engine = await self._load(game_id)
            engine.add_player(player)
            logger.info("Player %s joined game %s", player.id, game_id)
            return await self._commit(engine)

    async def remove_player(self, game_id: str, player_id: str) -> GameState:
        """Remove a seat while the game is waiting."""
        async with await self._game_lock(game_id):
            engine = await self._load(game_id)
            if not engine.remove_player(player_id):
                raise InvalidStateError(
                    f"Player {player_id} is not in game {game_id}",
                    game_id=game_id,
                    player_id=player_id,
                )
            return await self._commit(engine)

    async def start_game(self, game_id: str) -> GameState:
        async with await self._game_lock(game_id):
            engine = await self._load(game_id)
            engine.start_game()
            return await self._commit(engine)

    async def end_game(self, game_id: str) -> bool:
        """Drop a game from the store along with its lock and listeners."""
        try:
            lock = await self._game_lock(game_id)
        except GameNotFoundError:
            return False
        async with lock:
            deleted = await self.store.delete(game_id)
        self._locks.pop(game_id, None)
        self._listeners.pop(game_id, None)
        if deleted:
            logger.info("Ended game %s", game_id)
        return deleted

    # =========================================================================
    # Moves
    # =========================================================================

    async def submit_move(self, game_id: str, move: Move) -> GameState:
        """Apply a move. Raises MoveRejectedError if it is not legal now."""
        async with await self._game_lock(game_id):
            engine = await self._load(game_id)
            if not engine.validate_move(move):
                logger.info("Rejected %s from %s in game %s", move.type, move.player_id, game_id)
                raise MoveRejectedError(game_id, move)
            engine.process_move(move)
            return await self._commit(engine)

    async def run_bot_turns(self, game_id: str) -> GameState:
        """
        Play every bot seat that may currently move.

        Stops when no bot can move, the game ends, or max_bot_moves moves
        were made.
        """
        async with await self._game_lock(game_id):
            engine = await self._load(game_id)
            moves_made = 0

            while moves_made < self.settings.max_bot_moves:
                bot_player = self._next_bot(engine)
                if bot_player is None:
                    break

                bot = create_bot(
                    engine, bot_player.bot_difficulty or BotDifficulty.MEDIUM,
                    bot_user_id=bot_player.id, rng=self.rng,
                )
                await bot.delay(self.settings.bot_thinking_delay)
                decision = await bot.make_decision()
                move = bot.decision_to_move(decision)

                if not engine.validate_move(move):
                    logger.warning(
                        "Bot %s produced an illegal %s in game %s: %s",
                        bot_player.id, move.type, game_id, bot.evaluate_state(),
                    )
                    break
                engine.process_move(move)
                moves_made += 1
                await self._commit(engine)

            if moves_made >= self.settings.max_bot_moves:
                logger.warning("Bot move limit (%d) reached in game %s", moves_made, game_id)
            return engine.get_state()

    @staticmethod
    def _next_bot(engine: GameEngine) -> Player | None:
        active = engine.active_player_ids()
        for player in engine.state.players:
            if player.is_bot and player.id in active:
                return player
        return None

    # =========================================================================
    # Timeouts
    # =========================================================================

    async def submit_timeout_move(self, game_id: str, player_id: str) -> bool:
        """
        Play a default move for a player whose turn timed out.

        Returns True only when a move was applied and stored.
        """
        async with await self._game_lock(game_id):
            engine = await self._load(game_id)
            if player_id not in engine.active_player_ids():
                logger.debug("Timeout for %s in game %s is no longer current", player_id, game_id)
                return False

            move = await self._timeout_move(engine, player_id)
            if move is None or not engine.validate_move(move):
                logger.warning("No legal timeout move for %s in game %s", player_id, game_id)
                return False

            engine.process_move(move)
            await self._commit(engine)
            logger.info("Applied timeout %s for %s in game %s", move.type, player_id, game_id)
            return True

    async def _timeout_move(self, engine: GameEngine, player_id: str) -> Move | None:
        if has_bot_support(engine.game_type):
            bot = create_bot(engine, BotDifficulty.EASY, bot_user_id=player_id, rng=self.rng)
            return bot.decision_to_move(await bot.make_decision())
        return engine.timeout_move(player_id)

    def make_timeout_callback(self, game_id: str, player_id: str) -> Callable[[], Awaitable[bool]]:
        """Zero-argument on_timeout for a TurnTimeoutController."""
        async def on_timeout() -> bool:
            return await self.submit_timeout_move(game_id, player_id)
        return on_timeout

    # =========================================================================
    # Broadcast
    # =========================================================================

    def subscribe(self, game_id: str, listener: Listener) -> Callable[[], None]:
        """Register a state listener. Returns a function that unsubscribes it."""
        self._listeners.setdefault(game_id, []).append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(game_id, [])
            if listener in listeners:
                listeners.remove(listener)
        return unsubscribe

    async def _broadcast(self, state: GameState) -> None:
        listeners = self._listeners.get(state.game_id)
        if not listeners:
            return
        dead = []
        for listener in list(listeners):
            try:
                result = listener(state.clone())
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.warning("Dropping failed listener for game %s", state.game_id, exc_info=True)
                dead.append(listener)
        for listener in dead:
            listeners.remove(listener)

    # =========================================================================
    # Internals
    # =========================================================================

    def _lock(self, game_id: str) -> asyncio.Lock:
        return self._locks.setdefault(game_id, asyncio.Lock())

    async def _game_lock(self, game_id: str) -> asyncio.Lock:
        """Lock for a stored game. Unknown ids raise before a lock is created."""
        lock = self._locks.get(game_id)
        if lock is None:
            if await self.store.load(game_id) is None:
                raise GameNotFoundError(game_id)
            lock = self._lock(game_id)
        return lock

    async def _load(self, game_id: str) -> GameEngine:
        blob = await self.store.load(game_id)
        if blob is None:
            raise GameNotFoundError(game_id)
        return restore_game_engine(blob)

    async def _commit(self, engine: GameEngine) -> GameState:
        state = engine.get_state()
        await self.store.save(state.game_id, serialize_state(state), state.status.value)
        await self._broadcast(state)
        return state
