"""
Turn Timer - Watchdog that submits a move when a turn runs out of time.

The controller is fed the latest game state through update(). While it is
the local player's turn it counts down; when the budget elapses it calls
the caller-supplied on_timeout coroutine, which returns True only when the
timeout move was applied.

Guards:
- Single flight: never more than one on_timeout call per turn at a time
- Debounce: after a failed call the next one waits until the debounce
  window, measured from when that call resolved, has passed
- Settled: after a successful call nothing more happens for that turn
- Stale results: a call that resolves after the turn changed is ignored

A turn is identified by its token (game id, active seat, last move time).
The controller cannot abort a running on_timeout call; when the token
changes the old call's result is simply discarded.

Usage:
    timer = TurnTimeoutController(on_timeout=submit, turn_timer_limit=60)
    timer.update(is_my_turn=True, game_state=state)
    ...
    await timer.aclose()
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping, Union
import asyncio
import inspect
import logging
import time

from ..config import DEFAULT_TIMEOUT_DEBOUNCE_MS
from ..engine_core.state import GameState, GameStatus

logger = logging.getLogger(__name__)

TurnToken = tuple[Any, int, Union[float, None]]
TimeoutCallback = Callable[[], Union[Awaitable[bool], bool]]


class TimerPhase(str, Enum):
    IDLE = "idle"
    COUNTING = "counting"
    IN_FLIGHT = "in_flight"
    COOLDOWN = "cooldown"
    SETTLED = "settled"


def _read(game_state: GameState | Mapping[str, Any], key: str) -> Any:
    if isinstance(game_state, GameState):
        value = getattr(game_state, key)
    else:
        value = game_state.get(key)
    return value.value if isinstance(value, GameStatus) else value


class TurnTimeoutController:
    """Per-seat turn watchdog running on the current asyncio loop."""

    def __init__(
        self,
        on_timeout: TimeoutCallback,
        turn_timer_limit: float,
        *,
        debounce: float = DEFAULT_TIMEOUT_DEBOUNCE_MS / 1000,
        clock: Callable[[], float] = time.time,
    ):
        self.on_timeout = on_timeout
        self.turn_timer_limit = turn_timer_limit
        self.debounce = debounce
        self.clock = clock

        self._token: TurnToken | None = None
        self._generation = 0
        self._active = False
        self._closed = False

        self._deadline: float | None = None
        self._last_failure_at: float | None = None
        self._in_flight = False
        self._settled = False

        self._countdown: asyncio.TimerHandle | None = None
        self._retry: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()

    # =========================================================================
    # Public interface
    # =========================================================================

    def update(
        self,
        *,
        is_my_turn: bool,
        game_state: GameState | Mapping[str, Any] | None,
        turn_timer_limit: float | None = None,
    ) -> None:
        """Feed the latest known state. Must be called from the event loop."""
        if self._closed:
            return
        if turn_timer_limit is not None and turn_timer_limit != self.turn_timer_limit:
            self.turn_timer_limit = turn_timer_limit
            self._token = None

        if game_state is None:
            self._deactivate()
            return

        last_move_at = _read(game_state, "last_move_at")
        token: TurnToken = (
            _read(game_state, "game_id"),
            _read(game_state, "current_player_index"),
            last_move_at,
        )
        if token != self._token:
            self._reset_for(token, last_move_at)

        playing = _read(game_state, "status") == GameStatus.PLAYING.value
        if not (is_my_turn and playing):
            self._deactivate()
            return

        self._active = True
        if not (self._in_flight or self._settled or self._retry or self._countdown):
            self._schedule_countdown()

    @property
    def phase(self) -> TimerPhase:
        if self._in_flight:
            return TimerPhase.IN_FLIGHT
        if self._settled:
            return TimerPhase.SETTLED
        if not self._active:
            return TimerPhase.IDLE
        if self._retry is not None:
            return TimerPhase.COOLDOWN
        return TimerPhase.COUNTING

    @property
    def time_left(self) -> float:
        """Seconds left in the current turn's budget."""
        if self._deadline is None:
            return float(self.turn_timer_limit)
        return max(0.0, self._deadline - self.clock())

    @property
    def token(self) -> TurnToken | None:
        return self._token

    def close(self) -> None:
        """Cancel every timer and pending attempt."""
        self._closed = True
        self._active = False
        self._generation += 1
        self._cancel_handles()
        for task in list(self._tasks):
            task.cancel()
        self._in_flight = False

    async def aclose(self) -> None:
        """close() and wait for cancelled attempts to unwind."""
        tasks = list(self._tasks)
        self.close()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # =========================================================================
    # Internals
    # =========================================================================

    def _reset_for(self, token: TurnToken, last_move_at: float | None) -> None:
        self._token = token
        self._generation += 1
        self._cancel_handles()
        self._in_flight = False
        self._settled = False
        self._last_failure_at = None
        start = last_move_at if isinstance(last_move_at, (int, float)) else self.clock()
        self._deadline = start + self.turn_timer_limit
        logger.debug("Turn changed to %s, %.1fs left", token, self.time_left)

    def _deactivate(self) -> None:
        self._active = False
        self._cancel_handles()

    def _cancel_handles(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None
        if self._retry is not None:
            self._retry.cancel()
            self._retry = None

    def _schedule_countdown(self) -> None:
        loop = asyncio.get_running_loop()
        self._countdown = loop.call_later(self.time_left, self._on_countdown)

    def _on_countdown(self) -> None:
        self._countdown = None
        self._try_fire()

    def _on_retry(self) -> None:
        self._retry = None
        self._try_fire()

    def _try_fire(self) -> None:
        if self._closed or not self._active or self._in_flight or self._settled:
            return

        remaining = self.time_left
        if remaining > 0:
            # Woke up early relative to the wall clock
            self._countdown = asyncio.get_running_loop().call_later(remaining, self._on_countdown)
            return

        now = self.clock()
        if self._last_failure_at is not None:
            wait = self.debounce - (now - self._last_failure_at)
            if wait > 0:
                self._schedule_retry(wait)
                return

        logger.warning("Turn timer expired for %s, submitting timeout move", self._token)
        self._in_flight = True
        task = asyncio.get_running_loop().create_task(self._attempt(self._generation, self._token))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _schedule_retry(self, delay: float) -> None:
        if self._retry is not None:
            self._retry.cancel()
        self._retry = asyncio.get_running_loop().call_later(max(0.0, delay), self._on_retry)

    async def _attempt(self, generation: int, token: TurnToken | None) -> None:
        try:
            result = self.on_timeout()
            if inspect.isawaitable(result):
                result = await result
            handled = result is True
        except Exception:
            logger.warning("Timeout handler failed for %s, will retry", token, exc_info=True)
            handled = False

        if generation != self._generation:
            logger.debug("Dropping stale timeout result for %s", token)
            return

        self._in_flight = False
        if handled:
            self._settled = True
            logger.info("Timeout move applied for %s", token)
            return

        self._last_failure_at = self.clock()
        logger.info(
            "Timeout move not applied for %s, retrying in %.2fs", token, self.debounce
        )
        if self._active:
            self._schedule_retry(self.debounce)
