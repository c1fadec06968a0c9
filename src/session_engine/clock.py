"""Session clock: a single repeating one-second timer.

Built on an event loop's ``call_later`` (asyncio semantics: it returns a
handle exposing ``cancel()``). Everything runs on the loop's thread;
there is no parallelism.

A callback may already be queued when ``cancel()`` runs, so cancelling a
handle alone is not enough. Each arm gets a generation number and every
scheduled callback carries the generation it was armed with; callbacks
from an older generation are dropped on arrival.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

from session_engine.models.enums import TICK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TimerLoop(Protocol):
    """The slice of ``asyncio.AbstractEventLoop`` the clock needs."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


class SessionClock:
    """Owns at most one scheduled tick at a time.

    Usage:
        clock = SessionClock(asyncio.get_running_loop())
        clock.arm(controller.tick)
        ...
        clock.cancel()
    """

    def __init__(self, loop: TimerLoop, interval: float = TICK_INTERVAL_SECONDS) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._loop = loop
        self.interval = interval
        self._handle: TimerHandle | None = None
        self._callback: Callable[[], None] | None = None
        self._generation = 0

    @property
    def is_running(self) -> bool:
        return self._handle is not None

    def arm(self, callback: Callable[[], None]) -> None:
        """Start ticking *callback* every interval, replacing any previous stream."""
        self.cancel()
        self._callback = callback
        self._schedule()

    def cancel(self) -> None:
        """Stop ticking. Synchronous and safe to call repeatedly."""
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._callback = None

    def _schedule(self) -> None:
        self._handle = self._loop.call_later(self.interval, self._fire, self._generation)

    def _fire(self, generation: int) -> None:
        if generation != self._generation or self._callback is None:
            logger.debug(
                "Discarding stale tick (generation %d, current %d)",
                generation,
                self._generation,
            )
            return

        callback = self._callback
        # Next tick is scheduled first; a callback that stops the clock
        # cancels it through the normal path.
        self._schedule()
        callback()
