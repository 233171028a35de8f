"""Single-shot countdown timer bound to the running asyncio loop."""

import asyncio
from collections.abc import Callable

import structlog

logger = structlog.get_logger(__name__)


class IdleTimer:
    """Schedules one callback after a delay, replacing any earlier schedule.

    Every `arm` bumps a generation number. The scheduled handle only runs the
    callback if its generation is still current, so a `cancel` or re-`arm`
    issued before the callback starts always wins, even when the loop has
    already dequeued the old handle.
    """

    def __init__(self) -> None:
        self._handle: asyncio.TimerHandle | None = None
        self._generation = 0
        self._duration: float | None = None
        self._on_expire: Callable[[], None] | None = None

    @property
    def is_armed(self) -> bool:
        return self._handle is not None

    @property
    def deadline(self) -> float | None:
        """Loop time at which the pending callback fires, or None."""
        if self._handle is None:
            return None
        return self._handle.when()

    @property
    def remaining(self) -> float | None:
        deadline = self.deadline
        if deadline is None:
            return None
        return max(0.0, deadline - asyncio.get_running_loop().time())

    def arm(self, duration: float, on_expire: Callable[[], None]) -> None:
        """Schedule `on_expire` after `duration` seconds, cancelling any previous schedule."""
        if duration < 0:
            raise ValueError("Timer duration cannot be negative")
        self.cancel()
        self._duration = duration
        self._on_expire = on_expire
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(duration, self._fire, self._generation)

    def rearm(self) -> bool:
        """Restart the countdown with the last duration and callback."""
        if self._duration is None or self._on_expire is None:
            return False
        self.arm(self._duration, self._on_expire)
        return True

    def cancel(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, generation: int) -> None:
        if generation != self._generation or self._on_expire is None:
            return
        self._handle = None
        # Consume the generation so the callback runs at most once per arm
        self._generation += 1
        try:
            self._on_expire()
        except Exception:
            logger.exception("timer_callback_failed")
