from collections.abc import Awaitable, Callable
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


class FetchGuard:
    """Single-flight gate: at most one operation outstanding, later callers are dropped.

    This is not a queue. A dropped caller should treat the in-flight run as
    the one that will refresh its view, and re-trigger after it finishes if
    it needs newer state.
    """

    def __init__(self, name: str = "fetch") -> None:
        self._name = name
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def run(self, operation: Callable[[], Awaitable[Any]]) -> bool:
        """Run `operation` unless another run is outstanding.

        Returns True if the operation was started, False if it was dropped.
        Exceptions from the operation propagate after the flag is cleared.
        """
        if self._in_flight:
            logger.debug("fetch_dropped", guard=self._name)
            return False

        self._in_flight = True
        try:
            await operation()
        finally:
            self._in_flight = False
        return True
