"""
Debounced search input.

Typed text is committed only after input has been quiet for a fixed delay,
so the store is queried once per burst of keystrokes instead of once per
key. An explicit trigger (enter key, search button) commits right away,
and clearing the box always reloads the unfiltered list.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from loyalty.core.timer import IdleTimer

logger = structlog.get_logger(__name__)


def normalize_query(text: str | None) -> str | None:
    """Trim search text; blank text means no filter."""
    if text is None:
        return None
    text = text.strip()
    return text or None


class SearchDebouncer:
    """
    Commits search text to a load callback once typing pauses.

    A commit only happens when the normalized text differs from the last
    committed value, so a timer expiry and an explicit trigger racing on the
    same text produce a single load.
    """

    def __init__(self, on_commit: Callable[[str | None], Awaitable[Any]], delay: float = 0.4):
        """
        Initialize the debouncer.

        Args:
            on_commit: Async callback receiving the committed query (None for no filter)
            delay: Quiet period in seconds after the last input before committing
        """
        self.delay = delay
        self._on_commit = on_commit
        self._timer = IdleTimer()
        self._raw_input = ""
        self._committed: str | None = None
        self._tasks: set[asyncio.Future[Any]] = set()

    @property
    def raw_input(self) -> str:
        return self._raw_input

    @property
    def committed_query(self) -> str | None:
        return self._committed

    @property
    def pending(self) -> bool:
        """Whether a quiet-period commit is scheduled."""
        return self._timer.is_armed

    def update(self, text: str) -> None:
        """Record new input and restart the quiet period."""
        self._raw_input = text
        self._timer.arm(self.delay, self._on_quiet)

    async def trigger(self) -> bool:
        """Commit the current input immediately, skipping the quiet period.

        Returns:
            True if the input differed from the last commit and was loaded
        """
        self._timer.cancel()
        query = normalize_query(self._raw_input)
        if query == self._committed:
            return False
        await self._commit(query)
        return True

    async def clear(self) -> None:
        """Empty the input and reload the unfiltered list, cancelling any pending commit."""
        self._timer.cancel()
        self._raw_input = ""
        await self._commit(None)

    def cancel(self) -> None:
        self._timer.cancel()

    async def drain(self) -> None:
        """Wait for commits started by the quiet-period timer to finish."""
        while self._tasks:
            await asyncio.gather(*self._tasks)

    def sync_committed(self, query: str | None) -> None:
        """Align the last committed value with what was actually loaded."""
        self._committed = query

    def _on_quiet(self) -> None:
        query = normalize_query(self._raw_input)
        if query == self._committed:
            return
        task = asyncio.ensure_future(self._commit(query))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _commit(self, query: str | None) -> Awaitable[Any]:
        # Recorded before the load starts so a racing trigger sees it
        self._committed = query
        logger.debug("search_committed", query=query)
        return self._on_commit(query)
