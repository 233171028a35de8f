from collections.abc import Callable

import pydantic
import structlog

from loyalty.core.modules.session.models import SESSION_KEY, ActivityEvent, Session, SessionState
from loyalty.core.modules.session.storage import SessionStorage
from loyalty.core.timer import IdleTimer

logger = structlog.get_logger(__name__)

StateListener = Callable[[SessionState], None]


class SessionGuard:
    """Owns the operator session of one browsing context.

    The session marker lives in per-tab storage so a reload can resume it,
    while `teardown` (page unload) removes it so a closed tab leaves nothing
    behind. An idle timer logs the operator out after the inactivity window.
    """

    def __init__(self, storage: SessionStorage, inactivity_timeout: float = 60 * 60) -> None:
        self._storage = storage
        self._inactivity_timeout = inactivity_timeout
        self._timer = IdleTimer()
        self._state = SessionState.LOGGED_OUT
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session_expired(self) -> bool:
        """Whether the last logout was forced by inactivity."""
        return self._state == SessionState.EXPIRED

    @property
    def inactivity_timeout(self) -> float:
        return self._inactivity_timeout

    @property
    def session(self) -> Session | None:
        """Stored session, or None if absent or unreadable."""
        raw = self._storage.get(SESSION_KEY)
        if raw is None:
            return None
        try:
            return Session.model_validate_json(raw)
        except pydantic.ValidationError:
            logger.warning("session_marker_unreadable")
            return None

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state change listener; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def is_active(self) -> bool:
        return self._storage.get(SESSION_KEY) is not None

    def login(self) -> Session:
        """Start a fresh session and arm the inactivity timer."""
        session = Session()
        self._storage.set(SESSION_KEY, session.model_dump_json())
        self._timer.arm(self._inactivity_timeout, self._expire)
        self._set_state(SessionState.LOGGED_IN)
        logger.info("session_started", created_at=session.created_at)
        return session

    def restore(self) -> SessionState:
        """Resume a session left in storage by a reload of the same tab."""
        if self._state != SessionState.LOGGED_IN and self.is_active():
            self._timer.arm(self._inactivity_timeout, self._expire)
            self._set_state(SessionState.LOGGED_IN)
            logger.info("session_restored")
        return self._state

    def record_activity(self, event: ActivityEvent | str = ActivityEvent.CLICK) -> bool:
        """Restart the inactivity window on a user interaction.

        Returns False when the event is ignored (not logged in, or not an
        activity signal).
        """
        if self._state != SessionState.LOGGED_IN:
            return False
        if event not in ActivityEvent:
            return False
        self._timer.rearm()
        return True

    def logout(self) -> None:
        self._end()
        self._set_state(SessionState.LOGGED_OUT)
        logger.info("session_logged_out")

    def teardown(self) -> None:
        """Page unload: drop the stored session so the tab cannot be resumed."""
        self._end()
        if self._state == SessionState.LOGGED_IN:
            self._set_state(SessionState.LOGGED_OUT)
        logger.debug("session_torn_down")

    def _expire(self) -> None:
        if self._state != SessionState.LOGGED_IN:
            return
        self._end()
        self._set_state(SessionState.EXPIRED)
        logger.info("session_expired", inactivity_timeout=self._inactivity_timeout)

    def _end(self) -> None:
        self._timer.cancel()
        self._storage.remove(SESSION_KEY)

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("session_listener_failed", state=state)
