from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog

from loyalty.config import Config
from loyalty.core.core import Core
from loyalty.core.modules.customer.controller import CustomerListController
from loyalty.core.modules.session.guard import SessionGuard
from loyalty.core.modules.session.models import ActivityEvent, Session, SessionState
from loyalty.core.modules.session.storage import MemorySessionStorage, SessionStorage
from loyalty.errors import AuthenticationError, StoreError

logger = structlog.get_logger(__name__)


class App:
    """Facade for the admin console: login, session lifecycle and dashboard controllers.

    One App stands for one browsing context. It owns the session guard and
    hands out a fresh customer list controller per dashboard view.
    """

    def __init__(self, config: Config, storage: SessionStorage | None = None) -> None:
        self._config = config
        self._core = Core(config)
        self._session = SessionGuard(storage or MemorySessionStorage(), config.inactivity_timeout)

    @property
    def session(self) -> SessionGuard:
        return self._session

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan: start the store, resume a reloaded session, tear down on exit."""
        async with self._core.lifespan():
            self._session.restore()
            try:
                yield
            finally:
                self._session.teardown()

    async def login(self, username: str, password: str) -> Session:
        """Verify operator credentials and start a session."""
        try:
            verified = await self._core.services.admin.verify_password(username, password)
        except StoreError as e:
            logger.exception("login_lookup_failed", username=username)
            raise AuthenticationError("An error occurred. Please try again.") from e
        if not verified:
            logger.info("login_rejected", username=username)
            raise AuthenticationError
        logger.info("login_succeeded", username=username)
        return self._session.login()

    def logout(self) -> None:
        self._session.logout()

    def is_authenticated(self) -> bool:
        return self._session.state == SessionState.LOGGED_IN

    def record_activity(self, event: ActivityEvent | str = ActivityEvent.CLICK) -> bool:
        return self._session.record_activity(event)

    def open_dashboard(self) -> CustomerListController:
        """Create the customer list controller for a new dashboard view (logged-in only)."""
        if not self.is_authenticated():
            raise AuthenticationError("Not logged in")
        return CustomerListController(
            self._core.services.customer,
            page_size=self._config.page_size,
            search_debounce=self._config.search_debounce,
        )
