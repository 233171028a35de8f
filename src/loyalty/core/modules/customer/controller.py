from collections.abc import Awaitable, Callable
from typing import Any
from uuid import UUID

import pydantic
import structlog

from loyalty.core.fetch_guard import FetchGuard
from loyalty.core.modules.customer.models import Customer, CustomerCreate, CustomerPatch, CustomerSortField
from loyalty.core.modules.customer.store import CustomerStore
from loyalty.core.modules.customer.validators import validate_new_customer, validate_patch, validate_points_adjustment
from loyalty.core.pagination import Page, clamp_page, count_pages, paginate
from loyalty.core.search import SearchDebouncer, normalize_query
from loyalty.errors import NotFoundError, UserError

logger = structlog.get_logger(__name__)

LOAD_FAILED = "Failed to load customers. Please refresh the page."
ADD_FAILED = "Failed to add customer. Please try again."
UPDATE_FAILED = "Failed to update customer. Please try again."
DELETE_FAILED = "Failed to delete customer. Please try again."
POINTS_FAILED = "Failed to update points. Please try again."
INVALID_INPUT = "Please check the entered values"


class CustomerListController:
    """Keeps one dashboard's customer list in sync with the store.

    Loads are single-flight, search input is debounced, and pagination is a
    local slice of the last loaded list. Every public coroutine resolves to
    a result or records an error message in `error`; none of them raise.
    """

    def __init__(
        self,
        store: CustomerStore,
        page_size: int = 10,
        search_debounce: float = 0.4,
        order_by: CustomerSortField = CustomerSortField.JOIN_DATE,
        descending: bool = True,
    ) -> None:
        if page_size < 1:
            raise ValueError("Page size must be at least 1")
        self._store = store
        self._page_size = page_size
        self._order_by = order_by
        self._descending = descending
        self._fetch_guard = FetchGuard("customers")
        self._search = SearchDebouncer(self.load, delay=search_debounce)
        self._customers: list[Customer] = []
        self._committed_query: str | None = None
        self._page = 1
        self._error: str | None = None
        self._resync_pending = False

    # Read-only view state

    @property
    def customers(self) -> list[Customer]:
        """All customers from the last successful load."""
        return list(self._customers)

    @property
    def current_page(self) -> Page[Customer]:
        return paginate(self._customers, self._page, self._page_size)

    @property
    def total(self) -> int:
        return len(self._customers)

    @property
    def page(self) -> int:
        return self._page

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def total_pages(self) -> int:
        return count_pages(len(self._customers), self._page_size)

    @property
    def loading(self) -> bool:
        return self._fetch_guard.in_flight

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def committed_query(self) -> str | None:
        """Filter applied to the currently shown list, None when unfiltered."""
        return self._committed_query

    @property
    def raw_query(self) -> str:
        return self._search.raw_input

    def clear_error(self) -> None:
        self._error = None

    def get_customer(self, customer_id: UUID) -> Customer:
        """Find a customer in the loaded list."""
        customer = next((c for c in self._customers if c.id == customer_id), None)
        if customer is None:
            raise NotFoundError(f"Customer '{customer_id}' not found")
        return customer

    # Loading and search

    async def load(self, query: str | None = None) -> bool:
        """Fetch the list, filtered by name when `query` is given.

        Returns False if the load was dropped because another one is in
        flight, or if it failed; a failed load keeps the previous list.
        """
        query = normalize_query(query)

        async def fetch() -> None:
            customers = await self._store.list_customers(query, self._order_by, self._descending)
            self._customers = customers
            self._committed_query = query
            self._page = 1
            self._error = None

        try:
            started = await self._fetch_guard.run(fetch)
        except Exception:
            logger.exception("customer_load_failed", query=query)
            self._error = LOAD_FAILED
            started = False
        finally:
            # A dropped or failed commit must not block re-submitting the same text
            if not self._fetch_guard.in_flight:
                self._search.sync_committed(self._committed_query)

        if started:
            logger.debug("customers_loaded", query=query, total=len(self._customers))
        if self._resync_pending and not self._fetch_guard.in_flight:
            # A mutation landed while this load was reading
            self._resync_pending = False
            logger.debug("customers_resync", query=self._committed_query)
            await self.reload()
        return started

    async def reload(self) -> bool:
        """Reload with the currently committed query."""
        return await self.load(self._committed_query)

    def type_query(self, text: str) -> None:
        """Record search box input; the load happens once typing pauses."""
        self._search.update(text)

    async def search(self) -> bool:
        """Explicit search (enter key or button)."""
        return await self._search.trigger()

    async def clear_search(self) -> None:
        """Empty the search box and show all customers."""
        await self._search.clear()

    async def close(self) -> None:
        """Cancel pending search input and wait for started loads."""
        self._search.cancel()
        await self._search.drain()

    # Pagination

    def set_page(self, page: int) -> int:
        """Move to `page`, clamped to the valid range; returns the page shown."""
        self._page = clamp_page(page, len(self._customers), self._page_size)
        return self._page

    def next_page(self) -> int:
        return self.set_page(self._page + 1)

    def previous_page(self) -> int:
        return self.set_page(self._page - 1)

    # Mutations

    async def add(self, data: CustomerCreate | dict[str, Any]) -> Customer | None:
        """Create a customer and resynchronize the list; returns the new record or None."""
        try:
            payload = validate_new_customer(CustomerCreate.model_validate(data))
        except (UserError, pydantic.ValidationError) as e:
            self._reject("add", e)
            return None

        created: list[Customer] = []

        async def insert() -> None:
            created.append(await self._store.insert_customer(payload))

        if not await self._mutate("add", insert, ADD_FAILED):
            return None
        return created[0]

    async def update(self, customer_id: UUID, patch: CustomerPatch | dict[str, Any]) -> bool:
        try:
            changes = validate_patch(CustomerPatch.model_validate(patch))
        except (UserError, pydantic.ValidationError) as e:
            self._reject("update", e)
            return False

        return await self._mutate(
            "update", lambda: self._store.update_customer(customer_id, changes.to_update()), UPDATE_FAILED
        )

    async def remove(self, customer_id: UUID) -> bool:
        return await self._mutate("remove", lambda: self._store.delete_customer(customer_id), DELETE_FAILED)

    async def adjust_points(self, customer_id: UUID, delta: int) -> bool:
        """Add (positive delta) or redeem (negative delta) points.

        The balance check runs against the loaded list before the store is
        contacted; redeeming more than the balance is rejected.
        """
        try:
            customer = self.get_customer(customer_id)
            balance = validate_points_adjustment(customer.points, delta)
        except UserError as e:
            self._reject("adjust_points", e)
            return False

        return await self._mutate(
            "adjust_points", lambda: self._store.update_customer(customer_id, {"points": balance}), POINTS_FAILED
        )

    async def _mutate(self, action: str, operation: Callable[[], Awaitable[Any]], failure_message: str) -> bool:
        """Send a mutation to the store, then reload with the committed query on success."""
        self._error = None
        try:
            await operation()
        except UserError as e:
            logger.warning("customer_mutation_rejected", action=action, error=str(e))
            self._error = str(e)
            return False
        except Exception:
            logger.exception("customer_mutation_failed", action=action)
            self._error = failure_message
            return False

        logger.info("customer_mutated", action=action)
        if not await self.reload() and self._fetch_guard.in_flight:
            self._resync_pending = True
        return True

    def _reject(self, action: str, error: Exception) -> None:
        message = str(error) if isinstance(error, UserError) else INVALID_INPUT
        logger.debug("customer_input_invalid", action=action, error=message)
        self._error = message
