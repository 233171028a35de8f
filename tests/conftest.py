"""Shared pytest fixtures."""

import asyncio
from datetime import date, timedelta
from typing import Any
from uuid import UUID

import pytest

from loyalty.core.modules.customer.controller import CustomerListController
from loyalty.core.modules.customer.models import Customer, CustomerCreate, CustomerSortField
from loyalty.core.modules.session.guard import SessionGuard
from loyalty.core.modules.session.storage import MemorySessionStorage
from loyalty.errors import NotFoundError, StoreError


class FakeCustomerStore:
    """In-memory customer store that records calls and can fail or block on demand."""

    def __init__(self, customers: list[Customer] | None = None) -> None:
        self.customers: dict[UUID, Customer] = {c.id: c for c in customers or []}
        self.calls: list[tuple[str, Any]] = []
        self.fail_next: set[str] = set()
        self.gate: asyncio.Event | None = None

    def _check(self, operation: str) -> None:
        if operation in self.fail_next:
            self.fail_next.discard(operation)
            raise StoreError(f"{operation} failed")

    async def list_customers(
        self,
        name_filter: str | None = None,
        order_by: CustomerSortField = CustomerSortField.JOIN_DATE,
        descending: bool = True,
    ) -> list[Customer]:
        self.calls.append(("list", name_filter))
        # Snapshot taken when the query starts, like a real read
        items = list(self.customers.values())
        if self.gate is not None:
            await self.gate.wait()
        self._check("list")
        if name_filter:
            items = [c for c in items if name_filter.lower() in c.name.lower()]
        return sorted(items, key=lambda c: getattr(c, str(order_by)), reverse=descending)

    async def insert_customer(self, data: CustomerCreate) -> Customer:
        self.calls.append(("insert", data))
        self._check("insert")
        customer = Customer(name=data.name, points=data.points)
        self.customers[customer.id] = customer
        return customer

    async def update_customer(self, customer_id: UUID, fields: dict[str, Any]) -> None:
        self.calls.append(("update", (customer_id, fields)))
        self._check("update")
        if customer_id not in self.customers:
            raise NotFoundError(f"Customer '{customer_id}' not found")
        self.customers[customer_id] = self.customers[customer_id].model_copy(update=fields)

    async def delete_customer(self, customer_id: UUID) -> None:
        self.calls.append(("delete", customer_id))
        self._check("delete")
        if customer_id not in self.customers:
            raise NotFoundError(f"Customer '{customer_id}' not found")
        del self.customers[customer_id]

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


def make_customers(names: list[str], points: int = 100) -> list[Customer]:
    """Customers joined on consecutive days, first name oldest."""
    start = date(2024, 1, 1)
    return [Customer(name=name, points=points, join_date=start + timedelta(days=i)) for i, name in enumerate(names)]


@pytest.fixture
def store():
    return FakeCustomerStore()


@pytest.fixture
def controller(store):
    """Controller with a short debounce delay for timing tests."""
    return CustomerListController(store, page_size=10, search_debounce=0.05)


@pytest.fixture
def storage():
    return MemorySessionStorage()


@pytest.fixture
def guard(storage):
    """Session guard with a short inactivity window."""
    return SessionGuard(storage, inactivity_timeout=0.1)


@pytest.fixture
def customer_factory():
    return make_customers
