import re
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from loyalty.core.core import Service
from loyalty.core.modules.customer.models import Customer, CustomerCreate, CustomerSortField
from loyalty.errors import NotFoundError, StoreError

logger = structlog.get_logger(__name__)


class CustomerService(Service):
    """MongoDB-backed customer store."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("customers")

    async def on_start(self) -> None:
        """Create indexes for name search and join date ordering."""
        await self._collection.create_index([("name", 1)])
        await self._collection.create_index([("join_date", -1)])

    async def list_customers(
        self,
        name_filter: str | None = None,
        order_by: CustomerSortField = CustomerSortField.JOIN_DATE,
        descending: bool = True,
    ) -> list[Customer]:
        """List customers, optionally filtered by a case-insensitive name substring."""
        query: dict[str, Any] = {}
        if name_filter and name_filter.strip():
            query["name"] = {"$regex": re.escape(name_filter.strip()), "$options": "i"}

        try:
            cursor = self._collection.find(query).sort(str(order_by), -1 if descending else 1)
            customers = await Customer.list_cursor(cursor)
        except PyMongoError as e:
            raise StoreError(f"Failed to list customers: {e}") from e

        logger.debug("list_customers", name_filter=name_filter, order_by=order_by, returned=len(customers))
        return customers

    async def insert_customer(self, data: CustomerCreate) -> Customer:
        customer = Customer(name=data.name, points=data.points)
        try:
            await self._collection.insert_one(customer.to_mongo())
        except PyMongoError as e:
            raise StoreError(f"Failed to insert customer: {e}") from e
        return customer

    async def update_customer(self, customer_id: UUID, fields: dict[str, Any]) -> None:
        """Write the given fields to an existing customer."""
        try:
            result = await self._collection.update_one({"_id": customer_id}, {"$set": fields})
        except PyMongoError as e:
            raise StoreError(f"Failed to update customer '{customer_id}': {e}") from e
        if result.matched_count == 0:
            raise NotFoundError(f"Customer '{customer_id}' not found")

    async def delete_customer(self, customer_id: UUID) -> None:
        try:
            result = await self._collection.delete_one({"_id": customer_id})
        except PyMongoError as e:
            raise StoreError(f"Failed to delete customer '{customer_id}': {e}") from e
        if result.deleted_count == 0:
            raise NotFoundError(f"Customer '{customer_id}' not found")
