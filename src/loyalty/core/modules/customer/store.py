from typing import Any, Protocol
from uuid import UUID

from loyalty.core.modules.customer.models import Customer, CustomerCreate, CustomerSortField


class CustomerStore(Protocol):
    """Authoritative customer storage consumed by the list controller.

    Implementations raise StoreError on backend failures and NotFoundError
    when an update or delete targets an unknown id.
    """

    async def list_customers(
        self,
        name_filter: str | None = None,
        order_by: CustomerSortField = CustomerSortField.JOIN_DATE,
        descending: bool = True,
    ) -> list[Customer]: ...

    async def insert_customer(self, data: CustomerCreate) -> Customer: ...

    async def update_customer(self, customer_id: UUID, fields: dict[str, Any]) -> None: ...

    async def delete_customer(self, customer_id: UUID) -> None: ...
