from datetime import date
from enum import StrEnum

from pydantic import BaseModel, Field, field_serializer

from loyalty.core.db import MongoModel
from loyalty.utils import today


class CustomerSortField(StrEnum):
    """Fields the customer list can be ordered by."""

    JOIN_DATE = "join_date"
    NAME = "name"
    POINTS = "points"


class Customer(MongoModel):
    """Loyalty program member.

    Indexed on name (for substring search) and join_date (default ordering).
    """

    name: str
    points: int = Field(default=0, ge=0)
    join_date: date = Field(default_factory=today)

    @field_serializer("join_date")
    def _serialize_join_date(self, value: date) -> str:
        # BSON has no date-only type; stored as YYYY-MM-DD
        return value.isoformat()


class CustomerCreate(BaseModel):
    """Fields submitted when adding a customer."""

    name: str
    points: int = 0


class CustomerPatch(BaseModel):
    """Partial update; only fields that are set get written."""

    name: str | None = None
    points: int | None = None

    def to_update(self) -> dict[str, str | int]:
        return self.model_dump(exclude_none=True)
