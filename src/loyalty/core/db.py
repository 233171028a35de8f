from collections.abc import AsyncIterable, Mapping
from typing import Any, Self
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class MongoModel(BaseModel):
    """A record stored as one MongoDB document.

    Records get a client-side UUID so a created customer or admin can be
    returned before the insert round-trips. In Python the key is `id`; in
    the document it is `_id` (the client is opened with the standard UUID
    representation, so it stays a UUID in BSON).
    """

    id: UUID = Field(alias="_id", serialization_alias="id", default_factory=uuid4)

    model_config = ConfigDict(populate_by_name=True)

    def to_mongo(self) -> dict[str, Any]:
        """Document ready for insert_one."""
        document = self.model_dump()
        document["_id"] = document.pop("id")
        return document

    @classmethod
    def from_mongo(cls, document: Mapping[str, Any]) -> Self:
        return cls.model_validate(document)

    @classmethod
    async def list_cursor(cls, cursor: AsyncIterable[Mapping[str, Any]]) -> list[Self]:
        """Drain a find() cursor into records."""
        return [cls.from_mongo(document) async for document in cursor]
