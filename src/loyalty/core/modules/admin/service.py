import asyncio
from typing import Any

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from loyalty.core.core import Service
from loyalty.core.modules.admin.models import Admin
from loyalty.core.modules.admin.validators import validate_password, validate_username
from loyalty.errors import StoreError, ValidationError

logger = structlog.get_logger(__name__)


def hash_password(password: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    """Compare a plaintext password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in the store
        return False


class AdminService(Service):
    """Looks up operator accounts and verifies their credentials."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("admins")

    async def on_start(self) -> None:
        await self._collection.create_index([("username", 1)], unique=True)

    async def get_password_hash(self, username: str) -> str | None:
        """Stored password hash for `username`, or None if there is no such admin."""
        try:
            doc = await self._collection.find_one({"username": username}, {"password_hash": 1})
        except PyMongoError as e:
            raise StoreError(f"Failed to look up admin '{username}': {e}") from e
        if doc is None:
            return None
        return str(doc["password_hash"])

    async def verify_password(self, username: str, password: str) -> bool:
        """Check credentials; bcrypt runs off the event loop since it is deliberately slow."""
        password_hash = await self.get_password_hash(username)
        if password_hash is None:
            return False
        return await asyncio.to_thread(check_password, password, password_hash)

    async def create_admin(self, username: str, password: str) -> Admin:
        """Create an operator account with a hashed password."""
        username = validate_username(username)
        if await self.get_password_hash(username) is not None:
            raise ValidationError(f"Admin '{username}' already exists")

        validate_password(password)
        rounds = self.core.config.bcrypt_rounds
        password_hash = await asyncio.to_thread(hash_password, password, rounds)
        admin = Admin(username=username, password_hash=password_hash)
        try:
            await self._collection.insert_one(admin.to_mongo())
        except PyMongoError as e:
            raise StoreError(f"Failed to create admin '{username}': {e}") from e
        logger.info("admin_created", username=username)
        return admin
