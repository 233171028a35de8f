"""Tests for admin credential verification."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import bcrypt
import pytest

from loyalty.core.modules.admin.service import AdminService, check_password, hash_password
from loyalty.core.modules.admin.validators import validate_password, validate_username
from loyalty.errors import ValidationError

# Minimum cost keeps the suite fast
FAST_ROUNDS = 4


@pytest.fixture
def collection():
    return MagicMock()


@pytest.fixture
def service(collection):
    database = MagicMock()
    database.get_collection.return_value = collection
    service = AdminService(database)
    service.set_core(SimpleNamespace(config=SimpleNamespace(bcrypt_rounds=FAST_ROUNDS)))
    return service


class TestPasswordHashing:
    def test_hash_uses_requested_rounds(self):
        password_hash = hash_password("correct horse", rounds=FAST_ROUNDS)

        assert password_hash.startswith("$2b$04$")
        assert check_password("correct horse", password_hash)

    def test_default_cost_factor_is_ten(self):
        assert hash_password("correct horse").startswith("$2b$10$")

    def test_wrong_password(self):
        password_hash = hash_password("correct horse", rounds=FAST_ROUNDS)

        assert not check_password("wrong horse", password_hash)

    def test_malformed_hash_does_not_raise(self):
        assert not check_password("anything", "not-a-bcrypt-hash")


class TestValidators:
    def test_short_password_rejected(self):
        with pytest.raises(ValidationError, match="at least 8"):
            validate_password("short")

    def test_whitespace_rejected(self):
        with pytest.raises(ValidationError, match="whitespace"):
            validate_password("has a space")

    def test_username_trimmed(self):
        assert validate_username("  admin ") == "admin"

    def test_blank_username_rejected(self):
        with pytest.raises(ValidationError):
            validate_username("   ")


class TestVerifyPassword:
    """Tests for AdminService.verify_password."""

    @pytest.mark.asyncio
    async def test_valid_credentials(self, service, collection):
        password_hash = bcrypt.hashpw(b"s3cret-pass", bcrypt.gensalt(rounds=FAST_ROUNDS)).decode()
        collection.find_one = AsyncMock(return_value={"password_hash": password_hash})

        assert await service.verify_password("admin", "s3cret-pass")
        collection.find_one.assert_awaited_once_with({"username": "admin"}, {"password_hash": 1})

    @pytest.mark.asyncio
    async def test_wrong_password(self, service, collection):
        password_hash = bcrypt.hashpw(b"s3cret-pass", bcrypt.gensalt(rounds=FAST_ROUNDS)).decode()
        collection.find_one = AsyncMock(return_value={"password_hash": password_hash})

        assert not await service.verify_password("admin", "guess")

    @pytest.mark.asyncio
    async def test_unknown_user(self, service, collection):
        collection.find_one = AsyncMock(return_value=None)

        assert await service.get_password_hash("nobody") is None
        assert not await service.verify_password("nobody", "whatever")


class TestCreateAdmin:
    """Tests for AdminService.create_admin."""

    @pytest.mark.asyncio
    async def test_creates_hashed_admin(self, service, collection):
        collection.find_one = AsyncMock(return_value=None)
        collection.insert_one = AsyncMock()

        admin = await service.create_admin(" admin ", "s3cret-pass")

        doc = collection.insert_one.call_args.args[0]
        assert admin.username == "admin"
        assert doc["username"] == "admin"
        assert doc["password_hash"] != "s3cret-pass"
        assert check_password("s3cret-pass", doc["password_hash"])

    @pytest.mark.asyncio
    async def test_duplicate_rejected(self, service, collection):
        collection.find_one = AsyncMock(return_value={"password_hash": "x"})
        collection.insert_one = AsyncMock()

        with pytest.raises(ValidationError, match="already exists"):
            await service.create_admin("admin", "s3cret-pass")
        collection.insert_one.assert_not_called()
