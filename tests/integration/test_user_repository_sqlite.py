"""Integration tests for the user repository against SQLite."""

import pytest
from datetime import datetime, timedelta, timezone

from app.core.auth.entities import User
from app.core.auth.exceptions import UserAlreadyExistsException
from app.core.domain.enums import UserType
from app.infrastructure.database.repositories.user_repository import SqlUserRepository

NOW = datetime(2025, 9, 6, 15, 0, 0, tzinfo=timezone.utc)


def new_user(username: str, email: str, user_type: UserType = UserType.END_USER) -> User:
    return User(
        id=None,
        username=username,
        email=email,
        password_hash="$2b$04$hashed_password",
        user_type=user_type,
        created_at=NOW,
        updated_at=NOW,
    )


class TestSqlUserRepositoryIntegration:
    """Round trips through a real database file."""

    @pytest.mark.asyncio
    async def test_create_and_lookup(self, async_test_db):
        repository = SqlUserRepository(async_test_db)

        created = await repository.create_user(new_user("admin", "admin@authmodule.com", UserType.ADMIN))

        assert created.id is not None
        assert (await repository.get_user_by_id(created.id)).username == "admin"
        assert (await repository.get_user_by_username_or_email("admin")).id == created.id
        assert (await repository.get_user_by_username_or_email("admin@authmodule.com")).id == created.id
        assert await repository.get_user_by_username_or_email("Admin") is None
        assert await repository.exists_by_username("admin") is True
        assert await repository.exists_by_email("other@example.com") is False

    @pytest.mark.asyncio
    async def test_timestamps_come_back_as_utc(self, async_test_db):
        repository = SqlUserRepository(async_test_db)
        created = await repository.create_user(new_user("partner", "partner@example.com"))
        async_test_db.expire_all()

        loaded = await repository.get_user_by_id(created.id)

        assert loaded.created_at == NOW
        assert loaded.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_duplicate_username_rejected(self, async_test_db):
        repository = SqlUserRepository(async_test_db)
        await repository.create_user(new_user("admin", "admin@authmodule.com"))
        await async_test_db.commit()

        with pytest.raises(UserAlreadyExistsException):
            await repository.create_user(new_user("admin", "second@example.com"))

    @pytest.mark.asyncio
    async def test_refresh_token_lookup_follows_rotation(self, async_test_db):
        repository = SqlUserRepository(async_test_db)
        created = await repository.create_user(new_user("enduser", "end@example.com"))

        later = NOW + timedelta(minutes=5)
        await repository.update_user(created.with_refresh_token("first", later + timedelta(days=30), later))
        assert (await repository.get_user_by_refresh_token("first")).id == created.id

        latest = later + timedelta(minutes=5)
        stored = await repository.update_user(
            created.with_refresh_token("second", latest + timedelta(days=7), latest)
        )

        assert stored.refresh_token_expiry == latest + timedelta(days=7)
        assert await repository.get_user_by_refresh_token("first") is None
        assert (await repository.get_user_by_refresh_token("second")).id == created.id

    @pytest.mark.asyncio
    async def test_list_users_ordered_by_id(self, async_test_db):
        repository = SqlUserRepository(async_test_db)
        await repository.create_user(new_user("first", "first@example.com"))
        await repository.create_user(new_user("second", "second@example.com"))

        users = await repository.list_users()

        assert [user.username for user in users] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_email_match_wins_over_username_match(self, async_test_db):
        repository = SqlUserRepository(async_test_db)
        alice = await repository.create_user(new_user("alice", "alice@example.com"))
        mallory = await repository.create_user(new_user("alice@example.com", "mallory@example.com"))

        found = await repository.get_user_by_username_or_email("alice@example.com")

        assert found.id == alice.id
        assert (await repository.get_user_by_username_or_email("mallory@example.com")).id == mallory.id
