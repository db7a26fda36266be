"""Integration tests for ProfileStoreSQLAlchemy with SQLite."""

from uuid import uuid4

import pytest

from veris_identity.domain.profile import Profile
from veris_identity.exceptions import ConflictError
from veris_identity.infrastructure.persistence.sqlalchemy import ProfileStoreSQLAlchemy


@pytest.fixture
def profile_store(db_session):
    """Create ProfileStore instance with the test session."""
    return ProfileStoreSQLAlchemy(db_session)


def _profile(auth_id: str = "auth-1", **fields) -> Profile:
    return Profile.create(id=str(uuid4()), auth_id=auth_id, **fields)


@pytest.mark.integration
class TestProfileStoreSQLAlchemy:
    """Integration tests for ProfileStoreSQLAlchemy."""

    @pytest.mark.asyncio
    async def test_create_and_find(self, profile_store):
        profile = _profile(name="Ada", lastname="Lovelace", age=36)

        await profile_store.create(profile)

        by_auth = await profile_store.find_by_auth_id("auth-1")
        by_id = await profile_store.find_by_id(profile.id)
        assert by_auth.id == profile.id
        assert by_id.name == "Ada"
        assert by_id.lastname == "Lovelace"
        assert by_id.age == 36

    @pytest.mark.asyncio
    async def test_one_profile_per_identity(self, profile_store):
        await profile_store.create(_profile())

        with pytest.raises(ConflictError, match="Profile already exists"):
            await profile_store.create(_profile())

    @pytest.mark.asyncio
    async def test_update(self, profile_store):
        profile = _profile(name="Ada")
        await profile_store.create(profile)

        updated = await profile_store.update(profile.id, age=37)

        assert updated.age == 37
        assert updated.name == "Ada"
        assert (await profile_store.find_by_id(profile.id)).age == 37

    @pytest.mark.asyncio
    async def test_update_missing_profile(self, profile_store):
        assert await profile_store.update(str(uuid4()), age=1) is None

    @pytest.mark.asyncio
    async def test_delete(self, profile_store):
        profile = _profile()
        await profile_store.create(profile)

        assert await profile_store.delete(profile.id)
        assert await profile_store.find_by_auth_id("auth-1") is None
        assert not await profile_store.delete(profile.id)
