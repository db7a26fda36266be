"""SQLAlchemy implementation of ProfileStore."""

import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from veris_identity.domain.profile import Profile, ProfileStore
from veris_identity.domain.shared.time import ensure_tz_aware
from veris_identity.exceptions import ConflictError
from veris_identity.infrastructure.persistence.sqlalchemy.models import ProfileModel

logger = logging.getLogger(__name__)


class ProfileStoreSQLAlchemy(ProfileStore):
    """SQLAlchemy implementation of the ProfileStore interface."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, profile: Profile) -> Profile:
        model = ProfileModel(
            id=profile.id,
            auth_id=profile.auth_id,
            name=profile.name,
            lastname=profile.lastname,
            age=profile.age,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise ConflictError("Profile already exists for this user") from e

        logger.info("Created profile %s for %s", profile.id, profile.auth_id)
        return self._map_to_domain(model)

    async def find_by_auth_id(self, auth_id: str) -> Optional[Profile]:
        model = await self._find(ProfileModel.auth_id == auth_id)
        return self._map_to_domain(model) if model else None

    async def find_by_id(self, profile_id: str) -> Optional[Profile]:
        model = await self._find(ProfileModel.id == profile_id)
        return self._map_to_domain(model) if model else None

    async def update(self, profile_id: str, **fields: Any) -> Optional[Profile]:
        model = await self._find(ProfileModel.id == profile_id)
        if model is None:
            return None

        profile = self._map_to_domain(model)
        profile.apply_changes(fields)
        model.name = profile.name
        model.lastname = profile.lastname
        model.age = profile.age
        model.updated_at = profile.updated_at
        await self._session.flush()
        return profile

    async def delete(self, profile_id: str) -> bool:
        model = await self._find(ProfileModel.id == profile_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        logger.info("Deleted profile: %s", profile_id)
        return True

    async def _find(self, condition) -> ProfileModel | None:
        result = await self._session.execute(select(ProfileModel).where(condition))
        return result.scalar_one_or_none()

    def _map_to_domain(self, model: ProfileModel) -> Profile:
        return Profile.reconstitute(
            id=model.id,
            auth_id=model.auth_id,
            name=model.name,
            lastname=model.lastname,
            age=model.age,
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )
