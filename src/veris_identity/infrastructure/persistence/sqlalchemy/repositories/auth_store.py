"""SQLAlchemy implementation of AuthStore."""

import logging
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from veris_identity.domain.auth import AuthIdentity, AuthStore
from veris_identity.domain.shared.time import ensure_tz_aware, utc_now
from veris_identity.exceptions import ConflictError
from veris_identity.infrastructure.persistence.sqlalchemy.models import AuthIdentityModel

logger = logging.getLogger(__name__)


def _conflict_from(error: IntegrityError) -> ConflictError:
    message = str(error.orig if error.orig is not None else error).lower()
    for column in ("google_id", "apple_id"):
        if column in message:
            return ConflictError(
                f"Account already linked to another user ({column})",
                code=f"{column}_taken",
            )
    return ConflictError()


class AuthStoreSQLAlchemy(AuthStore):
    """SQLAlchemy implementation of the AuthStore interface.

    Uniqueness is enforced by partial unique indexes; a violating write
    raises ``ConflictError``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, identity: AuthIdentity) -> AuthIdentity:
        model = self._map_to_model(identity)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            logger.info("Identity %s rejected by uniqueness constraint", identity.id)
            raise _conflict_from(e) from e

        logger.info("Created identity: %s (email: %s)", identity.id, identity.email)
        return self._map_to_domain(model).without_secrets()

    async def find_by_email(
        self,
        email: str,
        include_secrets: bool = False,
    ) -> Optional[AuthIdentity]:
        model = await self._find_active(AuthIdentityModel.email == email.strip().lower())
        return self._expose(model, include_secrets)

    async def find_by_id(
        self,
        auth_id: str,
        include_secrets: bool = False,
    ) -> Optional[AuthIdentity]:
        model = await self._find_active(AuthIdentityModel.id == auth_id)
        return self._expose(model, include_secrets)

    async def find_by_google_id(self, google_id: str) -> Optional[AuthIdentity]:
        model = await self._find_active(AuthIdentityModel.google_id == google_id)
        return self._expose(model, include_secrets=False)

    async def find_by_apple_id(self, apple_id: str) -> Optional[AuthIdentity]:
        model = await self._find_active(AuthIdentityModel.apple_id == apple_id)
        return self._expose(model, include_secrets=False)

    async def update(self, auth_id: str, **fields: Any) -> Optional[AuthIdentity]:
        model = await self._find_active(AuthIdentityModel.id == auth_id)
        if model is None:
            return None

        identity = self._map_to_domain(model)
        identity.apply_changes(fields)
        self._update_model(model, identity)
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise _conflict_from(e) from e

        logger.debug("Updated identity %s (%s)", auth_id, ", ".join(sorted(fields)))
        return identity.without_secrets()

    async def soft_delete(self, auth_id: str) -> bool:
        model = await self._find_active(AuthIdentityModel.id == auth_id)
        if model is None:
            return False
        model.deleted_at = utc_now()
        model.current_refresh_token_hash = None
        await self._session.flush()
        logger.info("Soft-deleted identity: %s", auth_id)
        return True

    async def clear_refresh_token(self, auth_id: str) -> None:
        stmt = (
            update(AuthIdentityModel)
            .where(
                AuthIdentityModel.id == auth_id,
                AuthIdentityModel.deleted_at.is_(None),
            )
            .values(current_refresh_token_hash=None, updated_at=utc_now())
        )
        await self._session.execute(stmt)
        await self._session.flush()

    async def _find_active(self, condition) -> AuthIdentityModel | None:
        stmt = select(AuthIdentityModel).where(
            condition,
            AuthIdentityModel.deleted_at.is_(None),
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _expose(
        self,
        model: AuthIdentityModel | None,
        include_secrets: bool,
    ) -> Optional[AuthIdentity]:
        if model is None:
            return None
        identity = self._map_to_domain(model)
        return identity if include_secrets else identity.without_secrets()

    def _map_to_domain(self, model: AuthIdentityModel) -> AuthIdentity:
        return AuthIdentity.reconstitute(
            id=model.id,
            email=model.email,
            password_hash=model.password_hash,
            roles=[r for r in model.roles.split(",") if r],
            google_id=model.google_id,
            apple_id=model.apple_id,
            current_refresh_token_hash=model.current_refresh_token_hash,
            last_login_at=_aware(model.last_login_at),
            deleted_at=_aware(model.deleted_at),
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )

    def _map_to_model(self, identity: AuthIdentity) -> AuthIdentityModel:
        return AuthIdentityModel(
            id=identity.id,
            email=identity.email,
            password_hash=identity.password_hash,
            roles=",".join(identity.role_names),
            google_id=identity.google_id,
            apple_id=identity.apple_id,
            current_refresh_token_hash=identity.current_refresh_token_hash,
            last_login_at=identity.last_login_at,
            deleted_at=identity.deleted_at,
            created_at=identity.created_at,
            updated_at=identity.updated_at,
        )

    def _update_model(self, model: AuthIdentityModel, identity: AuthIdentity) -> None:
        model.email = identity.email
        model.password_hash = identity.password_hash
        model.roles = ",".join(identity.role_names)
        model.google_id = identity.google_id
        model.apple_id = identity.apple_id
        model.current_refresh_token_hash = identity.current_refresh_token_hash
        model.last_login_at = identity.last_login_at
        model.updated_at = identity.updated_at


def _aware(value):
    return ensure_tz_aware(value) if value is not None else None
