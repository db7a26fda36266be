"""Identity orchestrator.

Coordinates domain rules, provider verifiers, the stores and the token codec
for every sign-in related use case. The only state it holds between calls is
what the stores persist.
"""

from __future__ import annotations

import logging
import secrets
from typing import TYPE_CHECKING, Any

from veris_auth import (
    InvalidTokenError,
    JWTService,
    PasswordHashingService,
    TokenPair,
    WeakPasswordError,
    hash_refresh_token,
    refresh_token_matches,
)
from veris_identity.application.commands import (
    CreateAuthIdentityCommand,
    DeleteAuthIdentityCommand,
)
from veris_identity.application.dtos import (
    AccountView,
    AuthResult,
    MessageResult,
    OAuthInitiation,
    ProfileView,
)
from veris_identity.application.services.visibility import (
    VisibilityPolicy,
    wait_until_visible,
)
from veris_identity.domain.auth import (
    AuthDomainService,
    AuthIdentity,
    AuthStore,
    Email,
    MobileOAuthData,
    OAuthProvider,
)
from veris_identity.domain.profile import ProfileDomainService, ProfileStore
from veris_identity.domain.shared.time import utc_now
from veris_identity.exceptions import (
    ConfigurationError,
    ConflictError,
    IdentityError,
    NotFoundError,
    RegistrationFailedError,
    UnauthorizedError,
    ValidationError,
)

if TYPE_CHECKING:
    from veris_identity.application.context import UserContext
    from veris_identity.application.ports import CommandBus
    from veris_identity.infrastructure.oauth import (
        AppleIdentityVerifier,
        GoogleIdentityVerifier,
    )
    from veris_identity.schemas import OAuthUserInfo

logger = logging.getLogger(__name__)


class AuthenticationService:
    """Register, sign in and manage sessions for password and provider identities.

    Examples
    --------
    >>> service = AuthenticationService(auth_store, profile_store, bus, jwt, hasher)
    >>> result = await service.register("a@b.com", "Secret123")
    >>> pair = await service.refresh_token(result.refresh_token)
    """

    def __init__(
        self,
        auth_store: AuthStore,
        profile_store: ProfileStore,
        command_bus: CommandBus,
        jwt_service: JWTService,
        password_service: PasswordHashingService,
        auth_domain: AuthDomainService | None = None,
        profile_domain: ProfileDomainService | None = None,
        google_verifier: GoogleIdentityVerifier | None = None,
        apple_verifier: AppleIdentityVerifier | None = None,
        visibility_policy: VisibilityPolicy | None = None,
    ):
        self._auth_store = auth_store
        self._profile_store = profile_store
        self._command_bus = command_bus
        self._jwt = jwt_service
        self._passwords = password_service
        self._auth_domain = auth_domain or AuthDomainService()
        self._profile_domain = profile_domain or ProfileDomainService()
        self._google = google_verifier
        self._apple = apple_verifier
        self._visibility = visibility_policy or VisibilityPolicy()

    # -------------------------------------------------------------------------
    # Password identities
    # -------------------------------------------------------------------------

    async def register(
        self,
        email: str,
        password: str,
        name: str = "",
        lastname: str = "",
        age: int = 0,
    ) -> AuthResult:
        """Register a password identity and sign it in.

        The profile is created asynchronously by the registration saga, so
        the returned ``profile`` may still be None.

        Raises
        ------
        ValidationError
            If email, password or a given profile field is malformed
        ConflictError
            If the email is already registered
        RegistrationFailedError
            If the new identity did not become visible in time (retryable)
        """
        self._auth_domain.validate_user_creation(email, password)
        self._check_hashable(password)
        self._validate_profile_seed(name, lastname, age)

        normalized = Email(email).value
        auth_id = self._auth_domain.generate_user_id()
        profile_id = self._profile_domain.generate_profile_id()

        await self._command_bus.execute(
            CreateAuthIdentityCommand(
                auth_id=auth_id,
                profile_id=profile_id,
                email=normalized,
                password=password,
                first_name=(name or "").strip(),
                last_name=(lastname or "").strip(),
                age=age or 0,
            ),
        )

        identity = await self._wait_for_identity(auth_id, "register")
        pair = await self._issue_tokens(identity, last_login_at=utc_now())
        profile = await self._find_profile(auth_id)

        logger.info("User registered and authenticated: %s", identity.email)
        return self._auth_result(identity, pair, profile)

    async def login(self, email: str, password: str) -> AuthResult:
        """Sign in with email and password.

        Raises
        ------
        ValidationError
            If the email is malformed (checked before any lookup)
        NotFoundError
            If no identity holds the email
        UnauthorizedError
            If the password does not match
        """
        if not self._auth_domain.is_email_valid(email):
            raise ValidationError("Invalid email format", code="invalid_email")

        identity = await self._auth_store.find_by_email(
            Email(email).value,
            include_secrets=True,
        )
        if identity is None:
            logger.info("Login failed for %s: user not found", email)
            raise NotFoundError("User not found")

        if not self._passwords.verify(password, identity.password_hash):
            logger.warning("Login failed for %s: invalid credentials", identity.email)
            raise UnauthorizedError("Invalid credentials", code="invalid_credentials")

        pair = await self._issue_tokens(identity, last_login_at=utc_now())
        profile = await self._find_profile(identity.id)

        logger.info("User %s logged in", identity.id)
        return self._auth_result(identity, pair, profile)

    async def refresh_token(self, refresh_token: str) -> TokenPair:
        """Rotate a refresh token.

        The presented token must be the one whose digest is stored; after
        rotation the old token is rejected even though its signature stays
        valid until expiry.

        Raises
        ------
        UnauthorizedError
            If the token is invalid, revoked or no longer current
        """
        try:
            payload = self._jwt.verify_refresh_token(refresh_token)
        except InvalidTokenError as e:
            logger.info("Token refresh failed: %s", e.message)
            raise UnauthorizedError(
                "Invalid refresh token",
                code="invalid_refresh_token",
            ) from e

        identity = await self._auth_store.find_by_id(payload.subject, include_secrets=True)
        if identity is None:
            logger.info("Token refresh failed for %s: user not found", payload.subject)
            raise UnauthorizedError("Invalid refresh token", code="invalid_refresh_token")

        if not identity.current_refresh_token_hash:
            logger.info("Token refresh failed for %s: token revoked", identity.id)
            raise UnauthorizedError("Refresh token revoked", code="refresh_token_revoked")

        if not refresh_token_matches(refresh_token, identity.current_refresh_token_hash):
            logger.warning("Token refresh failed for %s: stale token presented", identity.id)
            raise UnauthorizedError("Invalid refresh token", code="refresh_token_reused")

        pair = await self._issue_tokens(identity)
        logger.info("Token refreshed for %s", identity.id)
        return pair

    async def logout(self, auth_id: str) -> MessageResult:
        """Revoke the stored refresh token. Idempotent."""
        await self._auth_store.clear_refresh_token(auth_id)
        logger.info("User %s logged out", auth_id)
        return MessageResult("User logged out successfully.")

    async def change_password(
        self,
        auth_id: str,
        old_password: str,
        new_password: str,
    ) -> MessageResult:
        """Replace the password and revoke the refresh token on all devices.

        Raises
        ------
        ValidationError
            If the new password is weak or equal to the old one
        NotFoundError
            If the identity does not exist
        UnauthorizedError
            If the old password does not match
        """
        self._auth_domain.validate_password_change_data(old_password, new_password)
        self._check_hashable(new_password)

        identity = await self._auth_store.find_by_id(auth_id, include_secrets=True)
        if identity is None:
            raise NotFoundError("User not found")

        if not self._passwords.verify(old_password, identity.password_hash):
            logger.warning("Password change rejected for %s: old password mismatch", auth_id)
            raise UnauthorizedError("Old password is incorrect", code="invalid_credentials")

        await self._auth_store.update(
            auth_id,
            password_hash=self._passwords.hash(new_password),
            current_refresh_token_hash=None,
        )
        logger.info("Password changed for %s", auth_id)
        return MessageResult("Password changed successfully")

    async def delete_by_auth_id(
        self,
        auth_id: str,
        requester: UserContext | None = None,
    ) -> MessageResult:
        """Delete an identity and its profile.

        Parameters
        ----------
        auth_id
            Identity to delete
        requester
            Caller, if the deletion is user-initiated. Only the owner or an
            admin may delete.

        Raises
        ------
        NotFoundError
            If the identity or its profile does not exist
        UnauthorizedError
            If ``requester`` may not delete this identity
        """
        identity = await self._auth_store.find_by_id(auth_id)
        if identity is None:
            raise NotFoundError("Auth user not found")

        if requester is not None and not self._auth_domain.can_delete_user(
            identity,
            requester.user_id,
            requester.is_admin,
        ):
            logger.warning("User %s may not delete %s", requester.user_id, auth_id)
            raise UnauthorizedError("Not allowed to delete this user", code="forbidden")

        profile = await self._profile_store.find_by_auth_id(auth_id)
        if profile is None:
            raise NotFoundError("Profile not found")

        await self._command_bus.execute(
            DeleteAuthIdentityCommand(auth_id=auth_id, profile_id=profile.id),
        )
        return MessageResult(f"User deleted successfully for auth id: {auth_id}")

    async def find_by_auth_id(self, auth_id: str) -> AccountView | None:
        """Return the identity (without secrets) and its profile, or None."""
        identity = await self._auth_store.find_by_id(auth_id)
        if identity is None:
            logger.info("User %s not found", auth_id)
            return None
        profile = await self._profile_store.find_by_auth_id(auth_id)
        return AccountView.create(identity, profile)

    # -------------------------------------------------------------------------
    # Web OAuth (Google)
    # -------------------------------------------------------------------------

    def initiate_google_auth(self) -> OAuthInitiation:
        """Create a CSRF state nonce and the Google consent URL carrying it.

        The caller stores ``state`` (e.g. in a cookie) and hands it back to
        ``handle_google_redirect``.
        """
        google = self._require_google()
        if not google.config.is_web_configured:
            raise ConfigurationError("Google OAuth is not configured for web")

        state = secrets.token_hex(20)
        logger.info("Initiating Google OAuth")
        return OAuthInitiation(redirect_url=google.build_authorization_url(state), state=state)

    async def handle_google_redirect(
        self,
        code: str,
        state: str,
        stored_state: str,
    ) -> AuthResult:
        """Complete the web OAuth flow.

        Raises
        ------
        UnauthorizedError
            If ``state`` is missing or does not match ``stored_state``, or
            Google rejects the code
        UpstreamUnavailableError
            If Google cannot be reached
        """
        if not state or not stored_state or not secrets.compare_digest(state, stored_state):
            logger.warning("Google redirect rejected: invalid state or state mismatch")
            raise UnauthorizedError("Invalid state or state mismatch.", code="state_mismatch")

        self._auth_domain.validate_authorization_code_format(code)
        user_info = await self._require_google().exchange_web_code(code)
        result = await self._find_or_create(user_info)
        logger.info("Google user %s found or created", user_info.email)
        return result

    # -------------------------------------------------------------------------
    # Mobile OAuth
    # -------------------------------------------------------------------------

    async def mobile_google_auth(
        self,
        platform: str,
        id_token: str | None = None,
        code: str | None = None,
        code_verifier: str | None = None,
    ) -> AuthResult:
        """Sign in from a mobile app with a Google ID token or a PKCE code.

        Raises
        ------
        ValidationError
            If the credential shape is wrong (both/neither, missing or
            malformed verifier, unsupported platform)
        ConfigurationError
            If Google is not configured for the platform
        UnauthorizedError
            If Google rejects the credential; provider token failures carry
            a specific code such as ``audience_invalid``
        UpstreamUnavailableError
            If Google cannot be reached
        """
        data = MobileOAuthData(
            platform=platform,
            id_token=id_token,
            code=code,
            code_verifier=code_verifier,
        )
        try:
            self._auth_domain.validate_mobile_oauth_data(data)
            google = self._require_google()
            if not google.config.is_platform_configured(platform):
                raise ConfigurationError(f"Google OAuth not configured for {platform}")

            if data.has_id_token:
                user_info = await google.verify_id_token(id_token, platform)
            else:
                self._auth_domain.validate_code_verifier_format(code_verifier)
                user_info = await google.exchange_authorization_code(
                    code,
                    code_verifier,
                    platform,
                )

            return await self._find_or_create(user_info)
        except IdentityError as e:
            logger.warning(
                "Mobile Google authentication failed (platform=%s, code=%s): %s",
                platform,
                e.code,
                e.message,
            )
            raise
        except Exception as e:
            logger.exception(
                "Mobile Google authentication failed unexpectedly (platform=%s): %s",
                platform,
                type(e).__name__,
            )
            raise UnauthorizedError("Mobile authentication failed") from e

    async def mobile_apple_auth(self, platform: str, id_token: str | None) -> AuthResult:
        """Sign in from a mobile app with an Apple ID token.

        Raises
        ------
        ValidationError
            If the token is missing or the platform is unsupported
        ConfigurationError
            If Apple Sign-In is not fully configured for the platform
        UnauthorizedError
            If Apple's token is rejected
        UpstreamUnavailableError
            If Apple's key set cannot be fetched
        """
        try:
            self._auth_domain.validate_id_token_format(id_token, OAuthProvider.APPLE)
            if not self._auth_domain.is_platform_supported(platform):
                raise ValidationError(
                    f"Unsupported platform: {platform}",
                    code="unsupported_platform",
                )

            apple = self._require_apple()
            errors = apple.config.validate_platform(platform)
            if errors:
                raise ConfigurationError(
                    f"Apple OAuth not properly configured for {platform}: {', '.join(errors)}",
                )

            user_info = await apple.verify_id_token(id_token, platform)
            return await self._find_or_create(user_info)
        except IdentityError as e:
            logger.warning(
                "Mobile Apple authentication failed (platform=%s, code=%s): %s",
                platform,
                e.code,
                e.message,
            )
            raise
        except Exception as e:
            logger.exception(
                "Mobile Apple authentication failed unexpectedly (platform=%s): %s",
                platform,
                type(e).__name__,
            )
            raise UnauthorizedError("Apple authentication failed") from e

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _find_or_create(self, user_info: OAuthUserInfo) -> AuthResult:
        """Resolve a provider identity to an AuthIdentity and sign it in.

        Lookup order: provider id, then email (linking the provider id),
        then creation through the registration saga.
        """
        provider = user_info.provider
        identity = await self._find_by_provider_id(provider, user_info.provider_id)

        if identity is None:
            identity = await self._auth_store.find_by_email(user_info.email)
            if identity is not None:
                identity = await self._auth_store.update(
                    identity.id,
                    **{f"{provider.value}_id": user_info.provider_id},
                )
                if identity is None:
                    raise NotFoundError("User not found")
                logger.info("Linked %s account to %s", provider.value, identity.id)
            else:
                identity = await self._create_provider_identity(user_info)

        pair = await self._issue_tokens(identity, last_login_at=utc_now())
        await self._backfill_profile(identity.id, user_info)
        profile = await self._find_profile(identity.id)
        return self._auth_result(identity, pair, profile)

    async def _create_provider_identity(self, user_info: OAuthUserInfo) -> AuthIdentity:
        provider = user_info.provider
        existing = await self._auth_store.find_by_email(user_info.email)
        if not self._auth_domain.can_create_user(existing):
            raise ConflictError()

        auth_id = self._auth_domain.generate_user_id()
        profile_id = self._profile_domain.generate_profile_id()
        first_name, last_name = self._provider_seed_names(user_info)

        await self._command_bus.execute(
            CreateAuthIdentityCommand(
                auth_id=auth_id,
                profile_id=profile_id,
                email=Email(user_info.email).value,
                provider=provider,
                provider_id=user_info.provider_id,
                first_name=first_name,
                last_name=last_name,
                age=0,
            ),
        )
        return await self._wait_for_identity(auth_id, f"{provider.value}_register")

    async def _find_by_provider_id(
        self,
        provider: OAuthProvider,
        provider_id: str,
    ) -> AuthIdentity | None:
        if provider is OAuthProvider.GOOGLE:
            return await self._auth_store.find_by_google_id(provider_id)
        return await self._auth_store.find_by_apple_id(provider_id)

    def _provider_seed_names(self, user_info: OAuthUserInfo) -> tuple[str, str]:
        """Profile seed names: provider values that pass profile validation, else defaults."""
        first_name = (user_info.first_name or "").strip()
        last_name = (user_info.last_name or "").strip()
        if not self._is_valid_name(first_name):
            first_name = user_info.provider.placeholder_name
        if not self._is_valid_name(last_name):
            last_name = ""
        return first_name, last_name

    def _is_valid_name(self, value: str) -> bool:
        try:
            self._profile_domain.validate_name(value)
        except ValidationError:
            return False
        return True

    async def _backfill_profile(self, auth_id: str, user_info: OAuthUserInfo) -> None:
        """Fill empty or placeholder profile names from provider data. Never fails sign-in."""
        try:
            profile = await self._profile_store.find_by_auth_id(auth_id)
            if profile is None:
                return
            first_name = (user_info.first_name or "").strip()
            last_name = (user_info.last_name or "").strip()
            updates = self._profile_domain.backfill_from_provider(
                profile,
                first_name if self._is_valid_name(first_name) else None,
                last_name if self._is_valid_name(last_name) else None,
            )
            if updates:
                await self._profile_store.update(profile.id, **updates)
                logger.info("Backfilled profile %s from %s", profile.id, user_info.provider.value)
        except IdentityError as e:
            logger.warning(
                "Failed to update profile with %s data for %s: %s",
                user_info.provider.value,
                auth_id,
                e.message,
            )

    async def _wait_for_identity(self, auth_id: str, operation: str) -> AuthIdentity:
        identity = await wait_until_visible(
            lambda: self._auth_store.find_by_id(auth_id),
            self._visibility,
        )
        if identity is None:
            logger.error(
                "%s: identity %s not visible after %.2fs",
                operation,
                auth_id,
                self._visibility.timeout,
            )
            raise RegistrationFailedError()
        return identity

    async def _issue_tokens(self, identity: AuthIdentity, **fields: Any) -> TokenPair:
        """Issue a token pair and make its refresh token the only valid one."""
        pair = self._jwt.create_token_pair(identity.id, identity.email, identity.role_names)
        await self._auth_store.update(
            identity.id,
            current_refresh_token_hash=hash_refresh_token(pair.refresh_token),
            **fields,
        )
        return pair

    async def _find_profile(self, auth_id: str) -> ProfileView | None:
        # The profile is created asynchronously; absence is expected here
        try:
            profile = await self._profile_store.find_by_auth_id(auth_id)
        except IdentityError as e:
            logger.warning("Profile lookup for %s failed: %s", auth_id, e.message)
            return None
        return ProfileView.from_profile(profile) if profile else None

    def _auth_result(
        self,
        identity: AuthIdentity,
        pair: TokenPair,
        profile: ProfileView | None,
    ) -> AuthResult:
        return AuthResult(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            auth_id=identity.id,
            profile=profile,
        )

    def _check_hashable(self, password: str) -> None:
        try:
            self._passwords.validate_hashable(password)
        except WeakPasswordError as e:
            raise ValidationError(e.message, code="weak_password") from e

    def _validate_profile_seed(self, name: str, lastname: str, age: int) -> None:
        if name and name.strip():
            self._profile_domain.validate_name(name)
        if lastname and lastname.strip():
            self._profile_domain.validate_lastname(lastname)
        self._profile_domain.validate_age(age or 0)

    def _require_google(self) -> GoogleIdentityVerifier:
        if self._google is None:
            raise ConfigurationError("Google OAuth is not configured")
        return self._google

    def _require_apple(self) -> AppleIdentityVerifier:
        if self._apple is None:
            raise ConfigurationError("Apple Sign-In is not configured")
        return self._apple
