"""Auth domain rules.

Pure decision logic for credentials: format checks, creation and deletion
policy, mobile OAuth input shape and id generation. Nothing here performs
I/O; validators raise ``ValidationError`` with a stable message and return
``None`` otherwise.
"""

import re
from typing import Optional, Union

from veris_identity.domain.auth.aggregates import AuthIdentity
from veris_identity.domain.auth.value_objects import (
    Email,
    MobileOAuthData,
    OAuthProvider,
    Platform,
    Role,
)
from veris_identity.domain.auth.value_objects.email import EMAIL_PATTERN
from veris_identity.domain.shared.ids import AUTH_PREFIX, generate_id
from veris_identity.exceptions import ConflictError, ValidationError

# At least 8 characters, one lowercase, one uppercase, one digit
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)[a-zA-Z\d@$!%*?&]{8,}$")

# RFC 7636 unreserved characters
CODE_VERIFIER_PATTERN = re.compile(r"^[A-Za-z0-9\-._~]+$")
CODE_VERIFIER_MIN_LENGTH = 43
CODE_VERIFIER_MAX_LENGTH = 128


def _blank(value: str | None) -> bool:
    return not value or not value.strip()


class AuthDomainService:
    """Business rules for AuthIdentity creation, deletion and sign-in input."""

    def is_email_valid(self, email: str | None) -> bool:
        return bool(email) and EMAIL_PATTERN.fullmatch(email) is not None

    def is_password_valid(self, password: str | None) -> bool:
        return bool(password) and PASSWORD_PATTERN.fullmatch(password) is not None

    def validate_user_creation(self, email: str, password: str) -> None:
        if not self.is_email_valid(email):
            raise ValidationError("Invalid email format", code="invalid_email")
        if not self.is_password_valid(password):
            raise ValidationError(
                "Password does not meet requirements",
                code="weak_password",
            )

    def can_create_user(self, existing: Optional[AuthIdentity]) -> bool:
        return existing is None

    def can_delete_user(
        self,
        identity: AuthIdentity,
        requester_id: str,
        is_admin: bool,
    ) -> bool:
        return identity.id == requester_id or is_admin

    def has_role(self, identity: AuthIdentity, role: Union[str, Role]) -> bool:
        return identity.has_role(role)

    def can_perform_admin_actions(self, identity: AuthIdentity) -> bool:
        return identity.is_admin

    def is_platform_supported(self, platform: str | None) -> bool:
        return platform in Platform.values()

    def validate_mobile_oauth_data(self, data: MobileOAuthData) -> None:
        """Check that exactly one credential mode is present for a supported platform.

        Raises
        ------
        ValidationError
            If the platform is unsupported, if both or neither of ID token
            and authorization code are given, or if a code comes without a
            PKCE verifier
        """
        if not self.is_platform_supported(data.platform):
            raise ValidationError(
                f"Unsupported platform: {data.platform}",
                code="unsupported_platform",
            )

        if data.has_id_token and data.has_code:
            raise ValidationError(
                "Cannot provide both idToken and code. Choose one authentication method.",
                code="ambiguous_credentials",
            )

        if not data.has_id_token and not data.has_code:
            raise ValidationError(
                "Either idToken or code must be provided",
                code="missing_credentials",
            )

        if data.has_code and not data.has_code_verifier:
            raise ValidationError(
                "Code verifier is required when using authorization code flow",
                code="missing_code_verifier",
            )

    def validate_id_token_format(
        self,
        id_token: str | None,
        provider: Union[str, OAuthProvider] = OAuthProvider.GOOGLE,
    ) -> None:
        if _blank(id_token):
            if OAuthProvider(provider) is OAuthProvider.APPLE:
                raise ValidationError("Apple ID token is required", code="missing_id_token")
            raise ValidationError("ID token is required", code="missing_id_token")

    def validate_authorization_code_format(self, code: str | None) -> None:
        if _blank(code):
            raise ValidationError("Authorization code is required", code="missing_code")

    def validate_code_verifier_format(self, code_verifier: str | None) -> None:
        """Validate a PKCE code verifier (length 43-128, unreserved characters only)."""
        if _blank(code_verifier):
            raise ValidationError(
                "Code verifier is required for PKCE flow",
                code="invalid_code_verifier",
            )
        if not CODE_VERIFIER_MIN_LENGTH <= len(code_verifier) <= CODE_VERIFIER_MAX_LENGTH:
            raise ValidationError(
                "Code verifier must be between 43 and 128 characters",
                code="invalid_code_verifier",
            )
        if not CODE_VERIFIER_PATTERN.fullmatch(code_verifier):
            raise ValidationError(
                "Code verifier contains invalid characters",
                code="invalid_code_verifier",
            )

    def validate_provider_user_data(self, sub: str | None, email: str | None) -> None:
        if not sub:
            raise ValidationError("Invalid user data: missing subject", code="missing_claims")
        if not email:
            raise ValidationError("Invalid user data: missing email", code="missing_claims")
        if not self.is_email_valid(email):
            raise ValidationError(
                "Invalid email format in user data",
                code="invalid_email",
            )

    def validate_password_change_data(self, old_password: str, new_password: str) -> None:
        """Validate a password change before any hashing happens.

        Raises
        ------
        ValidationError
            If the new password is weak or equal to the old one
        """
        if not self.is_password_valid(new_password):
            raise ValidationError(
                "Password must include at least one uppercase letter, "
                "one lowercase letter, and one number",
                code="weak_password",
            )
        if old_password == new_password:
            raise ValidationError(
                "New password must be different from old password",
                code="password_unchanged",
            )

    def generate_user_id(self) -> str:
        return generate_id(AUTH_PREFIX)

    def create_identity(
        self,
        email: Union[str, Email],
        existing: Optional[AuthIdentity],
        password_hash: str = "",
        provider: Union[str, OAuthProvider, None] = None,
        provider_id: str | None = None,
        auth_id: str | None = None,
    ) -> AuthIdentity:
        """Build a new USER-role identity once no identity holds the email.

        Raises
        ------
        ConflictError
            If ``existing`` is not None
        """
        if not self.can_create_user(existing):
            raise ConflictError()

        google_id = apple_id = None
        if provider is not None:
            if OAuthProvider(provider) is OAuthProvider.GOOGLE:
                google_id = provider_id
            else:
                apple_id = provider_id

        return AuthIdentity.create(
            id=auth_id or self.generate_user_id(),
            email=email,
            password_hash=password_hash,
            roles=[Role.USER],
            google_id=google_id,
            apple_id=apple_id,
        )
