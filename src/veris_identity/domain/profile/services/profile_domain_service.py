"""Profile domain rules: field validation and update authorization."""

from collections.abc import Mapping
from typing import Any, Optional

from veris_identity.domain.auth.value_objects import OAuthProvider
from veris_identity.domain.profile.aggregates import Profile
from veris_identity.domain.shared.ids import PROFILE_PREFIX, generate_id
from veris_identity.exceptions import NotFoundError, ValidationError

MIN_NAME_LENGTH = 2
MIN_AGE = 0
MAX_AGE = 150

PLACEHOLDER_NAMES = frozenset(p.placeholder_name for p in OAuthProvider)


class ProfileDomainService:
    """Business rules for Profile creation and updates."""

    def generate_profile_id(self) -> str:
        return generate_id(PROFILE_PREFIX)

    def can_create_profile(self, existing: Optional[Profile]) -> bool:
        return existing is None

    def validate_name(self, name: str) -> None:
        if not name or len(name.strip()) < MIN_NAME_LENGTH:
            raise ValidationError(
                "Name must be at least 2 characters long",
                code="invalid_name",
            )

    def validate_lastname(self, lastname: str) -> None:
        if not lastname or len(lastname.strip()) < MIN_NAME_LENGTH:
            raise ValidationError(
                "Lastname must be at least 2 characters long",
                code="invalid_lastname",
            )

    def validate_age(self, age: int) -> None:
        if isinstance(age, bool) or not isinstance(age, int) or not MIN_AGE <= age <= MAX_AGE:
            raise ValidationError("Age must be between 0 and 150", code="invalid_age")

    def create_profile_entity(
        self,
        auth_id: str,
        name: str = "",
        lastname: str = "",
        age: int | None = None,
        profile_id: str | None = None,
    ) -> Profile:
        """Build a validated Profile.

        Name fields are optional at creation: blank values are stored as
        empty strings and only non-blank values are validated.

        Raises
        ------
        ValidationError
            If a given name is shorter than two characters or age is out of range
        """
        name = (name or "").strip()
        lastname = (lastname or "").strip()
        age = age or 0

        if name:
            self.validate_name(name)
        if lastname:
            self.validate_lastname(lastname)
        self.validate_age(age)

        return Profile.create(
            id=profile_id or self.generate_profile_id(),
            auth_id=auth_id,
            name=name,
            lastname=lastname,
            age=age,
        )

    def validate_profile_update_data(self, updates: Mapping[str, Any]) -> None:
        unknown = set(updates) - Profile.UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Unknown profile fields: {', '.join(sorted(unknown))}",
                code="unknown_fields",
            )
        if "name" in updates:
            self.validate_name(updates["name"])
        if "lastname" in updates:
            self.validate_lastname(updates["lastname"])
        if "age" in updates:
            self.validate_age(updates["age"])

    def validate_profile_update(
        self,
        existing: Optional[Profile],
        updates: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Validate an update against an existing profile and return the updates.

        Raises
        ------
        NotFoundError
            If the profile does not exist
        ValidationError
            If any updated field is invalid
        """
        if existing is None:
            raise NotFoundError("Profile not found")
        self.validate_profile_update_data(updates)
        return dict(updates)

    def can_update_profile(self, profile: Profile, requester_id: str, is_admin: bool) -> bool:
        return profile.auth_id == requester_id or is_admin

    def is_profile_complete(self, profile: Profile) -> bool:
        return bool(profile.name and profile.lastname and profile.age > 0)

    def is_placeholder_name(self, name: str | None) -> bool:
        return not name or name in PLACEHOLDER_NAMES

    def backfill_from_provider(
        self,
        profile: Profile,
        first_name: str | None,
        last_name: str | None,
    ) -> dict[str, str]:
        """Return the name fields a provider may fill in.

        Only empty or placeholder values are replaced; a real name the user
        has set is never overwritten.
        """
        updates: dict[str, str] = {}
        if first_name and self.is_placeholder_name(profile.name):
            updates["name"] = first_name
        if last_name and not profile.lastname:
            updates["lastname"] = last_name
        return updates
