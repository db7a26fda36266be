"""Unit tests for ProfileDomainService."""

import pytest

from veris_identity.domain.profile import Profile, ProfileDomainService
from veris_identity.exceptions import NotFoundError, ValidationError


class TestProfileValidation:
    """Tests for profile field rules."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = ProfileDomainService()

    def test_name_too_short(self):
        with pytest.raises(ValidationError, match="Name must be at least 2 characters long"):
            self.service.validate_name(" a ")

    def test_lastname_too_short(self):
        with pytest.raises(ValidationError, match="Lastname must be at least 2"):
            self.service.validate_lastname("b")

    @pytest.mark.parametrize("age", [0, 30, 150])
    def test_valid_ages(self, age):
        self.service.validate_age(age)

    @pytest.mark.parametrize("age", [-1, 151, True, "30", 30.5])
    def test_invalid_ages(self, age):
        with pytest.raises(ValidationError, match="between 0 and 150"):
            self.service.validate_age(age)


class TestCreateProfileEntity:
    """Tests for profile creation."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = ProfileDomainService()

    def test_blank_fields_are_allowed(self):
        profile = self.service.create_profile_entity(auth_id="auth-1")

        assert profile.id.startswith("profile-")
        assert profile.name == ""
        assert profile.lastname == ""
        assert profile.age == 0

    def test_values_are_stripped(self):
        profile = self.service.create_profile_entity(
            auth_id="auth-1",
            name="  Ada ",
            lastname=" Lovelace",
            age=36,
            profile_id="profile-fixed",
        )

        assert profile.id == "profile-fixed"
        assert profile.name == "Ada"
        assert profile.lastname == "Lovelace"

    def test_short_name_rejected(self):
        with pytest.raises(ValidationError):
            self.service.create_profile_entity(auth_id="auth-1", name="A")

    def test_age_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            self.service.create_profile_entity(auth_id="auth-1", age=200)


class TestProfileUpdates:
    """Tests for profile update rules."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = ProfileDomainService()
        self.profile = Profile.create(id="profile-1", auth_id="auth-1", name="Google User")

    def test_missing_profile(self):
        with pytest.raises(NotFoundError, match="Profile not found"):
            self.service.validate_profile_update(None, {"name": "Ada"})

    def test_unknown_field(self):
        with pytest.raises(ValidationError, match="auth_id"):
            self.service.validate_profile_update(self.profile, {"auth_id": "auth-2"})

    def test_valid_update(self):
        updates = self.service.validate_profile_update(self.profile, {"name": "Ada", "age": 3})

        assert updates == {"name": "Ada", "age": 3}

    def test_can_update_profile(self):
        assert self.service.can_update_profile(self.profile, "auth-1", is_admin=False)
        assert self.service.can_update_profile(self.profile, "auth-2", is_admin=True)
        assert not self.service.can_update_profile(self.profile, "auth-2", is_admin=False)

    def test_is_profile_complete(self):
        complete = Profile.create(id="p", auth_id="a", name="Ada", lastname="Lovelace", age=36)

        assert self.service.is_profile_complete(complete)
        assert not self.service.is_profile_complete(self.profile)


class TestProviderBackfill:
    """Tests for filling profile names from provider data."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = ProfileDomainService()

    def test_placeholder_name_is_replaced(self):
        profile = Profile.create(id="p", auth_id="a", name="Apple User")

        updates = self.service.backfill_from_provider(profile, "Ada", "Lovelace")

        assert updates == {"name": "Ada", "lastname": "Lovelace"}

    def test_real_name_is_kept(self):
        profile = Profile.create(id="p", auth_id="a", name="Grace", lastname="Hopper")

        assert self.service.backfill_from_provider(profile, "Ada", "Lovelace") == {}

    def test_missing_provider_values(self):
        profile = Profile.create(id="p", auth_id="a")

        assert self.service.backfill_from_provider(profile, None, None) == {}
