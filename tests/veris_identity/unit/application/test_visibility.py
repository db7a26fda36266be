"""Unit tests for the bounded visibility wait."""

from unittest.mock import AsyncMock

import pytest

from veris_config import Settings
from veris_identity.application.services import VisibilityPolicy, wait_until_visible

FAST = VisibilityPolicy(timeout=0.2, initial_delay=0.005, max_delay=0.01)


class TestWaitUntilVisible:
    """Tests for wait_until_visible."""

    @pytest.mark.asyncio
    async def test_returns_immediately_when_visible(self):
        fetch = AsyncMock(return_value="record")

        assert await wait_until_visible(fetch, FAST) == "record"
        assert fetch.await_count == 1

    @pytest.mark.asyncio
    async def test_polls_until_visible(self):
        fetch = AsyncMock(side_effect=[None, None, "record"])

        assert await wait_until_visible(fetch, FAST) == "record"
        assert fetch.await_count == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_timeout(self):
        fetch = AsyncMock(return_value=None)
        policy = VisibilityPolicy(timeout=0.03, initial_delay=0.01, max_delay=0.01)

        assert await wait_until_visible(fetch, policy) is None
        assert fetch.await_count >= 2

    @pytest.mark.asyncio
    async def test_zero_timeout_fetches_once(self):
        fetch = AsyncMock(return_value=None)

        assert await wait_until_visible(fetch, VisibilityPolicy(timeout=0)) is None
        assert fetch.await_count == 1


class TestVisibilityPolicy:
    """Tests for VisibilityPolicy."""

    def test_negative_timeout_rejected(self):
        with pytest.raises(ValueError):
            VisibilityPolicy(timeout=-1)

    def test_backoff_below_one_rejected(self):
        with pytest.raises(ValueError):
            VisibilityPolicy(backoff=0.5)

    def test_from_settings(self):
        settings = Settings(
            _env_file=None,
            jwt_secret_key="a",
            jwt_refresh_secret_key="b",
            registration_visibility_timeout=1.5,
            registration_visibility_max_delay=0.1,
        )

        policy = VisibilityPolicy.from_settings(settings)

        assert policy.timeout == 1.5
        assert policy.max_delay == 0.1
