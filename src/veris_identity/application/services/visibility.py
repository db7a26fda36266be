"""Bounded wait for records that are written asynchronously."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from veris_config import Settings

T = TypeVar("T")


@dataclass(frozen=True)
class VisibilityPolicy:
    """Polling schedule: exponential backoff capped at ``max_delay``, total capped at ``timeout``."""

    timeout: float = 2.0
    initial_delay: float = 0.02
    max_delay: float = 0.25
    backoff: float = 2.0

    def __post_init__(self) -> None:
        if self.timeout < 0 or self.initial_delay <= 0 or self.max_delay <= 0:
            msg = "Visibility timeout and delays must be positive"
            raise ValueError(msg)
        if self.backoff < 1:
            msg = "Backoff factor must be at least 1"
            raise ValueError(msg)

    @classmethod
    def from_settings(cls, settings: Settings) -> VisibilityPolicy:
        return cls(
            timeout=settings.registration_visibility_timeout,
            initial_delay=settings.registration_visibility_initial_delay,
            max_delay=settings.registration_visibility_max_delay,
        )


async def wait_until_visible(
    fetch: Callable[[], Awaitable[T | None]],
    policy: VisibilityPolicy | None = None,
) -> T | None:
    """Poll ``fetch`` until it returns a value or the policy's timeout elapses.

    ``fetch`` is always called at least once, and once more at the deadline.

    Returns
    -------
    The first non-None result, or None when the record never became visible
    """
    policy = policy or VisibilityPolicy()
    loop = asyncio.get_running_loop()
    deadline = loop.time() + policy.timeout
    delay = policy.initial_delay

    while True:
        result = await fetch()
        if result is not None:
            return result

        remaining = deadline - loop.time()
        if remaining <= 0:
            return None

        await asyncio.sleep(min(delay, remaining))
        delay = min(delay * policy.backoff, policy.max_delay)
