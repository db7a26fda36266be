"""In-process command and event buses."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any

from veris_identity.application.ports import CommandBus, EventBus
from veris_identity.application.ports.messaging import CommandHandler, EventHandler

logger = logging.getLogger(__name__)


class InMemoryCommandBus(CommandBus):
    """Dispatches a command to its single handler and awaits it."""

    def __init__(self) -> None:
        self._handlers: dict[type, CommandHandler] = {}

    def register(self, command_type: type, handler: CommandHandler) -> None:
        if command_type in self._handlers:
            msg = f"A handler is already registered for {command_type.__name__}"
            raise ValueError(msg)
        self._handlers[command_type] = handler

    async def execute(self, command: Any) -> None:
        handler = self._handlers.get(type(command))
        if handler is None:
            msg = f"No handler registered for {type(command).__name__}"
            raise LookupError(msg)
        await handler(command)


class InMemoryEventBus(EventBus):
    """Delivers every event to each subscriber on its own task.

    ``publish`` returns before delivery. A failing subscriber is retried up
    to ``max_attempts`` times with a fixed delay, then the failure is logged
    and dropped. Delivery tasks are kept referenced until done.
    """

    def __init__(self, max_attempts: int = 3, retry_delay: float = 0.05):
        if max_attempts < 1:
            msg = "max_attempts must be at least 1"
            raise ValueError(msg)
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay
        self._subscribers: dict[type, list[EventHandler]] = defaultdict(list)
        self._tasks: set[asyncio.Task] = set()

    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        self._subscribers[event_type].append(handler)

    async def publish(self, event: Any) -> None:
        handlers = list(self._subscribers.get(type(event), ()))
        if not handlers:
            logger.debug("No subscribers for %s", type(event).__name__)
            return
        for handler in handlers:
            task = asyncio.create_task(self._deliver(handler, event))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait until no delivery is in flight, including ones scheduled meanwhile."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _deliver(self, handler: EventHandler, event: Any) -> None:
        event_name = type(event).__name__
        for attempt in range(1, self._max_attempts + 1):
            try:
                await handler(event)
                return
            except Exception as e:
                if attempt == self._max_attempts:
                    logger.error(
                        "Delivery of %s failed after %d attempts (%s): %s",
                        event_name,
                        attempt,
                        type(e).__name__,
                        e,
                    )
                    return
                logger.warning(
                    "Delivery of %s failed (attempt %d/%d), retrying: %s",
                    event_name,
                    attempt,
                    self._max_attempts,
                    e,
                )
                await asyncio.sleep(self._retry_delay)
