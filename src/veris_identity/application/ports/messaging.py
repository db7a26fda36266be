"""Messaging ports: command dispatch and event publication."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

CommandHandler = Callable[[Any], Awaitable[None]]
EventHandler = Callable[[Any], Awaitable[None]]


class CommandBus(ABC):
    """Dispatches each command type to exactly one handler."""

    @abstractmethod
    def register(self, command_type: type, handler: CommandHandler) -> None:
        """Bind a handler to a command type."""

    @abstractmethod
    async def execute(self, command: Any) -> None:
        """Run the handler bound to the command's type."""


class EventBus(ABC):
    """Delivers published events to every subscriber, at least once."""

    @abstractmethod
    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        """Add a subscriber for an event type."""

    @abstractmethod
    async def publish(self, event: Any) -> None:
        """Publish an event; delivery may happen after this returns."""
