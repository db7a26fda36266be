"""Unit tests for the in-memory command and event buses."""

import asyncio
from dataclasses import dataclass
from unittest.mock import AsyncMock

import pytest

from veris_identity.infrastructure.messaging import InMemoryCommandBus, InMemoryEventBus


@dataclass(frozen=True)
class Ping:
    value: int


@dataclass(frozen=True)
class Pong:
    value: int


class TestInMemoryCommandBus:
    """Tests for command dispatch."""

    @pytest.mark.asyncio
    async def test_execute_awaits_handler(self):
        bus = InMemoryCommandBus()
        handler = AsyncMock()
        bus.register(Ping, handler)

        await bus.execute(Ping(1))

        handler.assert_awaited_once_with(Ping(1))

    @pytest.mark.asyncio
    async def test_handler_errors_propagate(self):
        bus = InMemoryCommandBus()
        bus.register(Ping, AsyncMock(side_effect=RuntimeError("boom")))

        with pytest.raises(RuntimeError, match="boom"):
            await bus.execute(Ping(1))

    @pytest.mark.asyncio
    async def test_unknown_command(self):
        bus = InMemoryCommandBus()

        with pytest.raises(LookupError, match="Ping"):
            await bus.execute(Ping(1))

    def test_duplicate_registration(self):
        bus = InMemoryCommandBus()
        bus.register(Ping, AsyncMock())

        with pytest.raises(ValueError, match="already registered"):
            bus.register(Ping, AsyncMock())


class TestInMemoryEventBus:
    """Tests for asynchronous event delivery."""

    @pytest.mark.asyncio
    async def test_publish_returns_before_delivery(self):
        bus = InMemoryEventBus()
        started = asyncio.Event()

        async def handler(event):
            started.set()

        bus.subscribe(Ping, handler)
        await bus.publish(Ping(1))

        assert not started.is_set()
        assert bus.pending == 1

        await bus.drain()
        assert started.is_set()
        assert bus.pending == 0

    @pytest.mark.asyncio
    async def test_every_subscriber_receives_event(self):
        bus = InMemoryEventBus()
        first, second, other = AsyncMock(), AsyncMock(), AsyncMock()
        bus.subscribe(Ping, first)
        bus.subscribe(Ping, second)
        bus.subscribe(Pong, other)

        await bus.publish(Ping(7))
        await bus.drain()

        first.assert_awaited_once_with(Ping(7))
        second.assert_awaited_once_with(Ping(7))
        other.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_publish_without_subscribers(self):
        bus = InMemoryEventBus()

        await bus.publish(Ping(1))

        assert bus.pending == 0

    @pytest.mark.asyncio
    async def test_failing_handler_is_retried(self):
        bus = InMemoryEventBus(max_attempts=3, retry_delay=0)
        handler = AsyncMock(side_effect=[RuntimeError("first"), None])
        bus.subscribe(Ping, handler)

        await bus.publish(Ping(1))
        await bus.drain()

        assert handler.await_count == 2

    @pytest.mark.asyncio
    async def test_failure_is_dropped_after_max_attempts(self, caplog):
        bus = InMemoryEventBus(max_attempts=2, retry_delay=0)
        handler = AsyncMock(side_effect=RuntimeError("always"))
        bus.subscribe(Ping, handler)

        await bus.publish(Ping(1))
        await bus.drain()

        assert handler.await_count == 2
        assert "failed after 2 attempts" in caplog.text

    @pytest.mark.asyncio
    async def test_drain_waits_for_chained_events(self):
        bus = InMemoryEventBus()
        received = []

        async def on_ping(event):
            await bus.publish(Pong(event.value + 1))

        async def on_pong(event):
            received.append(event.value)

        bus.subscribe(Ping, on_ping)
        bus.subscribe(Pong, on_pong)

        await bus.publish(Ping(1))
        await bus.drain()

        assert received == [2]

    @pytest.mark.asyncio
    async def test_close_cancels_pending_deliveries(self):
        bus = InMemoryEventBus()

        async def slow(event):
            await asyncio.sleep(10)

        bus.subscribe(Ping, slow)
        await bus.publish(Ping(1))
        await bus.close()

        assert bus.pending == 0

    def test_invalid_max_attempts(self):
        with pytest.raises(ValueError):
            InMemoryEventBus(max_attempts=0)
