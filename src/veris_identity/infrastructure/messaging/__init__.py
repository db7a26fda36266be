from veris_identity.infrastructure.messaging.in_memory import (
    InMemoryCommandBus,
    InMemoryEventBus,
)

__all__ = ["InMemoryCommandBus", "InMemoryEventBus"]
