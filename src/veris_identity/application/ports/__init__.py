from veris_identity.application.ports.messaging import CommandBus, EventBus

__all__ = ["CommandBus", "EventBus"]
