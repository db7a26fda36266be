"""Application layer: commands, events, saga and use-case services."""
