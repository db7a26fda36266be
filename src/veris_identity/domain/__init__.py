"""Domain layer: pure rules, aggregates and store interfaces (no I/O)."""
