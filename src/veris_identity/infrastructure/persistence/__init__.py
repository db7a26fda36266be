"""Store implementations (in-memory and SQLAlchemy)."""
