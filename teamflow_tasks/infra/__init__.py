"""Infrastructure adapters (logging, database)."""
