"""Domain entities, their tables and repositories."""
