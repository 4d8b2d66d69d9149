"""Storage infrastructure (SQLModel engine and repositories)."""
