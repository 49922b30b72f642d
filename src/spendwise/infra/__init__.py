"""Infrastructure layer: SQLModel persistence."""
