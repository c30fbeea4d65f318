"""Infrastructure layer: SQLite persistence of the command log."""
