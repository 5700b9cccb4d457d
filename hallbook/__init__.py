"""Hall booking backend."""
