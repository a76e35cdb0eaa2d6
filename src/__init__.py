"""Photo metadata editor."""
