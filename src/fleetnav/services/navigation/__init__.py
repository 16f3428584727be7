"""Navigation planning services."""
