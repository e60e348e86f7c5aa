"""External collaborators outside the core."""
