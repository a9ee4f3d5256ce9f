"""External collaborators (email)."""
