"""Git command wrappers."""
