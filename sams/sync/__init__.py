"""The sync pipeline."""
