"""Configuration models, loading and the error taxonomy."""
