"""Answer collection and persistence."""
