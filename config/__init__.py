"""Configuration constants and persistence."""
