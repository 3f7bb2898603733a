"""Shared utilities: logging, the console store and file tailing."""
