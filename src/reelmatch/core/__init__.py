"""Core business logic for reelmatch."""
