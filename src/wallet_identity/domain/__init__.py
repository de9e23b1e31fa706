"""Domain layer for identity management."""
