"""Persistence implementations for identity management."""
