"""Feeds domain layer."""
