"""Feeds application layer."""
