"""Feeds interfaces layer."""
