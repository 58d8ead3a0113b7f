"""Core interfaces."""
