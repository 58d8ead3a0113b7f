"""Core domain primitives."""
