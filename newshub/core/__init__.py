"""Shared kernel: config, domain primitives, logging, HTTP plumbing."""
