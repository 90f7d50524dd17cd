"""Shared handler utilities: observability, errors, responses."""
