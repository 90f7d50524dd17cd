"""Configuration models for the handler layer."""
