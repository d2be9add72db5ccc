"""Core configuration and logging for langman."""
