"""Shared enums and logging."""
