"""Pydantic models for the catalog and build results."""
