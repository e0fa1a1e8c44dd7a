"""Catalog loading, relationship graph and build analysis services."""
