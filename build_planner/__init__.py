"""Performance build planner: upgrade relationship graph and build analysis."""

__version__ = "1.0.0"
