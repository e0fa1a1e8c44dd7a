"""FastAPI dependency injection."""

from build_planner.services.engine import BuildEngine, get_engine


def get_build_engine() -> BuildEngine:
    """Dependency for the process-wide build engine."""
    return get_engine()
