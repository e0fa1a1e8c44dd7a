"""Structured logging configuration."""

import logging
import sys
from typing import Any


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure structured logging for the application."""
    # Create logger
    logger = logging.getLogger("build_planner")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    # Console handler with structured format
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)

    # Format: timestamp - level - module - message
    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


# Global logger instance
logger = setup_logging()


def _format_extra(kwargs: dict[str, Any]) -> str:
    return " ".join(f"{k}={v}" for k, v in kwargs.items())


def log_request(method: str, path: str, **kwargs: Any) -> None:
    """Log an incoming request."""
    logger.info(f"REQUEST {method} {path} {_format_extra(kwargs)}".strip())


def log_response(method: str, path: str, status: int, duration_ms: float) -> None:
    """Log an outgoing response."""
    logger.info(
        f"RESPONSE {method} {path} status={status} duration_ms={duration_ms:.2f}"
    )


def log_error(message: str, exc: Exception | None = None, **context: Any) -> None:
    """Log an error; the traceback is attached when an exception is given."""
    logger.error(f"ERROR {message} {_format_extra(context)}".strip(), exc_info=exc)


def log_data_gap(gap: str, key: str, **context: Any) -> None:
    """Log a reference to data that is missing or malformed in the catalog.

    The catalog is hand-maintained, so these are warnings rather than errors.
    """
    logger.warning(f"DATA_GAP {gap} key={key} {_format_extra(context)}".strip())


def log_catalog_loaded(source: str, count: int, skipped: int = 0) -> None:
    """Log the outcome of loading one catalog file."""
    logger.debug(f"CATALOG {source} loaded={count} skipped={skipped}")
