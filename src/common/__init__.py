"""Common utilities for Tripit services."""

__all__ = [
    "Settings",
    "setup_otel",
    "setup_logging",
    "get_logger",
    "setup_metrics",
]
