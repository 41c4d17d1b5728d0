# Utils module
from .logging import setup_logging
from .observability import Logger, MetricsRegistry, get_metrics, initialize_observability

__all__ = [
    "setup_logging",
    "Logger",
    "MetricsRegistry",
    "get_metrics",
    "initialize_observability",
]
