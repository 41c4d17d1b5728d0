# pickem/utils/observability.py
import logging
import sys
import contextvars

import structlog
from prometheus_client import Counter, CollectorRegistry

# Correlation ID shared by every log line of one command
CORRELATION_ID = contextvars.ContextVar('correlation_id', default=None)


class MetricsRegistry:
    """Request and retry counters on a private registry."""

    def __init__(self):
        self.registry = CollectorRegistry()
        self._init_metrics()

    def _init_metrics(self):
        self.api_requests = Counter(
            'pickem_api_requests_total',
            'HTTP requests sent to the Pick\'em API',
            labelnames=['method', 'status'],
            registry=self.registry
        )

        self.api_errors = Counter(
            'pickem_api_errors_total',
            'Classified request failures',
            labelnames=['kind'],
            registry=self.registry
        )

        self.retry_attempts = Counter(
            'pickem_retry_attempts_total',
            'Retries scheduled after a retryable failure',
            registry=self.registry
        )


class StructlogConfig:
    """Structured logging configuration."""

    @staticmethod
    def configure(env: str = 'development', log_level: str = 'INFO'):
        """
        Configure structlog with environment-appropriate settings.

        Production: JSON output (machine-readable)
        Development: Console output (human-readable)
        """

        shared_processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt='iso'),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
        ]

        if env == 'production':
            processors = shared_processors + [
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(),
            ]
        else:
            processors = shared_processors + [
                structlog.dev.ConsoleRenderer(),
            ]

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(
                logging.getLevelName(log_level)
            ),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
            cache_logger_on_first_use=True,
        )


class Logger:
    """Wrapper for structured logging with context awareness."""

    def __init__(self, module_name: str):
        self.logger = structlog.get_logger(module_name)
        self.module_name = module_name

    def log_event(self, event: str, **kwargs):
        """Log structured event with automatic context."""
        ctx = {'correlation_id': CORRELATION_ID.get(), 'module': self.module_name}
        ctx.update(kwargs)
        return self.logger.info(event, **ctx)

    def log_warning(self, event: str, **kwargs):
        ctx = {'correlation_id': CORRELATION_ID.get(), 'module': self.module_name}
        ctx.update(kwargs)
        return self.logger.warning(event, **ctx)

    def log_error(self, event: str, exc_info=None, **kwargs):
        """Log error with exception details."""
        ctx = {'correlation_id': CORRELATION_ID.get(), 'module': self.module_name}
        ctx.update(kwargs)
        return self.logger.error(event, exc_info=exc_info, **ctx)


def initialize_observability(environment: str = 'development', log_level: str = 'INFO'):
    """One-stop initialization for logging and metrics."""
    StructlogConfig.configure(env=environment, log_level=log_level)

    logger = structlog.get_logger(__name__)
    logger.info('observability_initialized', environment=environment, log_level=log_level)

    return get_metrics()


# Global metrics instance
METRICS = None


def get_metrics() -> MetricsRegistry:
    """Lazy-load metrics singleton."""
    global METRICS
    if METRICS is None:
        METRICS = MetricsRegistry()
    return METRICS
