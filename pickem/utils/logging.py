"""
Stdlib logging for the Pick'em client.

Modules that log through ``logging.getLogger`` (the retry scheduler) are
rendered by structlog's ``ProcessorFormatter`` so their lines look like the
structured events emitted everywhere else.
"""
import logging
import sys
from pathlib import Path
from typing import Optional
import os

import structlog


def _renderer(log_format: str):
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(
    name: str = "pickem",
    level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_file: Optional[Path] = None
) -> logging.Logger:
    """
    Set up the stdlib logger tree under ``name``.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to env var LOG_LEVEL
        log_format: "console" or "json". Defaults to env var LOG_FORMAT
        log_file: Optional file path for log output

    Returns:
        Configured logger instance
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if log_format is None:
        log_format = os.getenv("LOG_FORMAT", "console")

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers to avoid duplicates
    logger.handlers = []

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(log_format),
        ],
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
