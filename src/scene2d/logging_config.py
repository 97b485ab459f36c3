"""
Logging Configuration
=====================
Console and file output for the importer's loggers.

Why is this file needed?
------------------------
1. Every module logs through `logging.getLogger(__name__)`, so all importer
   records live under the 'scene2d' namespace; this is the one place that
   decides where they go.
2. The library never configures logging on import. Applications embedding the
   importer call `setup_logging` once, e.g. with logging.DEBUG to trace every
   definition and reuse of an import pass.

Exports:
    setup_logging: Attach a stdout handler (and optionally a file handler).
"""
import logging
import sys
from typing import Optional


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the logger for the 'scene2d' namespace.

    The library itself never calls this; applications embedding the importer do.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger("scene2d")
    logger.setLevel(level)

    # Avoid duplicate handlers when called repeatedly
    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    # Format: Time - Module - Level - Message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info("Logging initialized.")
    return logger
