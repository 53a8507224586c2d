"""Structured logging setup for the provider's loggers."""

import logging
import sys

from pythonjsonlogger import jsonlogger

PACKAGE_LOGGER = "jsonapi_provider"


def configure_logging(level: str = "INFO", json_format: bool = True) -> logging.Logger:
    """
    Attach a stdout handler to the package logger, emitting JSON records
    unless ``json_format`` is False. Calling it again only updates the level.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level.upper())

    # Prevent duplicate handlers if the logger is already configured
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    if json_format:
        formatter: logging.Formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s"
        )
    else:
        formatter = logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
