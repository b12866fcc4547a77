"""Logging helpers for sitecascade builds."""

from __future__ import annotations

import logging

_LOGGER_NAME = "sitecascade"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the sitecascade hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Attach console output to the package logger."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated CLI invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(
        logging.Formatter("[sitecascade] %(levelname)s %(message)s")
    )
    logger.addHandler(stream_handler)
    return logger


__all__ = ["configure_logging", "get_logger"]
