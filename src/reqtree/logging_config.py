"""Logging setup driven by client settings."""

import logging
import sys

from .models.config import ClientSettings

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(settings: ClientSettings, verbose: bool = False) -> logging.Logger:
    """
    Configure the ``reqtree`` logger from settings.

    Log records go to stderr so that response bodies printed on stdout can
    be piped. Calling this again replaces the handlers installed by the
    previous call.

    Args:
        settings: Client settings providing ``log_level`` and ``log_file``
        verbose: Force DEBUG, including aiohttp's client logger

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level)
    logger = logging.getLogger("reqtree")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False
    logging.getLogger("aiohttp.client").setLevel(logging.DEBUG if verbose else logging.WARNING)

    return logger
