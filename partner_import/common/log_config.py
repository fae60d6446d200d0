"""
Logging Configuration

Attaches one stderr handler to the ``partner_import`` logger so that CLI
reports on stdout stay machine-readable. Handlers installed by a host
application (uvicorn, pytest's caplog) are left alone.
"""

import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "partner_import"
HANDLER_NAME = "partner_import.console"

LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"
VERBOSE_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(funcName)s]: %(message)s"

# HTTP libraries that log every connection at DEBUG/INFO
NOISY_LOGGERS = ("urllib3", "charset_normalizer")


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the package logger for a CLI run.

    Args:
        verbose: DEBUG level, timestamps, and HTTP library chatter
        quiet: WARNING level (ignored when verbose is set)
        stream: Output stream (defaults to sys.stderr)

    Returns:
        The ``partner_import`` logger
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Replace only our own handler on repeated calls
    for existing in [h for h in logger.handlers if h.get_name() == HANDLER_NAME]:
        logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(VERBOSE_LOG_FORMAT if verbose else LOG_FORMAT))
    logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    return logger
